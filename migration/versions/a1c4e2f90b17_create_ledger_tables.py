"""create ledger tables

Revision ID: a1c4e2f90b17
Revises:
Create Date: 2026-09-28
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1c4e2f90b17"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("budget", sa.Float(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=9), nullable=False, server_default=sa.text("'planning'")),
        sa.Column("currency", sa.String(length=8), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "project_memberships",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=6), nullable=False, server_default=sa.text("'member'")),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_memberships_project_user",
        "project_memberships",
        ["project_id", "user_id"],
        unique=True,
    )
    op.create_index("idx_memberships_user", "project_memberships", ["user_id"], unique=False)

    op.create_table(
        "budget_allocations",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("budgeted_amount", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("notes", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_allocations_project_category",
        "budget_allocations",
        ["project_id", "category"],
        unique=False,
    )

    op.create_table(
        "expenses",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("vendor", sa.String(), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("receipt_ref", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=8), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_expenses_project_category", "expenses", ["project_id", "category"], unique=False)

    op.create_table(
        "invoices",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("invoice_number", sa.String(length=32), nullable=False),
        sa.Column("client_name", sa.String(), nullable=False),
        sa.Column("client_email", sa.String(), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("tax_amount", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=7), nullable=False, server_default=sa.text("'draft'")),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_invoices_project", "invoices", ["project_id"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_invoices_project", table_name="invoices")
    op.drop_table("invoices")
    op.drop_index("idx_expenses_project_category", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("idx_allocations_project_category", table_name="budget_allocations")
    op.drop_table("budget_allocations")
    op.drop_index("idx_memberships_user", table_name="project_memberships")
    op.drop_index("idx_memberships_project_user", table_name="project_memberships")
    op.drop_table("project_memberships")
    op.drop_table("projects")
