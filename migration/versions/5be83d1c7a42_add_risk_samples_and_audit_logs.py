"""add risk samples and audit logs

Revision ID: 5be83d1c7a42
Revises: a1c4e2f90b17
Create Date: 2026-10-05
"""

from alembic import op
import sqlalchemy as sa


revision = "5be83d1c7a42"
down_revision = "a1c4e2f90b17"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "risk_samples",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("risk_type", sa.String(length=32), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("severity", sa.String(length=8), nullable=False),
        sa.Column("factors_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("valid_until", sa.DateTime(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("is_alert", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_risk_samples_project_type",
        "risk_samples",
        ["project_id", "risk_type"],
        unique=False,
    )
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(), nullable=False),
        sa.Column("actor_user_id", sa.String(), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("trace_id", sa.String(length=64), nullable=True),
        sa.Column("details_json", sa.Text(), nullable=False, server_default=sa.text("'{}'")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_occurred_at", "audit_logs", ["occurred_at"], unique=False)
    op.create_index("idx_audit_logs_project", "audit_logs", ["project_id"], unique=False)
    op.create_index(
        "idx_audit_logs_entity",
        "audit_logs",
        ["entity_type", "entity_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_audit_logs_entity", table_name="audit_logs")
    op.drop_index("idx_audit_logs_project", table_name="audit_logs")
    op.drop_index("idx_audit_logs_occurred_at", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_risk_samples_project_type", table_name="risk_samples")
    op.drop_table("risk_samples")
