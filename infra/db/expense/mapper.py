from __future__ import annotations

from core.models import Expense
from infra.db.models import ExpenseORM


def expense_to_orm(expense: Expense) -> ExpenseORM:
    return ExpenseORM(
        id=expense.id,
        project_id=expense.project_id,
        category=expense.category,
        amount=expense.amount,
        expense_date=expense.expense_date,
        vendor=expense.vendor,
        description=expense.description,
        receipt_ref=expense.receipt_ref,
        status=expense.status,
        created_by=expense.created_by,
        approved_by=expense.approved_by,
        approved_at=expense.approved_at,
        created_at=expense.created_at,
    )


def expense_from_orm(obj: ExpenseORM) -> Expense:
    return Expense(
        id=obj.id,
        project_id=obj.project_id,
        category=obj.category,
        amount=obj.amount,
        expense_date=obj.expense_date,
        vendor=obj.vendor or "",
        description=obj.description or "",
        receipt_ref=obj.receipt_ref,
        status=obj.status,
        created_by=obj.created_by,
        approved_by=obj.approved_by,
        approved_at=obj.approved_at,
        created_at=obj.created_at,
    )


__all__ = ["expense_to_orm", "expense_from_orm"]
