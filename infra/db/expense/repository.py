from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from core.interfaces import ExpenseRepository
from core.models import Expense
from infra.db.expense.mapper import expense_from_orm, expense_to_orm
from infra.db.models import ExpenseORM


class SqlAlchemyExpenseRepository(ExpenseRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, expense: Expense) -> None:
        self.session.add(expense_to_orm(expense))

    def update(self, expense: Expense) -> None:
        obj = self.session.get(ExpenseORM, expense.id)
        if obj is None:
            raise NotFoundError("Expense not found.", code="EXPENSE_NOT_FOUND")
        obj.category = expense.category
        obj.amount = expense.amount
        obj.expense_date = expense.expense_date
        obj.vendor = expense.vendor
        obj.description = expense.description
        obj.receipt_ref = expense.receipt_ref
        obj.status = expense.status
        obj.approved_by = expense.approved_by
        obj.approved_at = expense.approved_at

    def delete(self, expense_id: str) -> None:
        self.session.query(ExpenseORM).filter_by(id=expense_id).delete()

    def get(self, expense_id: str) -> Optional[Expense]:
        obj = self.session.get(ExpenseORM, expense_id)
        return expense_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[Expense]:
        stmt = (
            select(ExpenseORM)
            .where(ExpenseORM.project_id == project_id)
            .order_by(ExpenseORM.expense_date.desc(), ExpenseORM.created_at.desc())
        )
        rows = self.session.execute(stmt).scalars().all()
        return [expense_from_orm(row) for row in rows]

    def list_by_projects(self, project_ids: Iterable[str]) -> List[Expense]:
        ids = list(project_ids)
        if not ids:
            return []
        stmt = select(ExpenseORM).where(ExpenseORM.project_id.in_(ids))
        rows = self.session.execute(stmt).scalars().all()
        return [expense_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyExpenseRepository"]
