from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from core.interfaces import BudgetAllocationRepository
from core.models import BudgetAllocation
from infra.db.budget.mapper import allocation_from_orm, allocation_to_orm
from infra.db.models import BudgetAllocationORM


class SqlAlchemyBudgetAllocationRepository(BudgetAllocationRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, allocation: BudgetAllocation) -> None:
        self.session.add(allocation_to_orm(allocation))

    def update(self, allocation: BudgetAllocation) -> None:
        obj = self.session.get(BudgetAllocationORM, allocation.id)
        if obj is None:
            raise NotFoundError("Budget allocation not found.", code="ALLOCATION_NOT_FOUND")
        obj.category = allocation.category
        obj.budgeted_amount = allocation.budgeted_amount
        obj.notes = allocation.notes

    def delete(self, allocation_id: str) -> None:
        self.session.query(BudgetAllocationORM).filter_by(id=allocation_id).delete()

    def get(self, allocation_id: str) -> Optional[BudgetAllocation]:
        obj = self.session.get(BudgetAllocationORM, allocation_id)
        return allocation_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[BudgetAllocation]:
        stmt = select(BudgetAllocationORM).where(BudgetAllocationORM.project_id == project_id)
        rows = self.session.execute(stmt).scalars().all()
        return [allocation_from_orm(row) for row in rows]

    def list_by_projects(self, project_ids: Iterable[str]) -> List[BudgetAllocation]:
        ids = list(project_ids)
        if not ids:
            return []
        stmt = select(BudgetAllocationORM).where(BudgetAllocationORM.project_id.in_(ids))
        rows = self.session.execute(stmt).scalars().all()
        return [allocation_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyBudgetAllocationRepository"]
