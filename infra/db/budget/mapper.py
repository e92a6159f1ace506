from __future__ import annotations

from core.models import BudgetAllocation
from infra.db.models import BudgetAllocationORM


def allocation_to_orm(allocation: BudgetAllocation) -> BudgetAllocationORM:
    return BudgetAllocationORM(
        id=allocation.id,
        project_id=allocation.project_id,
        category=allocation.category,
        budgeted_amount=allocation.budgeted_amount,
        notes=allocation.notes,
    )


def allocation_from_orm(obj: BudgetAllocationORM) -> BudgetAllocation:
    return BudgetAllocation(
        id=obj.id,
        project_id=obj.project_id,
        category=obj.category,
        budgeted_amount=obj.budgeted_amount,
        notes=obj.notes or "",
    )


__all__ = ["allocation_to_orm", "allocation_from_orm"]
