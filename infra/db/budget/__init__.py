from infra.db.budget.mapper import allocation_from_orm, allocation_to_orm
from infra.db.budget.repository import SqlAlchemyBudgetAllocationRepository

__all__ = ["allocation_to_orm", "allocation_from_orm", "SqlAlchemyBudgetAllocationRepository"]
