from infra.db.expense.mapper import expense_from_orm, expense_to_orm
from infra.db.expense.repository import SqlAlchemyExpenseRepository

__all__ = ["expense_to_orm", "expense_from_orm", "SqlAlchemyExpenseRepository"]
