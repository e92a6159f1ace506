from __future__ import annotations

from datetime import datetime

from core.exceptions import BusinessRuleError
from core.models import Expense, ExpenseStatus

ALLOWED_TRANSITIONS: dict[ExpenseStatus, frozenset[ExpenseStatus]] = {
    ExpenseStatus.PENDING: frozenset({ExpenseStatus.APPROVED, ExpenseStatus.REJECTED}),
    ExpenseStatus.APPROVED: frozenset(),
    ExpenseStatus.REJECTED: frozenset(),
}


def can_transition(current: ExpenseStatus, target: ExpenseStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def apply_decision(
    expense: Expense,
    target: ExpenseStatus,
    *,
    decided_by: str,
    decided_at: datetime,
) -> Expense:
    """Move a pending expense to approved/rejected and stamp who decided it and when."""
    if not isinstance(target, ExpenseStatus):
        target = ExpenseStatus(str(target))
    if not can_transition(expense.status, target):
        if ALLOWED_TRANSITIONS.get(expense.status):
            raise BusinessRuleError(
                f"An expense cannot be moved from {expense.status.value} to {target.value}.",
                code="EXPENSE_INVALID_TRANSITION",
            )
        raise BusinessRuleError(
            f"Expense is already {expense.status.value}. Delete and recreate it to correct it.",
            code="EXPENSE_ALREADY_DECIDED",
        )
    expense.status = target
    expense.approved_by = decided_by
    expense.approved_at = decided_at
    return expense


__all__ = ["ALLOWED_TRANSITIONS", "can_transition", "apply_decision"]
