from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from core.exceptions import ValidationError
from core.models import Expense, ExpenseStatus


@dataclass(frozen=True)
class ExpenseSummary:
    total: float
    approved_total: float
    pending_total: float
    rejected_total: float
    counts: dict[str, int] = field(default_factory=dict)
    by_category: dict[str, float] = field(default_factory=dict)


def filter_expenses(
    expenses: Iterable[Expense],
    *,
    category: str | None = None,
    status: ExpenseStatus | str | None = None,
) -> list[Expense]:
    if status is not None and not isinstance(status, ExpenseStatus):
        try:
            status = ExpenseStatus(str(status).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(s.value for s in ExpenseStatus)
            raise ValidationError(
                f"Unknown expense status '{status}'. Use one of: {allowed}.",
                code="EXPENSE_STATUS_INVALID",
            ) from exc
    out: list[Expense] = []
    for expense in expenses:
        if category not in (None, "all") and expense.category != category:
            continue
        if status is not None and expense.status != status:
            continue
        out.append(expense)
    return out


def summarize_expenses(expenses: Iterable[Expense]) -> ExpenseSummary:
    totals = {s: 0.0 for s in ExpenseStatus}
    counts = {s.value: 0 for s in ExpenseStatus}
    by_category: dict[str, float] = {}
    for expense in expenses:
        amount = float(expense.amount or 0.0)
        totals[expense.status] += amount
        counts[expense.status.value] += 1
        by_category[expense.category] = by_category.get(expense.category, 0.0) + amount
    return ExpenseSummary(
        total=sum(totals.values()),
        approved_total=totals[ExpenseStatus.APPROVED],
        pending_total=totals[ExpenseStatus.PENDING],
        rejected_total=totals[ExpenseStatus.REJECTED],
        counts=counts,
        by_category=by_category,
    )


__all__ = ["ExpenseSummary", "filter_expenses", "summarize_expenses"]
