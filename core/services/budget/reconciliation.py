from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from core.models import BudgetAllocation, BudgetStatus, Expense

WARNING_THRESHOLD_PERCENT = 75.0
CRITICAL_THRESHOLD_PERCENT = 90.0


@dataclass(frozen=True)
class CategoryLedger:
    project_id: str
    category: str
    budgeted: float
    spent: float
    remaining: float
    percent_used: float | None
    status: BudgetStatus | None
    notes: str = ""
    allocation_ids: tuple[str, ...] = ()
    expense_ids: tuple[str, ...] = ()

    @property
    def expense_count(self) -> int:
        return len(self.expense_ids)

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0


@dataclass(frozen=True)
class ReconciliationResult:
    categories: list[CategoryLedger]
    unlinked_expenses: list[Expense] = field(default_factory=list)

    @property
    def total_budgeted(self) -> float:
        return sum(c.budgeted for c in self.categories)

    @property
    def reconciled_spent(self) -> float:
        return sum(c.spent for c in self.categories)

    @property
    def unlinked_total(self) -> float:
        return sum(float(e.amount or 0.0) for e in self.unlinked_expenses)

    @property
    def total_spent(self) -> float:
        return self.reconciled_spent + self.unlinked_total

    def get(self, category: str, project_id: str | None = None) -> CategoryLedger | None:
        for ledger in self.categories:
            if ledger.category != category:
                continue
            if project_id is None or ledger.project_id == project_id:
                return ledger
        return None


def compute_percent_used(spent: float, budgeted: float) -> float | None:
    if budgeted <= 0:
        return None
    return spent / budgeted * 100


def classify_budget_status(percent_used: float | None) -> BudgetStatus | None:
    if percent_used is None:
        return None
    if percent_used >= CRITICAL_THRESHOLD_PERCENT:
        return BudgetStatus.CRITICAL
    if percent_used >= WARNING_THRESHOLD_PERCENT:
        return BudgetStatus.WARNING
    return BudgetStatus.ON_TRACK


def reconcile(
    allocations: Iterable[BudgetAllocation],
    expenses: Iterable[Expense],
) -> ReconciliationResult:
    """
    Match expenses to the allocation group they count against.

    Allocations are grouped by the exact ``(project_id, category)`` pair and
    summed. Every expense with the same pair counts toward ``spent`` whatever
    its approval status; approval only gates the audit trail. Expenses that
    match no group are returned as unlinked instead of being dropped.
    """
    groups: dict[tuple[str, str], dict] = {}
    for allocation in allocations:
        key = (allocation.project_id, allocation.category)
        group = groups.get(key)
        if group is None:
            group = {"budgeted": 0.0, "notes": [], "allocation_ids": [], "expense_ids": [], "spent": 0.0}
            groups[key] = group
        group["budgeted"] += float(allocation.budgeted_amount or 0.0)
        note = (allocation.notes or "").strip()
        if note:
            group["notes"].append(note)
        group["allocation_ids"].append(allocation.id)

    unlinked: list[Expense] = []
    for expense in expenses:
        group = groups.get((expense.project_id, expense.category))
        if group is None:
            unlinked.append(expense)
            continue
        group["spent"] += float(expense.amount or 0.0)
        group["expense_ids"].append(expense.id)

    ledgers: list[CategoryLedger] = []
    for (project_id, category), group in groups.items():
        budgeted = group["budgeted"]
        spent = group["spent"]
        percent_used = compute_percent_used(spent, budgeted)
        ledgers.append(
            CategoryLedger(
                project_id=project_id,
                category=category,
                budgeted=budgeted,
                spent=spent,
                remaining=budgeted - spent,
                percent_used=percent_used,
                status=classify_budget_status(percent_used),
                notes="; ".join(group["notes"]),
                allocation_ids=tuple(group["allocation_ids"]),
                expense_ids=tuple(group["expense_ids"]),
            )
        )
    return ReconciliationResult(categories=ledgers, unlinked_expenses=unlinked)


__all__ = [
    "CategoryLedger",
    "ReconciliationResult",
    "compute_percent_used",
    "classify_budget_status",
    "reconcile",
    "WARNING_THRESHOLD_PERCENT",
    "CRITICAL_THRESHOLD_PERCENT",
]
