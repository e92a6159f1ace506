from __future__ import annotations

from dataclasses import dataclass

from core.models import BudgetStatus
from core.services.budget.reconciliation import ReconciliationResult


@dataclass(frozen=True)
class BudgetAlert:
    project_id: str
    category: str
    status: BudgetStatus
    percent_used: float
    message: str


def budget_alerts(result: ReconciliationResult) -> list[BudgetAlert]:
    alerts: list[BudgetAlert] = []
    for ledger in result.categories:
        if ledger.status not in (BudgetStatus.WARNING, BudgetStatus.CRITICAL):
            continue
        pct = float(ledger.percent_used or 0.0)
        if ledger.status == BudgetStatus.CRITICAL:
            message = f"{pct:.1f}% of budget used - immediate attention required"
        else:
            message = f"{pct:.1f}% of budget used - monitor closely"
        alerts.append(
            BudgetAlert(
                project_id=ledger.project_id,
                category=ledger.category,
                status=ledger.status,
                percent_used=pct,
                message=message,
            )
        )
    # critical first, then highest usage
    alerts.sort(key=lambda a: (a.status != BudgetStatus.CRITICAL, -a.percent_used))
    return alerts


__all__ = ["BudgetAlert", "budget_alerts"]
