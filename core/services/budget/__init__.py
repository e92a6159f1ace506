from core.services.budget.alerts import BudgetAlert, budget_alerts
from core.services.budget.reconciliation import (
    CategoryLedger,
    ReconciliationResult,
    classify_budget_status,
    compute_percent_used,
    reconcile,
)
from core.services.budget.service import BudgetService

__all__ = [
    "BudgetService",
    "CategoryLedger",
    "ReconciliationResult",
    "reconcile",
    "classify_budget_status",
    "compute_percent_used",
    "BudgetAlert",
    "budget_alerts",
]
