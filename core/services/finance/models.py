from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from core.services.budget.alerts import BudgetAlert
from core.services.budget.reconciliation import ReconciliationResult
from core.services.expense.summary import ExpenseSummary
from core.services.forecast.forecaster import SpendForecast
from core.services.invoice.lifecycle import InvoiceAggregates


@dataclass(frozen=True)
class ProjectFinanceSnapshot:
    project_id: str
    project_name: str
    currency: str
    computed_at: datetime
    total_budget: float
    total_spent: float
    utilization_percent: float
    remaining: float
    reconciliation: ReconciliationResult
    alerts: tuple[BudgetAlert, ...]
    invoices: InvoiceAggregates
    expenses: ExpenseSummary
    forecast: SpendForecast


__all__ = ["ProjectFinanceSnapshot"]
