from .audit import AuditService
from .auth import PermissionResolver, Permissions
from .budget import BudgetService, ReconciliationResult, reconcile
from .expense import ExpenseSaveOutcome, ExpenseService
from .invoice import InvoiceService
from .risk import RiskService, compute_composite_risk
from .forecast import SpendForecast, forecast_spend
from .finance import FinanceService, ProjectFinanceSnapshot
from .project import ProjectService

__all__ = [
    "AuditService",
    "Permissions",
    "PermissionResolver",
    "ProjectService",
    "BudgetService",
    "ReconciliationResult",
    "reconcile",
    "ExpenseService",
    "ExpenseSaveOutcome",
    "InvoiceService",
    "RiskService",
    "compute_composite_risk",
    "SpendForecast",
    "forecast_spend",
    "FinanceService",
    "ProjectFinanceSnapshot",
]
