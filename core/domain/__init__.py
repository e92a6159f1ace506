from core.domain.audit import AuditLogEntry
from core.domain.budget import BudgetAllocation
from core.domain.enums import (
    BudgetStatus,
    ExpenseStatus,
    ForecastStatus,
    InvoiceStatus,
    ProjectRole,
    ProjectStatus,
    Severity,
)
from core.domain.expense import Expense
from core.domain.identifiers import generate_id
from core.domain.invoice import Invoice
from core.domain.project import Project, ProjectMembership
from core.domain.risk import RiskSample

__all__ = [
    "generate_id",
    "ProjectStatus",
    "ProjectRole",
    "ExpenseStatus",
    "InvoiceStatus",
    "BudgetStatus",
    "Severity",
    "ForecastStatus",
    "Project",
    "ProjectMembership",
    "BudgetAllocation",
    "Expense",
    "Invoice",
    "RiskSample",
    "AuditLogEntry",
]
