from __future__ import annotations

from enum import Enum


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"


class ProjectRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class ExpenseStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


class BudgetStatus(str, Enum):
    ON_TRACK = "on-track"
    WARNING = "warning"
    CRITICAL = "critical"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ForecastStatus(str, Enum):
    ON_TRACK = "on-track"
    AT_RISK = "at-risk"
    OVER_BUDGET = "over-budget"


__all__ = [
    "ProjectStatus",
    "ProjectRole",
    "ExpenseStatus",
    "InvoiceStatus",
    "BudgetStatus",
    "Severity",
    "ForecastStatus",
]
