# infra/db/repositories.py
from infra.db.audit.repository import SqlAlchemyAuditLogRepository
from infra.db.budget.repository import SqlAlchemyBudgetAllocationRepository
from infra.db.expense.repository import SqlAlchemyExpenseRepository
from infra.db.invoice.repository import SqlAlchemyInvoiceRepository
from infra.db.project.repository import SqlAlchemyMembershipRepository, SqlAlchemyProjectRepository
from infra.db.risk.repository import SqlAlchemyRiskSampleRepository

__all__ = [
    "SqlAlchemyProjectRepository",
    "SqlAlchemyMembershipRepository",
    "SqlAlchemyBudgetAllocationRepository",
    "SqlAlchemyExpenseRepository",
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyRiskSampleRepository",
    "SqlAlchemyAuditLogRepository",
]
