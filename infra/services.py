from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.interfaces import ReceiptStore, RiskAnalysisClient
from core.services.audit import AuditService
from core.services.auth import PermissionResolver
from core.services.budget import BudgetService
from core.services.expense import ExpenseService
from core.services.finance import FinanceService
from core.services.invoice import InvoiceService
from core.services.project import ProjectService
from core.services.risk import RiskService
from infra.db.repositories import (
    SqlAlchemyAuditLogRepository,
    SqlAlchemyBudgetAllocationRepository,
    SqlAlchemyExpenseRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyMembershipRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyRiskSampleRepository,
)
from infra.operational_support import current_trace_id
from infra.receipts import LocalReceiptStore
from infra.risk_analysis import build_risk_analysis_client

_UNSET: Any = object()


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    permission_resolver: PermissionResolver
    audit_service: AuditService
    project_service: ProjectService
    budget_service: BudgetService
    expense_service: ExpenseService
    invoice_service: InvoiceService
    risk_service: RiskService
    finance_service: FinanceService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "permission_resolver": self.permission_resolver,
            "audit_service": self.audit_service,
            "project_service": self.project_service,
            "budget_service": self.budget_service,
            "expense_service": self.expense_service,
            "invoice_service": self.invoice_service,
            "risk_service": self.risk_service,
            "finance_service": self.finance_service,
        }


def build_service_graph(
    session: Session,
    *,
    receipt_store: ReceiptStore | None = _UNSET,
    analysis_client: RiskAnalysisClient | None = _UNSET,
) -> ServiceGraph:
    """
    Wire repositories and services around one session.

    Collaborators left unset fall back to the local receipt store and the
    HTTP risk client (only when ``CF_RISK_SERVICE_URL`` is configured).
    """
    if receipt_store is _UNSET:
        receipt_store = LocalReceiptStore()
    if analysis_client is _UNSET:
        analysis_client = build_risk_analysis_client()

    project_repo = SqlAlchemyProjectRepository(session)
    membership_repo = SqlAlchemyMembershipRepository(session)
    allocation_repo = SqlAlchemyBudgetAllocationRepository(session)
    expense_repo = SqlAlchemyExpenseRepository(session)
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    risk_repo = SqlAlchemyRiskSampleRepository(session)
    audit_repo = SqlAlchemyAuditLogRepository(session)

    audit_service = AuditService(session, audit_repo, trace_provider=current_trace_id)
    project_service = ProjectService(
        session,
        project_repo,
        membership_repo,
        audit_service=audit_service,
    )
    budget_service = BudgetService(
        session,
        project_repo,
        allocation_repo,
        expense_repo,
        membership_repo=membership_repo,
        audit_service=audit_service,
    )
    expense_service = ExpenseService(
        session,
        expense_repo,
        project_repo,
        receipt_store=receipt_store,
        audit_service=audit_service,
    )
    invoice_service = InvoiceService(
        session,
        invoice_repo,
        project_repo,
        audit_service=audit_service,
    )
    risk_service = RiskService(
        session,
        project_repo,
        risk_repo,
        analysis_client=analysis_client,
        audit_service=audit_service,
    )
    finance_service = FinanceService(
        project_repo=project_repo,
        allocation_repo=allocation_repo,
        expense_repo=expense_repo,
        invoice_repo=invoice_repo,
        membership_repo=membership_repo,
    )

    return ServiceGraph(
        session=session,
        permission_resolver=PermissionResolver(membership_repo),
        audit_service=audit_service,
        project_service=project_service,
        budget_service=budget_service,
        expense_service=expense_service,
        invoice_service=invoice_service,
        risk_service=risk_service,
        finance_service=finance_service,
    )


def build_service_dict(session: Session, **collaborators: Any) -> dict[str, Any]:
    return build_service_graph(session, **collaborators).as_dict()
