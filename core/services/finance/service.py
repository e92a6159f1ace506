from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List

from core.events.domain_events import DomainEvents, domain_events
from core.exceptions import NotFoundError
from core.interfaces import (
    BudgetAllocationRepository,
    ExpenseRepository,
    InvoiceRepository,
    MembershipRepository,
    ProjectRepository,
)
from core.models import Project
from core.services.auth.authorization import require_read
from core.services.auth.permissions import Permissions
from core.services.budget.alerts import budget_alerts
from core.services.budget.reconciliation import reconcile
from core.services.expense.summary import summarize_expenses
from core.services.finance.cache import ProjectSnapshotCache
from core.services.finance.models import ProjectFinanceSnapshot
from core.services.forecast.forecaster import SpendForecast, forecast_portfolio, forecast_spend
from core.services.invoice.lifecycle import aggregate_invoices
from core.services.invoice.policy import default_currency

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FinanceService:
    """Project finance read models: reconciliation, invoicing, burn-rate forecast."""

    def __init__(
        self,
        *,
        project_repo: ProjectRepository,
        allocation_repo: BudgetAllocationRepository,
        expense_repo: ExpenseRepository,
        invoice_repo: InvoiceRepository,
        membership_repo: MembershipRepository | None = None,
        events: DomainEvents = domain_events,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._project_repo: ProjectRepository = project_repo
        self._allocation_repo: BudgetAllocationRepository = allocation_repo
        self._expense_repo: ExpenseRepository = expense_repo
        self._invoice_repo: InvoiceRepository = invoice_repo
        self._membership_repo: MembershipRepository | None = membership_repo
        self._clock = clock
        self._cache: ProjectSnapshotCache[ProjectFinanceSnapshot] = ProjectSnapshotCache(events)

    def get_project_finance(
        self,
        project_id: str,
        permissions: Permissions | None = None,
    ) -> ProjectFinanceSnapshot:
        if permissions is not None:
            require_read(permissions, project_id, operation_label="view project finance")
        return self._cache.get_or_build(
            project_id,
            lambda: self._build_snapshot(project_id),
            is_current=self._computed_today,
        )

    def forecast_project(self, project_id: str) -> SpendForecast:
        project = self._require_project(project_id)
        return forecast_spend(project, self._expense_repo.list_by_project(project_id), now=self._clock())

    def forecast_for_user(self, user_id: str) -> List[SpendForecast]:
        if self._membership_repo is None:
            return []
        project_ids = self._membership_repo.list_project_ids_for_user(user_id)
        if not project_ids:
            return []
        projects = self._project_repo.list_by_ids(project_ids)
        expenses = self._expense_repo.list_by_projects(project_ids)
        return forecast_portfolio(projects, expenses, now=self._clock())

    def invalidate(self, project_id: str) -> None:
        self._cache.invalidate(project_id)

    def close(self) -> None:
        self._cache.close()

    def _computed_today(self, snapshot: ProjectFinanceSnapshot) -> bool:
        # overdue totals and forecast day counts move with the calendar
        return snapshot.computed_at.date() == self._clock().date()

    def _build_snapshot(self, project_id: str) -> ProjectFinanceSnapshot:
        project = self._require_project(project_id)
        now = self._clock()
        try:
            allocations = self._allocation_repo.list_by_project(project_id)
            expenses = self._expense_repo.list_by_project(project_id)
            invoices = self._invoice_repo.list_by_project(project_id)
        except Exception:
            # a half-loaded snapshot would report silent zeros
            logger.exception("Finance snapshot fetch failed for project %s", project_id)
            raise

        result = reconcile(allocations, expenses)
        summary = summarize_expenses(expenses)
        total_budget = self._total_budget(project, result.total_budgeted)
        total_spent = summary.total
        utilization = (total_spent / total_budget * 100.0) if total_budget > 0 else 0.0

        return ProjectFinanceSnapshot(
            project_id=project.id,
            project_name=project.name,
            currency=project.currency or default_currency(),
            computed_at=now,
            total_budget=total_budget,
            total_spent=total_spent,
            utilization_percent=utilization,
            remaining=total_budget - total_spent,
            reconciliation=result,
            alerts=tuple(budget_alerts(result)),
            invoices=aggregate_invoices(invoices, now.date()),
            expenses=summary,
            forecast=forecast_spend(project, expenses, now=now),
        )

    @staticmethod
    def _total_budget(project: Project, allocated: float) -> float:
        # the project baseline wins; allocations stand in when none was set
        if project.budget is not None:
            return float(project.budget)
        return allocated

    def _require_project(self, project_id: str) -> Project:
        project = self._project_repo.get(project_id)
        if project is None:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        return project


__all__ = ["FinanceService"]
