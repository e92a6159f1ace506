# core/services/budget/service.py
from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError
from core.interfaces import (
    BudgetAllocationRepository,
    ExpenseRepository,
    MembershipRepository,
    ProjectRepository,
)
from core.models import BudgetAllocation
from core.services.auth.authorization import require_read, require_write
from core.services.auth.permissions import Permissions
from core.services.budget.reconciliation import ReconciliationResult, reconcile
from core.services.common.base import ServiceBase
from core.services.common.validation import require_amount, require_text

logger = logging.getLogger(__name__)


class BudgetService(ServiceBase):
    def __init__(
        self,
        session: Session,
        project_repo: ProjectRepository,
        allocation_repo: BudgetAllocationRepository,
        expense_repo: ExpenseRepository,
        membership_repo: MembershipRepository | None = None,
        audit_service=None,
    ):
        super().__init__(session, audit_service)
        self._project_repo = project_repo
        self._allocation_repo = allocation_repo
        self._expense_repo = expense_repo
        self._membership_repo = membership_repo

    def add_allocation(
        self,
        permissions: Permissions,
        project_id: str,
        category: str,
        budgeted_amount: float,
        notes: str = "",
    ) -> BudgetAllocation:
        require_write(permissions, project_id, operation_label="add budget allocation")
        if not self._project_repo.get(project_id):
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        allocation = BudgetAllocation.create(
            project_id=project_id,
            category=require_text(category, field_label="Category", code="BUDGET_CATEGORY_REQUIRED"),
            budgeted_amount=require_amount(
                budgeted_amount, field_label="Budgeted amount", code="BUDGET_AMOUNT_INVALID"
            ),
            notes=(notes or "").strip(),
        )
        self._allocation_repo.add(allocation)
        self._commit()
        self._audit(
            action="budget.add",
            entity_type="budget_allocation",
            entity_id=allocation.id,
            actor_user_id=permissions.user_id,
            project_id=project_id,
            details={"category": allocation.category, "budgeted_amount": allocation.budgeted_amount},
        )
        domain_events.budget_changed.emit(project_id)
        return allocation

    def update_allocation(
        self,
        permissions: Permissions,
        allocation_id: str,
        *,
        category: str | None = None,
        budgeted_amount: float | None = None,
        notes: str | None = None,
    ) -> BudgetAllocation:
        allocation = self._require_allocation(allocation_id)
        require_write(permissions, allocation.project_id, operation_label="update budget allocation")
        if category is not None:
            allocation.category = require_text(
                category, field_label="Category", code="BUDGET_CATEGORY_REQUIRED"
            )
        if budgeted_amount is not None:
            allocation.budgeted_amount = require_amount(
                budgeted_amount, field_label="Budgeted amount", code="BUDGET_AMOUNT_INVALID"
            )
        if notes is not None:
            allocation.notes = notes.strip()
        self._allocation_repo.update(allocation)
        self._commit()
        self._audit(
            action="budget.update",
            entity_type="budget_allocation",
            entity_id=allocation.id,
            actor_user_id=permissions.user_id,
            project_id=allocation.project_id,
            details={"category": allocation.category, "budgeted_amount": allocation.budgeted_amount},
        )
        domain_events.budget_changed.emit(allocation.project_id)
        return allocation

    def delete_allocation(self, permissions: Permissions, allocation_id: str) -> None:
        allocation = self._require_allocation(allocation_id)
        require_write(permissions, allocation.project_id, operation_label="delete budget allocation")
        self._allocation_repo.delete(allocation_id)
        self._commit()
        self._audit(
            action="budget.delete",
            entity_type="budget_allocation",
            entity_id=allocation.id,
            actor_user_id=permissions.user_id,
            project_id=allocation.project_id,
            details={"category": allocation.category},
        )
        domain_events.budget_changed.emit(allocation.project_id)

    def list_allocations(self, project_id: str) -> List[BudgetAllocation]:
        return self._allocation_repo.list_by_project(project_id)

    def reconcile_project(self, project_id: str, permissions: Permissions | None = None) -> ReconciliationResult:
        if permissions is not None:
            require_read(permissions, project_id, operation_label="view budget reconciliation")
        if not self._project_repo.get(project_id):
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        try:
            allocations = self._allocation_repo.list_by_project(project_id)
            expenses = self._expense_repo.list_by_project(project_id)
        except Exception:
            # never reconcile against a half-loaded snapshot
            logger.exception("Budget snapshot fetch failed for project %s", project_id)
            raise
        return reconcile(allocations, expenses)

    def reconcile_for_user(self, user_id: str) -> ReconciliationResult:
        """Reconcile every project the user is a member of in one pass."""
        if self._membership_repo is None:
            raise NotFoundError("Membership lookup is not configured.", code="MEMBERSHIP_UNAVAILABLE")
        project_ids = self._membership_repo.list_project_ids_for_user(user_id)
        if not project_ids:
            return ReconciliationResult(categories=[])
        try:
            allocations = self._allocation_repo.list_by_projects(project_ids)
            expenses = self._expense_repo.list_by_projects(project_ids)
        except Exception:
            logger.exception("Budget snapshot fetch failed for user %s", user_id)
            raise
        return reconcile(allocations, expenses)

    def _require_allocation(self, allocation_id: str) -> BudgetAllocation:
        allocation = self._allocation_repo.get(allocation_id)
        if allocation is None:
            raise NotFoundError("Budget allocation not found.", code="BUDGET_ALLOCATION_NOT_FOUND")
        return allocation


__all__ = ["BudgetService"]
