# core/services/expense/service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError, ValidationError
from core.interfaces import ExpenseRepository, ProjectRepository, ReceiptStore
from core.models import Expense, ExpenseStatus
from core.services.auth.authorization import require_decision_role, require_read, require_write
from core.services.auth.permissions import Permissions
from core.services.common.base import ServiceBase
from core.services.common.validation import require_amount, require_text
from core.services.expense.state_machine import apply_decision
from core.services.expense.summary import ExpenseSummary, filter_expenses, summarize_expenses

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReceiptUpload:
    filename: str
    content: bytes


@dataclass(frozen=True)
class ExpenseSaveOutcome:
    """Result of a save that may attach a receipt after the row is written."""

    expense: Expense
    receipt_attached: bool
    receipt_error: str | None = None

    @property
    def partially_saved(self) -> bool:
        return self.receipt_error is not None

    @property
    def message(self) -> str:
        if self.receipt_error is not None:
            return f"Expense saved, but the receipt could not be attached: {self.receipt_error}"
        if self.receipt_attached:
            return "Expense saved with receipt."
        return "Expense saved."


_DECISION_ACTIONS = {
    ExpenseStatus.APPROVED: "expense.approve",
    ExpenseStatus.REJECTED: "expense.reject",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExpenseService(ServiceBase):
    def __init__(
        self,
        session: Session,
        expense_repo: ExpenseRepository,
        project_repo: ProjectRepository,
        receipt_store: ReceiptStore | None = None,
        audit_service=None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        super().__init__(session, audit_service)
        self._expense_repo = expense_repo
        self._project_repo = project_repo
        self._receipt_store = receipt_store
        self._clock = clock

    def create_expense(
        self,
        permissions: Permissions,
        project_id: str,
        category: str,
        amount: float,
        expense_date: date | None = None,
        vendor: str = "",
        description: str = "",
        receipt: ReceiptUpload | None = None,
    ) -> ExpenseSaveOutcome:
        require_write(permissions, project_id, operation_label="record expense")
        if not self._project_repo.get(project_id):
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        if expense_date is not None and not isinstance(expense_date, date):
            raise ValidationError("Expense date must be a valid date.", code="EXPENSE_DATE_INVALID")

        expense = Expense.create(
            project_id=project_id,
            category=require_text(category, field_label="Category", code="EXPENSE_CATEGORY_REQUIRED"),
            amount=require_amount(amount, field_label="Amount", code="EXPENSE_AMOUNT_INVALID"),
            expense_date=expense_date or self._clock().date(),
            vendor=(vendor or "").strip(),
            description=(description or "").strip(),
            created_by=permissions.user_id,
        )

        # row first with no receipt reference; the upload is patched in afterwards
        self._expense_repo.add(expense)
        self._commit()
        self._audit(
            action="expense.add",
            entity_type="expense",
            entity_id=expense.id,
            actor_user_id=permissions.user_id,
            project_id=project_id,
            details={"category": expense.category, "amount": expense.amount, "vendor": expense.vendor},
        )
        outcome = self._attach_receipt(expense, receipt)
        domain_events.expenses_changed.emit(project_id)
        return outcome

    def update_expense(
        self,
        permissions: Permissions,
        expense_id: str,
        *,
        category: str | None = None,
        amount: float | None = None,
        expense_date: date | None = None,
        vendor: str | None = None,
        description: str | None = None,
        receipt: ReceiptUpload | None = None,
    ) -> ExpenseSaveOutcome:
        expense = self._require_expense(expense_id)
        require_write(permissions, expense.project_id, operation_label="update expense")

        if category is not None:
            expense.category = require_text(
                category, field_label="Category", code="EXPENSE_CATEGORY_REQUIRED"
            )
        if amount is not None:
            expense.amount = require_amount(amount, field_label="Amount", code="EXPENSE_AMOUNT_INVALID")
        if expense_date is not None:
            if not isinstance(expense_date, date):
                raise ValidationError("Expense date must be a valid date.", code="EXPENSE_DATE_INVALID")
            expense.expense_date = expense_date
        if vendor is not None:
            expense.vendor = vendor.strip()
        if description is not None:
            expense.description = description.strip()

        self._expense_repo.update(expense)
        self._commit()
        self._audit(
            action="expense.update",
            entity_type="expense",
            entity_id=expense.id,
            actor_user_id=permissions.user_id,
            project_id=expense.project_id,
            details={"category": expense.category, "amount": expense.amount},
        )
        outcome = self._attach_receipt(expense, receipt)
        domain_events.expenses_changed.emit(expense.project_id)
        return outcome

    def attach_receipt(self, permissions: Permissions, expense_id: str, receipt: ReceiptUpload) -> ExpenseSaveOutcome:
        expense = self._require_expense(expense_id)
        require_write(permissions, expense.project_id, operation_label="attach receipt")
        outcome = self._attach_receipt(expense, receipt)
        domain_events.expenses_changed.emit(expense.project_id)
        return outcome

    def delete_expense(self, permissions: Permissions, expense_id: str) -> None:
        expense = self._require_expense(expense_id)
        require_write(permissions, expense.project_id, operation_label="delete expense")
        self._expense_repo.delete(expense_id)
        self._commit()
        self._audit(
            action="expense.delete",
            entity_type="expense",
            entity_id=expense.id,
            actor_user_id=permissions.user_id,
            project_id=expense.project_id,
            details={"category": expense.category, "amount": expense.amount},
        )
        domain_events.expenses_changed.emit(expense.project_id)

    def approve_expense(self, permissions: Permissions, expense_id: str) -> Expense:
        return self._decide(permissions, expense_id, ExpenseStatus.APPROVED)

    def reject_expense(self, permissions: Permissions, expense_id: str) -> Expense:
        return self._decide(permissions, expense_id, ExpenseStatus.REJECTED)

    def get_expense(self, expense_id: str) -> Expense:
        return self._require_expense(expense_id)

    def list_expenses(
        self,
        project_id: str,
        *,
        category: str | None = None,
        status: ExpenseStatus | str | None = None,
        permissions: Permissions | None = None,
    ) -> List[Expense]:
        if permissions is not None:
            require_read(permissions, project_id, operation_label="list expenses")
        expenses = self._expense_repo.list_by_project(project_id)
        expenses = filter_expenses(expenses, category=category, status=status)
        expenses.sort(key=lambda e: (e.expense_date, e.created_at), reverse=True)
        return expenses

    def summarize(self, project_id: str) -> ExpenseSummary:
        return summarize_expenses(self._expense_repo.list_by_project(project_id))

    def receipt_url(self, expense: Expense) -> str | None:
        if not expense.receipt_ref or self._receipt_store is None:
            return None
        return self._receipt_store.public_url(expense.receipt_ref)

    def _decide(self, permissions: Permissions, expense_id: str, target: ExpenseStatus) -> Expense:
        expense = self._require_expense(expense_id)
        label = "approve expense" if target == ExpenseStatus.APPROVED else "reject expense"
        require_decision_role(permissions, expense.project_id, operation_label=label)
        apply_decision(expense, target, decided_by=permissions.user_id, decided_at=self._clock())
        self._expense_repo.update(expense)
        self._commit()
        self._audit(
            action=_DECISION_ACTIONS[target],
            entity_type="expense",
            entity_id=expense.id,
            actor_user_id=permissions.user_id,
            project_id=expense.project_id,
            details={"status": expense.status.value, "amount": expense.amount},
        )
        logger.info("Expense %s %s by %s", expense.id, expense.status.value, permissions.user_id)
        domain_events.expenses_changed.emit(expense.project_id)
        return expense

    def _attach_receipt(self, expense: Expense, receipt: ReceiptUpload | None) -> ExpenseSaveOutcome:
        if receipt is None:
            return ExpenseSaveOutcome(expense=expense, receipt_attached=False)
        if self._receipt_store is None:
            logger.warning("Receipt for expense %s dropped: no receipt store configured", expense.id)
            return ExpenseSaveOutcome(
                expense=expense,
                receipt_attached=False,
                receipt_error="receipt storage is not configured",
            )
        try:
            ref = self._receipt_store.upload(expense.project_id, receipt.filename, receipt.content)
        except Exception as exc:
            # the expense row stays; it simply has no receipt reference
            logger.warning("Receipt upload failed for expense %s: %s", expense.id, exc)
            return ExpenseSaveOutcome(expense=expense, receipt_attached=False, receipt_error=str(exc) or "upload failed")

        previous_ref = expense.receipt_ref
        expense.receipt_ref = ref
        try:
            self._expense_repo.update(expense)
            self._commit()
        except Exception as exc:
            # blob is orphaned; the row keeps its previous reference
            logger.warning("Receipt reference patch failed for expense %s: %s", expense.id, exc)
            expense.receipt_ref = previous_ref
            return ExpenseSaveOutcome(expense=expense, receipt_attached=False, receipt_error=str(exc) or "save failed")
        return ExpenseSaveOutcome(expense=expense, receipt_attached=True)

    def _require_expense(self, expense_id: str) -> Expense:
        expense = self._expense_repo.get(expense_id)
        if expense is None:
            raise NotFoundError("Expense not found.", code="EXPENSE_NOT_FOUND")
        return expense


__all__ = ["ExpenseService", "ExpenseSaveOutcome", "ReceiptUpload"]
