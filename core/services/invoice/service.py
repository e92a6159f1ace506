# core/services/invoice/service.py
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError, ValidationError
from core.interfaces import InvoiceRepository, ProjectRepository
from core.models import Invoice
from core.services.auth.authorization import require_write
from core.services.auth.permissions import Permissions
from core.services.common.base import ServiceBase
from core.services.common.validation import require_text
from core.services.invoice import lifecycle
from core.services.invoice.lifecycle import InvoiceAggregates
from core.services.invoice.policy import default_tax_rate_percent
from core.services.money.totals import compute_invoice_totals, generate_invoice_number

logger = logging.getLogger(__name__)


class InvoiceService(ServiceBase):
    def __init__(
        self,
        session: Session,
        invoice_repo: InvoiceRepository,
        project_repo: ProjectRepository,
        audit_service=None,
        today: Callable[[], date] = date.today,
        number_generator: Callable[[str], str] = generate_invoice_number,
    ):
        super().__init__(session, audit_service)
        self._invoice_repo = invoice_repo
        self._project_repo = project_repo
        self._today = today
        self._number_generator = number_generator

    def create_invoice(
        self,
        permissions: Permissions,
        project_id: str,
        client_name: str,
        amount: float,
        tax_rate_percent: float | None = None,
        due_date: date | None = None,
        notes: str | None = None,
        client_email: str | None = None,
    ) -> Invoice:
        require_write(permissions, project_id, operation_label="create invoice")
        project = self._project_repo.get(project_id)
        if project is None:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        client = require_text(client_name, field_label="Client name", code="INVOICE_CLIENT_REQUIRED")
        if due_date is not None and not isinstance(due_date, date):
            raise ValidationError("Due date must be a valid date.", code="INVOICE_DUE_DATE_INVALID")
        rate = default_tax_rate_percent() if tax_rate_percent is None else tax_rate_percent
        totals = compute_invoice_totals(amount, rate)

        invoice = Invoice.create(
            project_id=project_id,
            invoice_number=self._number_generator(project.name),
            client_name=client,
            amount=totals.amount,
            tax_amount=totals.tax_amount,
            client_email=(client_email or "").strip() or None,
            due_date=due_date,
            notes=(notes or "").strip() or None,
        )
        self._invoice_repo.add(invoice)
        self._commit()
        self._audit(
            action="invoice.add",
            entity_type="invoice",
            entity_id=invoice.id,
            actor_user_id=permissions.user_id,
            project_id=project_id,
            details={
                "invoice_number": invoice.invoice_number,
                "amount": invoice.amount,
                "tax_amount": invoice.tax_amount,
            },
        )
        domain_events.invoices_changed.emit(project_id)
        return invoice

    def mark_sent(self, permissions: Permissions, invoice_id: str) -> Invoice:
        invoice = self._require_invoice(invoice_id)
        require_write(permissions, invoice.project_id, operation_label="send invoice")
        if not lifecycle.mark_sent(invoice):
            logger.info("Invoice %s already sent; nothing to do", invoice.invoice_number)
            return invoice
        self._save(invoice, permissions, action="invoice.send")
        return invoice

    def mark_paid(self, permissions: Permissions, invoice_id: str, paid_date: date | None = None) -> Invoice:
        invoice = self._require_invoice(invoice_id)
        require_write(permissions, invoice.project_id, operation_label="mark invoice paid")
        if paid_date is not None and not isinstance(paid_date, date):
            raise ValidationError("Paid date must be a valid date.", code="INVOICE_PAID_DATE_INVALID")
        lifecycle.mark_paid(invoice, paid_date or self._today())
        self._save(invoice, permissions, action="invoice.pay")
        return invoice

    def delete_invoice(self, permissions: Permissions, invoice_id: str) -> None:
        invoice = self._require_invoice(invoice_id)
        require_write(permissions, invoice.project_id, operation_label="delete invoice")
        self._invoice_repo.delete(invoice_id)
        self._commit()
        self._audit(
            action="invoice.delete",
            entity_type="invoice",
            entity_id=invoice.id,
            actor_user_id=permissions.user_id,
            project_id=invoice.project_id,
            details={"invoice_number": invoice.invoice_number},
        )
        domain_events.invoices_changed.emit(invoice.project_id)

    def get_invoice(self, invoice_id: str) -> Invoice:
        return self._require_invoice(invoice_id)

    def list_invoices(self, project_id: str) -> List[Invoice]:
        invoices = self._invoice_repo.list_by_project(project_id)
        invoices.sort(key=lambda inv: inv.created_at, reverse=True)
        return invoices

    def get_aggregates(self, project_id: str, *, today: date | None = None) -> InvoiceAggregates:
        return lifecycle.aggregate_invoices(
            self._invoice_repo.list_by_project(project_id),
            today or self._today(),
        )

    def _save(self, invoice: Invoice, permissions: Permissions, *, action: str) -> None:
        self._invoice_repo.update(invoice)
        self._commit()
        self._audit(
            action=action,
            entity_type="invoice",
            entity_id=invoice.id,
            actor_user_id=permissions.user_id,
            project_id=invoice.project_id,
            details={"invoice_number": invoice.invoice_number, "status": invoice.status.value},
        )
        domain_events.invoices_changed.emit(invoice.project_id)

    def _require_invoice(self, invoice_id: str) -> Invoice:
        invoice = self._invoice_repo.get(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found.", code="INVOICE_NOT_FOUND")
        return invoice


__all__ = ["InvoiceService"]
