from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from core.exceptions import BusinessRuleError
from core.models import Invoice, InvoiceStatus

UNCOLLECTED_STATUSES = frozenset({InvoiceStatus.DRAFT, InvoiceStatus.SENT, InvoiceStatus.OVERDUE})


@dataclass(frozen=True)
class InvoiceAggregates:
    total_invoiced: float
    total_paid: float
    total_pending: float
    total_overdue: float
    counts: dict[str, int] = field(default_factory=dict)


def effective_status(invoice: Invoice, today: date) -> InvoiceStatus:
    """Stored status, with ``overdue`` derived at read time from the due date."""
    if invoice.status == InvoiceStatus.PAID:
        return InvoiceStatus.PAID
    if invoice.status == InvoiceStatus.OVERDUE or invoice.is_overdue(today):
        return InvoiceStatus.OVERDUE
    return invoice.status


def mark_sent(invoice: Invoice) -> bool:
    """
    draft -> sent. Returns False when the invoice is already sent (no-op).
    Any other starting state is rejected.
    """
    if invoice.status == InvoiceStatus.SENT:
        return False
    if invoice.status != InvoiceStatus.DRAFT:
        raise BusinessRuleError(
            f"Only draft invoices can be sent (invoice is {invoice.status.value}).",
            code="INVOICE_NOT_DRAFT",
        )
    invoice.status = InvoiceStatus.SENT
    return True


def mark_paid(invoice: Invoice, paid_date: date) -> None:
    if invoice.status == InvoiceStatus.PAID:
        raise BusinessRuleError("Invoice is already paid.", code="INVOICE_ALREADY_PAID")
    invoice.status = InvoiceStatus.PAID
    invoice.paid_date = paid_date


def aggregate_invoices(invoices: Iterable[Invoice], today: date) -> InvoiceAggregates:
    total_invoiced = 0.0
    total_paid = 0.0
    total_pending = 0.0
    total_overdue = 0.0
    counts = {s.value: 0 for s in InvoiceStatus}
    for invoice in invoices:
        total = invoice.total_amount
        status = effective_status(invoice, today)
        counts[status.value] += 1
        total_invoiced += total
        if status == InvoiceStatus.PAID:
            total_paid += total
            continue
        # drafts count as not yet collected; overdue is a subset of pending
        total_pending += total
        if status == InvoiceStatus.OVERDUE:
            total_overdue += total
    return InvoiceAggregates(
        total_invoiced=total_invoiced,
        total_paid=total_paid,
        total_pending=total_pending,
        total_overdue=total_overdue,
        counts=counts,
    )


__all__ = [
    "InvoiceAggregates",
    "UNCOLLECTED_STATUSES",
    "effective_status",
    "mark_sent",
    "mark_paid",
    "aggregate_invoices",
]
