from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import InvoiceStatus
from core.domain.identifiers import generate_id


@dataclass
class Invoice:
    id: str
    project_id: str
    invoice_number: str
    client_name: str
    amount: float
    tax_amount: float = 0.0
    client_email: Optional[str] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_amount(self) -> float:
        return self.amount + self.tax_amount

    def is_overdue(self, today: date) -> bool:
        if self.status == InvoiceStatus.PAID or self.due_date is None:
            return False
        return self.due_date < today

    @staticmethod
    def create(
        project_id: str,
        invoice_number: str,
        client_name: str,
        amount: float,
        tax_amount: float,
        client_email: Optional[str] = None,
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> "Invoice":
        return Invoice(
            id=generate_id(),
            project_id=project_id,
            invoice_number=invoice_number,
            client_name=client_name,
            amount=amount,
            tax_amount=tax_amount,
            client_email=client_email,
            due_date=due_date,
            notes=notes,
        )


__all__ = ["Invoice"]
