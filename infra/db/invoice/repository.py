from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from core.interfaces import InvoiceRepository
from core.models import Invoice
from infra.db.invoice.mapper import invoice_from_orm, invoice_to_orm
from infra.db.models import InvoiceORM


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, invoice: Invoice) -> None:
        self.session.add(invoice_to_orm(invoice))

    def update(self, invoice: Invoice) -> None:
        obj = self.session.get(InvoiceORM, invoice.id)
        if obj is None:
            raise NotFoundError("Invoice not found.", code="INVOICE_NOT_FOUND")
        obj.client_name = invoice.client_name
        obj.client_email = invoice.client_email
        obj.amount = invoice.amount
        obj.tax_amount = invoice.tax_amount
        obj.total_amount = invoice.total_amount
        obj.status = invoice.status
        obj.due_date = invoice.due_date
        obj.paid_date = invoice.paid_date
        obj.notes = invoice.notes

    def delete(self, invoice_id: str) -> None:
        self.session.query(InvoiceORM).filter_by(id=invoice_id).delete()

    def get(self, invoice_id: str) -> Optional[Invoice]:
        obj = self.session.get(InvoiceORM, invoice_id)
        return invoice_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[Invoice]:
        stmt = (
            select(InvoiceORM)
            .where(InvoiceORM.project_id == project_id)
            .order_by(InvoiceORM.created_at.desc())
        )
        rows = self.session.execute(stmt).scalars().all()
        return [invoice_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyInvoiceRepository"]
