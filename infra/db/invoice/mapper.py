from __future__ import annotations

from core.models import Invoice
from infra.db.models import InvoiceORM


def invoice_to_orm(invoice: Invoice) -> InvoiceORM:
    return InvoiceORM(
        id=invoice.id,
        project_id=invoice.project_id,
        invoice_number=invoice.invoice_number,
        client_name=invoice.client_name,
        client_email=invoice.client_email,
        amount=invoice.amount,
        tax_amount=invoice.tax_amount,
        total_amount=invoice.total_amount,
        status=invoice.status,
        due_date=invoice.due_date,
        paid_date=invoice.paid_date,
        notes=invoice.notes,
        created_at=invoice.created_at,
    )


def invoice_from_orm(obj: InvoiceORM) -> Invoice:
    # total_amount is derived on the domain side; the column is never read back
    return Invoice(
        id=obj.id,
        project_id=obj.project_id,
        invoice_number=obj.invoice_number,
        client_name=obj.client_name,
        client_email=obj.client_email,
        amount=obj.amount,
        tax_amount=obj.tax_amount,
        status=obj.status,
        due_date=obj.due_date,
        paid_date=obj.paid_date,
        notes=obj.notes,
        created_at=obj.created_at,
    )


__all__ = ["invoice_to_orm", "invoice_from_orm"]
