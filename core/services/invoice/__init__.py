from core.services.invoice.lifecycle import (
    InvoiceAggregates,
    aggregate_invoices,
    effective_status,
)
from core.services.invoice.service import InvoiceService

__all__ = ["InvoiceService", "InvoiceAggregates", "aggregate_invoices", "effective_status"]
