from core.services.money.tax import (
    PROVINCES,
    ExpenseTaxEstimate,
    ProvincialTax,
    calculate_provincial_tax,
    estimate_expense_tax,
    province_tax_rate_percent,
)
from core.services.money.totals import (
    InvoiceTotals,
    compute_invoice_totals,
    format_currency,
    format_percent,
    generate_invoice_number,
    round_currency,
)

__all__ = [
    "InvoiceTotals",
    "compute_invoice_totals",
    "generate_invoice_number",
    "round_currency",
    "format_currency",
    "format_percent",
    "PROVINCES",
    "ProvincialTax",
    "ExpenseTaxEstimate",
    "calculate_provincial_tax",
    "estimate_expense_tax",
    "province_tax_rate_percent",
]
