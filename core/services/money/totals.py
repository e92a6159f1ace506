from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from core.exceptions import ValidationError

_DOLLAR_CURRENCIES = {"CAD", "USD", "AUD", "NZD"}


@dataclass(frozen=True)
class InvoiceTotals:
    amount: float
    tax_rate_percent: float
    tax_amount: float
    total_amount: float


def compute_invoice_totals(amount: float, tax_rate_percent: float) -> InvoiceTotals:
    """
    Tax and total for an invoice subtotal.

    Values are kept at full float precision; use ``round_currency`` or
    ``format_currency`` only when presenting them.
    """
    amount = float(amount)
    tax_rate_percent = float(tax_rate_percent)
    if amount < 0:
        raise ValidationError("Invoice amount cannot be negative.", code="INVOICE_AMOUNT_NEGATIVE")
    if tax_rate_percent < 0:
        raise ValidationError("Tax rate cannot be negative.", code="INVOICE_TAX_RATE_NEGATIVE")
    tax_amount = amount * tax_rate_percent / 100
    return InvoiceTotals(
        amount=amount,
        tax_rate_percent=tax_rate_percent,
        tax_amount=tax_amount,
        total_amount=amount + tax_amount,
    )


def generate_invoice_number(project_name: str, now_ms: int | None = None) -> str:
    # INV-<PRE>-<last 6 digits of a millisecond timestamp>; unique only in practice
    prefix = (project_name or "")[:3].upper().replace(" ", "") or "PRJ"
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    stamp = str(int(now_ms))[-6:].rjust(6, "0")
    return f"INV-{prefix}-{stamp}"


def round_currency(value: float, digits: int = 2) -> float:
    quantum = Decimal(1).scaleb(-int(digits))
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_currency(
    value: float,
    currency: str | None = "CAD",
    *,
    min_fraction_digits: int = 0,
    max_fraction_digits: int = 2,
) -> str:
    code = (currency or "").strip().upper() or "CAD"
    rounded = round_currency(abs(value), max_fraction_digits)
    text = f"{rounded:,.{max_fraction_digits}f}"
    if max_fraction_digits > min_fraction_digits and "." in text:
        whole, frac = text.split(".")
        frac = frac.rstrip("0")
        if len(frac) < min_fraction_digits:
            frac = frac.ljust(min_fraction_digits, "0")
        text = f"{whole}.{frac}" if frac else whole
    sign = "-" if value < 0 and rounded != 0 else ""
    if code in _DOLLAR_CURRENCIES:
        return f"{sign}${text}"
    return f"{sign}{code} {text}"


def format_percent(value: float | None, digits: int = 1) -> str:
    if value is None:
        return "N/A"
    return f"{value:.{digits}f}%"


__all__ = [
    "InvoiceTotals",
    "compute_invoice_totals",
    "generate_invoice_number",
    "round_currency",
    "format_currency",
    "format_percent",
]
