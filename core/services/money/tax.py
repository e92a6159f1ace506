from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from core.exceptions import ValidationError
from core.models import Expense


@dataclass(frozen=True)
class ProvinceTaxConfig:
    code: str
    name: str
    tax_type: str  # "HST" or "GST+PST"
    gst_rate: float
    pst_rate: float
    hst_rate: float
    description: str


PROVINCES: dict[str, ProvinceTaxConfig] = {
    p.code: p
    for p in (
        ProvinceTaxConfig("ON", "Ontario", "HST", 0.0, 0.0, 0.13, "13% HST"),
        ProvinceTaxConfig("NB", "New Brunswick", "HST", 0.0, 0.0, 0.15, "15% HST"),
        ProvinceTaxConfig("NS", "Nova Scotia", "HST", 0.0, 0.0, 0.15, "15% HST"),
        ProvinceTaxConfig("PE", "Prince Edward Island", "HST", 0.0, 0.0, 0.15, "15% HST"),
        ProvinceTaxConfig("NL", "Newfoundland and Labrador", "HST", 0.0, 0.0, 0.15, "15% HST"),
        ProvinceTaxConfig("BC", "British Columbia", "GST+PST", 0.05, 0.07, 0.0, "5% GST + 7% PST"),
        ProvinceTaxConfig("SK", "Saskatchewan", "GST+PST", 0.05, 0.06, 0.0, "5% GST + 6% PST"),
        ProvinceTaxConfig("MB", "Manitoba", "GST+PST", 0.05, 0.07, 0.0, "5% GST + 7% PST"),
        ProvinceTaxConfig("QC", "Quebec", "GST+PST", 0.05, 0.09975, 0.0, "5% GST + 9.975% QST"),
        ProvinceTaxConfig("AB", "Alberta", "GST+PST", 0.05, 0.0, 0.0, "5% GST only"),
        ProvinceTaxConfig("NT", "Northwest Territories", "GST+PST", 0.05, 0.0, 0.0, "5% GST only"),
        ProvinceTaxConfig("NU", "Nunavut", "GST+PST", 0.05, 0.0, 0.0, "5% GST only"),
        ProvinceTaxConfig("YT", "Yukon", "GST+PST", 0.05, 0.0, 0.0, "5% GST only"),
    )
}


@dataclass(frozen=True)
class ProvincialTax:
    province: str
    tax_type: str
    subtotal: float
    gst: float
    pst: float
    hst: float

    @property
    def total_tax(self) -> float:
        return self.gst + self.pst + self.hst

    @property
    def total(self) -> float:
        return self.subtotal + self.total_tax


@dataclass(frozen=True)
class ExpenseTaxEstimate:
    province: str
    total_expenses: float
    gst: float
    pst: float
    hst: float
    by_category: dict[str, float]

    @property
    def total_tax(self) -> float:
        return self.gst + self.pst + self.hst


def get_province(code: str) -> ProvinceTaxConfig:
    province = PROVINCES.get((code or "").strip().upper())
    if province is None:
        raise ValidationError(f"Unknown province code: {code!r}.", code="TAX_PROVINCE_UNKNOWN")
    return province


def province_tax_rate_percent(code: str) -> float:
    """Combined sales-tax rate for a province, as a percent suitable for an invoice."""
    p = get_province(code)
    return (p.hst_rate + p.gst_rate + p.pst_rate) * 100


def calculate_provincial_tax(subtotal: float, province_code: str) -> ProvincialTax:
    subtotal = float(subtotal)
    if subtotal < 0:
        raise ValidationError("Subtotal cannot be negative.", code="TAX_SUBTOTAL_NEGATIVE")
    p = get_province(province_code)
    if p.tax_type == "HST":
        return ProvincialTax(p.name, p.tax_type, subtotal, 0.0, 0.0, subtotal * p.hst_rate)
    return ProvincialTax(
        p.name,
        p.tax_type,
        subtotal,
        subtotal * p.gst_rate,
        subtotal * p.pst_rate,
        0.0,
    )


def estimate_expense_tax(expenses: Iterable[Expense], province_code: str) -> ExpenseTaxEstimate:
    by_category: dict[str, float] = {}
    total = 0.0
    for expense in expenses:
        category = (expense.category or "").strip() or "Uncategorized"
        by_category[category] = by_category.get(category, 0.0) + float(expense.amount or 0.0)
        total += float(expense.amount or 0.0)
    tax = calculate_provincial_tax(total, province_code)
    return ExpenseTaxEstimate(
        province=tax.province,
        total_expenses=total,
        gst=tax.gst,
        pst=tax.pst,
        hst=tax.hst,
        by_category=by_category,
    )


__all__ = [
    "PROVINCES",
    "ProvinceTaxConfig",
    "ProvincialTax",
    "ExpenseTaxEstimate",
    "get_province",
    "province_tax_rate_percent",
    "calculate_provincial_tax",
    "estimate_expense_tax",
]
