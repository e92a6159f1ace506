from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import AuthorizationError, BusinessRuleError, ValidationError
from core.models import Invoice, InvoiceStatus
from core.services.invoice import aggregate_invoices, effective_status
from core.services.money.tax import (
    calculate_provincial_tax,
    estimate_expense_tax,
    province_tax_rate_percent,
)
from core.services.money.totals import (
    compute_invoice_totals,
    format_currency,
    generate_invoice_number,
    round_currency,
)


def test_totals_for_standard_rate():
    totals = compute_invoice_totals(1000, 13)
    assert totals.tax_amount == pytest.approx(130.0)
    assert totals.total_amount == pytest.approx(1130.0)


def test_totals_keep_full_precision_until_display():
    totals = compute_invoice_totals(0.1, 13)
    assert totals.tax_amount == pytest.approx(0.013)
    assert round_currency(totals.total_amount) == 0.11
    assert format_currency(1234.5, "CAD") == "$1,234.5"
    assert format_currency(-20, "EUR") == "-EUR 20"


def test_negative_amounts_are_rejected():
    with pytest.raises(ValidationError):
        compute_invoice_totals(-1, 13)
    with pytest.raises(ValidationError):
        compute_invoice_totals(10, -1)


def test_invoice_number_format():
    assert generate_invoice_number("harbour tower", now_ms=1700000123456) == "INV-HAR-123456"
    assert generate_invoice_number("A B", now_ms=42) == "INV-AB-000042"
    assert generate_invoice_number("", now_ms=1) == "INV-PRJ-000001"


def test_create_invoice_uses_configured_tax_rate(services, team, monkeypatch):
    monkeypatch.setenv("CF_DEFAULT_TAX_RATE", "5")
    invoice = services["invoice_service"].create_invoice(
        team.perms("member"), team.project.id, "Client Co", 200.0, due_date=date(2024, 6, 1)
    )
    assert invoice.tax_amount == pytest.approx(10.0)
    assert invoice.total_amount == pytest.approx(210.0)
    assert invoice.status == InvoiceStatus.DRAFT
    assert invoice.invoice_number.startswith("INV-HAR-")


def test_mark_sent_is_idempotent(services, team):
    inv = services["invoice_service"]
    perms = team.perms("member")
    invoice = inv.create_invoice(perms, team.project.id, "Client Co", 1000.0, tax_rate_percent=13)

    inv.mark_sent(perms, invoice.id)
    again = inv.mark_sent(perms, invoice.id)

    assert again.status == InvoiceStatus.SENT
    assert inv.get_invoice(invoice.id).status == InvoiceStatus.SENT
    audit = services["audit_service"].list_recent(project_id=team.project.id, entity_type="invoice")
    assert [e.action for e in audit].count("invoice.send") == 1


def test_draft_can_be_paid_directly(services, team):
    inv = services["invoice_service"]
    perms = team.perms("owner")
    invoice = inv.create_invoice(perms, team.project.id, "Client Co", 100.0)

    paid = inv.mark_paid(perms, invoice.id, date(2024, 5, 2))

    assert paid.status == InvoiceStatus.PAID
    assert inv.get_invoice(invoice.id).paid_date == date(2024, 5, 2)
    with pytest.raises(BusinessRuleError):
        inv.mark_paid(perms, invoice.id)
    with pytest.raises(BusinessRuleError):
        inv.mark_sent(perms, invoice.id)


def test_viewer_cannot_invoice(services, team):
    with pytest.raises(AuthorizationError):
        services["invoice_service"].create_invoice(team.perms("viewer"), team.project.id, "Client", 1.0)


def test_overdue_is_derived_from_due_date():
    today = date(2024, 6, 10)
    late = Invoice.create("p1", "INV-1", "A", 1000.0, 130.0, due_date=date(2024, 6, 1))
    late.status = InvoiceStatus.SENT
    draft = Invoice.create("p1", "INV-2", "B", 100.0, 13.0, due_date=date(2024, 7, 1))
    paid = Invoice.create("p1", "INV-3", "C", 200.0, 26.0, due_date=date(2024, 1, 1))
    paid.status = InvoiceStatus.PAID

    assert effective_status(late, today) == InvoiceStatus.OVERDUE
    assert effective_status(draft, today) == InvoiceStatus.DRAFT
    assert effective_status(paid, today) == InvoiceStatus.PAID

    agg = aggregate_invoices([late, draft, paid], today)
    assert agg.total_invoiced == pytest.approx(1469.0)
    assert agg.total_paid == pytest.approx(226.0)
    assert agg.total_pending == pytest.approx(1243.0)
    assert agg.total_overdue == pytest.approx(1130.0)
    assert agg.counts["overdue"] == 1
    assert agg.counts["draft"] == 1


def test_aggregates_through_service(services, team):
    inv = services["invoice_service"]
    perms = team.perms("owner")
    a = inv.create_invoice(perms, team.project.id, "A", 1000.0, tax_rate_percent=13, due_date=date(2024, 1, 1))
    inv.mark_sent(perms, a.id)
    b = inv.create_invoice(perms, team.project.id, "B", 500.0, tax_rate_percent=0)
    inv.mark_paid(perms, b.id, date(2024, 1, 5))

    agg = inv.get_aggregates(team.project.id, today=date(2024, 2, 1))

    assert agg.total_overdue == pytest.approx(1130.0)
    assert agg.total_paid == pytest.approx(500.0)
    assert len(inv.list_invoices(team.project.id)) == 2


def test_provincial_tax_hst_and_split():
    on = calculate_provincial_tax(1000, "on")
    assert on.hst == pytest.approx(130.0)
    assert on.total == pytest.approx(1130.0)

    bc = calculate_provincial_tax(1000, "BC")
    assert bc.gst == pytest.approx(50.0)
    assert bc.pst == pytest.approx(70.0)
    assert bc.total_tax == pytest.approx(120.0)

    assert province_tax_rate_percent("QC") == pytest.approx(14.975)
    with pytest.raises(ValidationError):
        calculate_provincial_tax(10, "ZZ")


def test_expense_tax_estimate_groups_categories(services, team):
    es = services["expense_service"]
    owner = team.perms("owner")
    es.create_expense(owner, team.project.id, "Labor", 600.0)
    es.create_expense(owner, team.project.id, "Materials", 400.0)

    estimate = estimate_expense_tax(es.list_expenses(team.project.id), "AB")

    assert estimate.total_expenses == pytest.approx(1000.0)
    assert estimate.gst == pytest.approx(50.0)
    assert estimate.pst == 0.0
    assert estimate.by_category == {"Labor": 600.0, "Materials": 400.0}
