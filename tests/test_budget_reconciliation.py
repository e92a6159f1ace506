from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import AuthorizationError, ValidationError
from core.models import BudgetAllocation, BudgetStatus, Expense, ExpenseStatus
from core.services.budget.alerts import budget_alerts
from core.services.budget.reconciliation import classify_budget_status, reconcile
from core.services.money.totals import format_percent


def _expense(project_id, category, amount, status=ExpenseStatus.PENDING):
    e = Expense.create(project_id, category, amount, date(2024, 3, 1))
    e.status = status
    return e


def test_spent_counts_every_expense_regardless_of_approval():
    allocations = [BudgetAllocation.create("p1", "Materials", 1000.0)]
    expenses = [
        _expense("p1", "Materials", 300.0, ExpenseStatus.APPROVED),
        _expense("p1", "Materials", 700.0, ExpenseStatus.PENDING),
    ]

    result = reconcile(allocations, expenses)
    ledger = result.get("Materials")

    assert ledger.spent == pytest.approx(1000.0)
    assert ledger.remaining == pytest.approx(0.0)
    assert ledger.percent_used == pytest.approx(100.0)
    assert ledger.status == BudgetStatus.CRITICAL
    assert ledger.expense_count == 2


def test_zero_budget_has_no_percentage():
    result = reconcile(
        [BudgetAllocation.create("p1", "Permits", 0.0)],
        [_expense("p1", "Permits", 50.0)],
    )
    ledger = result.get("Permits")

    assert ledger.percent_used is None
    assert ledger.status is None
    assert ledger.remaining == pytest.approx(-50.0)
    assert ledger.is_over_budget
    assert format_percent(ledger.percent_used) == "N/A"


def test_allocations_sharing_a_category_are_summed():
    result = reconcile(
        [
            BudgetAllocation.create("p1", "Labor", 400.0, notes="phase 1"),
            BudgetAllocation.create("p1", "Labor", 600.0, notes="phase 2"),
        ],
        [_expense("p1", "Labor", 250.0)],
    )

    assert len(result.categories) == 1
    ledger = result.get("Labor")
    assert ledger.budgeted == pytest.approx(1000.0)
    assert ledger.percent_used == pytest.approx(25.0)
    assert ledger.status == BudgetStatus.ON_TRACK
    assert ledger.notes == "phase 1; phase 2"
    assert len(ledger.allocation_ids) == 2


def test_unmatched_expenses_are_reported_not_dropped():
    result = reconcile(
        [BudgetAllocation.create("p1", "Materials", 1000.0)],
        [
            _expense("p1", "Materials", 100.0),
            _expense("p1", "materials", 40.0),
            _expense("p1", "Catering", 60.0),
        ],
    )

    assert result.get("Materials").spent == pytest.approx(100.0)
    assert {e.category for e in result.unlinked_expenses} == {"materials", "Catering"}
    assert result.unlinked_total == pytest.approx(100.0)
    assert result.total_spent == pytest.approx(200.0)


def test_same_category_in_two_projects_is_not_mixed():
    result = reconcile(
        [
            BudgetAllocation.create("p1", "Materials", 1000.0),
            BudgetAllocation.create("p2", "Materials", 500.0),
        ],
        [_expense("p1", "Materials", 200.0), _expense("p2", "Materials", 450.0)],
    )

    assert result.get("Materials", "p1").spent == pytest.approx(200.0)
    assert result.get("Materials", "p2").spent == pytest.approx(450.0)
    assert result.get("Materials", "p2").status == BudgetStatus.CRITICAL


def test_status_thresholds():
    assert classify_budget_status(74.9) == BudgetStatus.ON_TRACK
    assert classify_budget_status(75.0) == BudgetStatus.WARNING
    assert classify_budget_status(89.99) == BudgetStatus.WARNING
    assert classify_budget_status(90.0) == BudgetStatus.CRITICAL


def test_alerts_list_critical_first():
    result = reconcile(
        [
            BudgetAllocation.create("p1", "A", 100.0),
            BudgetAllocation.create("p1", "B", 100.0),
            BudgetAllocation.create("p1", "C", 100.0),
        ],
        [_expense("p1", "A", 80.0), _expense("p1", "B", 95.0), _expense("p1", "C", 10.0)],
    )

    alerts = budget_alerts(result)

    assert [a.category for a in alerts] == ["B", "A"]
    assert alerts[0].status == BudgetStatus.CRITICAL
    assert "immediate attention" in alerts[0].message
    assert "monitor closely" in alerts[1].message


def test_budget_service_reconciles_persisted_rows(services, team):
    bs = services["budget_service"]
    es = services["expense_service"]
    member = team.perms("member")
    pid = team.project.id

    bs.add_allocation(member, pid, "Materials", 1000.0, notes="slab")
    outcome = es.create_expense(member, pid, "Materials", 300.0, date(2024, 3, 2))
    es.approve_expense(team.perms("admin"), outcome.expense.id)
    es.create_expense(member, pid, "Materials", 700.0, date(2024, 3, 3))

    result = bs.reconcile_project(pid, team.perms("viewer"))
    ledger = result.get("Materials")

    assert ledger.spent == pytest.approx(1000.0)
    assert ledger.remaining == pytest.approx(0.0)
    assert ledger.status == BudgetStatus.CRITICAL


def test_viewer_cannot_add_allocation(services, team):
    with pytest.raises(AuthorizationError) as exc:
        services["budget_service"].add_allocation(team.perms("viewer"), team.project.id, "Labor", 10.0)
    assert exc.value.code == "FORBIDDEN"
    assert services["budget_service"].list_allocations(team.project.id) == []


def test_allocation_amount_is_validated(services, team):
    with pytest.raises(ValidationError):
        services["budget_service"].add_allocation(team.perms("owner"), team.project.id, "Labor", -5)
    with pytest.raises(ValidationError):
        services["budget_service"].add_allocation(team.perms("owner"), team.project.id, "  ", 5)


def test_allocation_update_and_delete(services, team):
    bs = services["budget_service"]
    owner = team.perms("owner")
    allocation = bs.add_allocation(owner, team.project.id, "Labor", 100.0)

    bs.update_allocation(owner, allocation.id, budgeted_amount=250.0, notes=" crew ")
    stored = bs.list_allocations(team.project.id)
    assert stored[0].budgeted_amount == pytest.approx(250.0)
    assert stored[0].notes == "crew"

    bs.delete_allocation(owner, allocation.id)
    assert bs.list_allocations(team.project.id) == []


def test_reconcile_for_user_covers_every_membership(services, team):
    ps = services["project_service"]
    bs = services["budget_service"]
    other = ps.create_project("owner", "Depot Annex", budget=5000.0)
    unrelated = ps.create_project("stranger", "Elsewhere", budget=5000.0)

    bs.add_allocation(team.perms("owner"), team.project.id, "Materials", 1000.0)
    bs.add_allocation(team.perms("owner", other.id), other.id, "Materials", 500.0)
    bs.add_allocation(team.perms("stranger", unrelated.id), unrelated.id, "Materials", 999.0)

    result = bs.reconcile_for_user("owner")

    assert {c.project_id for c in result.categories} == {team.project.id, other.id}
    assert result.total_budgeted == pytest.approx(1500.0)
    assert bs.reconcile_for_user("nobody").categories == []
