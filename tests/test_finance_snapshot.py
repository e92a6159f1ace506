from __future__ import annotations

import gc
from datetime import date, datetime, timezone

import pytest

from core.events.domain_events import DomainEvents, domain_events
from core.events.signal import Signal
from core.exceptions import AuthorizationError, NotFoundError
from core.services.finance import FinanceService, ProjectSnapshotCache
from infra.db.repositories import (
    SqlAlchemyBudgetAllocationRepository,
    SqlAlchemyExpenseRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyProjectRepository,
)


def test_snapshot_rolls_up_project_finances(services, team):
    owner = team.perms("owner")
    pid = team.project.id
    services["budget_service"].add_allocation(owner, pid, "Materials", 10000.0)
    services["expense_service"].create_expense(owner, pid, "Materials", 9500.0, date(2024, 1, 5))
    services["expense_service"].create_expense(owner, pid, "Catering", 500.0, date(2024, 1, 6))
    services["invoice_service"].create_invoice(owner, pid, "Client", 1000.0, tax_rate_percent=13)

    snapshot = services["finance_service"].get_project_finance(pid, team.perms("viewer"))

    assert snapshot.project_name == "Harbour Tower"
    assert snapshot.currency == "CAD"
    assert snapshot.total_budget == pytest.approx(100000.0)
    assert snapshot.total_spent == pytest.approx(10000.0)
    assert snapshot.utilization_percent == pytest.approx(10.0)
    assert snapshot.remaining == pytest.approx(90000.0)
    assert snapshot.reconciliation.unlinked_total == pytest.approx(500.0)
    assert [a.category for a in snapshot.alerts] == ["Materials"]
    assert snapshot.invoices.total_pending == pytest.approx(1130.0)
    assert snapshot.forecast.project_id == pid


def test_allocations_stand_in_for_missing_project_budget(services):
    ps = services["project_service"]
    project = ps.create_project("owner", "No Baseline")
    perms = services["permission_resolver"].resolve(project.id, "owner")
    services["budget_service"].add_allocation(perms, project.id, "Labor", 400.0)

    snapshot = services["finance_service"].get_project_finance(project.id)

    assert snapshot.total_budget == pytest.approx(400.0)


def test_zero_budget_has_zero_utilization(services):
    ps = services["project_service"]
    project = ps.create_project("owner", "Zero", budget=0.0)
    perms = services["permission_resolver"].resolve(project.id, "owner")
    services["expense_service"].create_expense(perms, project.id, "Labor", 10.0)

    snapshot = services["finance_service"].get_project_finance(project.id)

    assert snapshot.utilization_percent == 0.0
    assert snapshot.remaining == pytest.approx(-10.0)


def test_non_member_cannot_read_finance(services, team):
    with pytest.raises(AuthorizationError):
        services["finance_service"].get_project_finance(team.project.id, team.perms("stranger"))


def test_unknown_project_is_not_found(services):
    with pytest.raises(NotFoundError):
        services["finance_service"].get_project_finance("missing")


def test_snapshot_is_rebuilt_after_a_write(services, team):
    fs = services["finance_service"]
    owner = team.perms("owner")
    first = fs.get_project_finance(team.project.id)
    assert fs.get_project_finance(team.project.id) is first

    services["expense_service"].create_expense(owner, team.project.id, "Labor", 250.0)
    second = fs.get_project_finance(team.project.id)

    assert second is not first
    assert second.total_spent == pytest.approx(250.0)

    services["invoice_service"].create_invoice(owner, team.project.id, "Client", 10.0)
    assert fs.get_project_finance(team.project.id) is not second


def test_forecast_for_user_lists_budgeted_projects(services, team):
    services["project_service"].create_project("owner", "Unbudgeted")
    forecasts = services["finance_service"].forecast_for_user("owner")
    assert [f.project_id for f in forecasts] == [team.project.id]
    assert services["finance_service"].forecast_for_user("nobody") == []


def test_cache_invalidates_on_any_signal():
    events = DomainEvents()
    cache = ProjectSnapshotCache(events)
    builds = []

    def build():
        builds.append(1)
        return object()

    cache.get_or_build("p1", build)
    cache.get_or_build("p1", build)
    assert len(builds) == 1

    for signal in events.all_signals():
        cache.get_or_build("p1", build)
        signal.emit("p1")
        assert "p1" not in cache

    cache.get_or_build("p1", build)
    events.risk_changed.emit("p2")
    assert "p1" in cache

    cache.close()
    assert all(s.subscriber_count() == 0 for s in events.all_signals())


def test_signal_delivers_in_connection_order():
    signal: Signal[str] = Signal()
    seen = []
    first = lambda payload: seen.append(("first", payload))  # noqa: E731
    second = lambda payload: seen.append(("second", payload))  # noqa: E731

    signal.connect(first)
    signal.connect(second)
    signal.connect(first)
    signal.emit("p1")

    assert seen == [("first", "p1"), ("second", "p1")]
    signal.disconnect(first)
    assert signal.subscriber_count() == 1


def test_writes_emit_domain_events(services, team):
    received = []
    handler = lambda project_id: received.append(project_id)  # noqa: E731
    domain_events.expenses_changed.connect(handler)
    domain_events.budget_changed.connect(handler)
    try:
        owner = team.perms("owner")
        services["budget_service"].add_allocation(owner, team.project.id, "Labor", 10.0)
        services["expense_service"].create_expense(owner, team.project.id, "Labor", 1.0)
    finally:
        domain_events.expenses_changed.disconnect(handler)
        domain_events.budget_changed.disconnect(handler)

    assert received == [team.project.id, team.project.id]


def test_weak_subscriber_dropped_once_owner_is_collected():
    events = DomainEvents()
    cache = ProjectSnapshotCache(events)
    assert events.expenses_changed.subscriber_count() == 1

    del cache
    gc.collect()

    assert events.expenses_changed.subscriber_count() == 0
    events.expenses_changed.emit("p1")


def test_connect_returns_disconnect_handle():
    signal: Signal[str] = Signal("expenses_changed")
    seen = []
    off = signal.connect(seen.append)
    signal.emit("a")
    off()
    signal.emit("b")
    assert seen == ["a"]


class _Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _finance_service(session, clock):
    return FinanceService(
        project_repo=SqlAlchemyProjectRepository(session),
        allocation_repo=SqlAlchemyBudgetAllocationRepository(session),
        expense_repo=SqlAlchemyExpenseRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        events=DomainEvents(),
        clock=clock,
    )


def test_snapshot_rebuilt_when_the_day_changes(session, services, team):
    owner = team.perms("owner")
    invoice = services["invoice_service"].create_invoice(
        owner, team.project.id, "Client", 1000.0, tax_rate_percent=13, due_date=date(2024, 6, 5)
    )
    services["invoice_service"].mark_sent(owner, invoice.id)

    clock = _Clock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))
    finance = _finance_service(session, clock)
    try:
        before = finance.get_project_finance(team.project.id, owner)
        assert before.invoices.total_overdue == 0

        clock.now = datetime(2024, 6, 1, 18, 0, tzinfo=timezone.utc)
        assert finance.get_project_finance(team.project.id, owner) is before

        clock.now = datetime(2024, 6, 20, 9, 0, tzinfo=timezone.utc)
        after = finance.get_project_finance(team.project.id, owner)
    finally:
        finance.close()

    assert after is not before
    assert after.invoices.total_overdue == pytest.approx(1130.0)
    assert after.computed_at == clock.now


def test_build_overlapping_a_change_is_not_cached():
    events = DomainEvents()
    cache = ProjectSnapshotCache(events)
    version = {"n": 0}

    def build_while_expense_lands():
        version["n"] += 1
        built = version["n"]
        if built == 1:
            events.expenses_changed.emit("p1")
        return built

    assert cache.get_or_build("p1", build_while_expense_lands) == 1
    assert "p1" not in cache
    assert cache.get_or_build("p1", build_while_expense_lands) == 2
    assert cache.get_or_build("p1", build_while_expense_lands) == 2
    cache.close()
