from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from core.exceptions import AuthorizationError, BusinessRuleError, ValidationError
from core.interfaces import ReceiptStore
from core.models import Expense, ExpenseStatus
from core.services.expense import ReceiptUpload
from core.services.expense.state_machine import apply_decision, can_transition


class BrokenReceiptStore(ReceiptStore):
    def upload(self, project_id: str, filename: str, content: bytes) -> str:
        raise OSError("disk full")

    def public_url(self, receipt_ref: str) -> str:
        raise AssertionError("never reached")


def test_member_records_and_admin_approves(services, team):
    es = services["expense_service"]
    outcome = es.create_expense(team.perms("member"), team.project.id, " Materials ", 120.5, date(2024, 4, 1), vendor="Acme")

    assert outcome.expense.status == ExpenseStatus.PENDING
    assert outcome.expense.category == "Materials"
    assert outcome.expense.created_by == "member"
    assert outcome.message == "Expense saved."

    approved = es.approve_expense(team.perms("admin"), outcome.expense.id)
    stored = es.get_expense(outcome.expense.id)

    assert approved.status == ExpenseStatus.APPROVED
    assert stored.status == ExpenseStatus.APPROVED
    assert stored.approved_by == "admin"
    assert stored.approved_at is not None


def test_member_cannot_approve(services, team):
    es = services["expense_service"]
    expense = es.create_expense(team.perms("member"), team.project.id, "Labor", 80.0).expense

    with pytest.raises(AuthorizationError) as exc:
        es.approve_expense(team.perms("member"), expense.id)

    assert exc.value.code == "FORBIDDEN"
    assert es.get_expense(expense.id).status == ExpenseStatus.PENDING


def test_viewer_cannot_record_expense(services, team):
    with pytest.raises(AuthorizationError):
        services["expense_service"].create_expense(team.perms("viewer"), team.project.id, "Labor", 1.0)
    assert services["expense_service"].list_expenses(team.project.id) == []


def test_decided_expense_is_terminal(services, team):
    es = services["expense_service"]
    expense = es.create_expense(team.perms("owner"), team.project.id, "Labor", 80.0).expense
    es.reject_expense(team.perms("owner"), expense.id)

    with pytest.raises(BusinessRuleError) as exc:
        es.approve_expense(team.perms("owner"), expense.id)

    assert exc.value.code == "EXPENSE_ALREADY_DECIDED"
    assert es.get_expense(expense.id).status == ExpenseStatus.REJECTED
    assert not can_transition(ExpenseStatus.APPROVED, ExpenseStatus.REJECTED)
    assert can_transition(ExpenseStatus.PENDING, ExpenseStatus.APPROVED)


def test_apply_decision_follows_transition_table():
    expense = Expense.create("p1", "Labor", 10.0, date(2024, 1, 1))
    stamp = datetime(2024, 1, 2, tzinfo=timezone.utc)

    with pytest.raises(BusinessRuleError) as exc:
        apply_decision(expense, ExpenseStatus.PENDING, decided_by="owner", decided_at=stamp)
    assert exc.value.code == "EXPENSE_INVALID_TRANSITION"
    assert expense.approved_by is None

    apply_decision(expense, "approved", decided_by="owner", decided_at=stamp)
    assert (expense.status, expense.approved_by, expense.approved_at) == (ExpenseStatus.APPROVED, "owner", stamp)
    for target in ExpenseStatus:
        assert not can_transition(ExpenseStatus.APPROVED, target)
        with pytest.raises(BusinessRuleError):
            apply_decision(expense, target, decided_by="admin", decided_at=stamp)
    assert expense.approved_by == "owner"


def test_owner_role_does_not_carry_across_projects(services, team):
    ps = services["project_service"]
    es = services["expense_service"]
    foreign = ps.create_project("stranger", "Other Site")
    expense = es.create_expense(team.perms("stranger", foreign.id), foreign.id, "Labor", 10.0).expense

    # owner of the team project, no membership on the foreign one
    with pytest.raises(AuthorizationError) as exc:
        es.approve_expense(team.perms("owner", foreign.id), expense.id)
    assert exc.value.code == "FORBIDDEN_NOT_MEMBER"

    # permissions resolved for another project are not accepted either
    with pytest.raises(AuthorizationError) as exc:
        es.approve_expense(team.perms("owner"), expense.id)
    assert exc.value.code == "FORBIDDEN_PROJECT_SCOPE"


def test_expense_validation(services, team):
    es = services["expense_service"]
    with pytest.raises(ValidationError):
        es.create_expense(team.perms("owner"), team.project.id, "Labor", -1.0)
    with pytest.raises(ValidationError):
        es.create_expense(team.perms("owner"), team.project.id, "", 1.0)
    with pytest.raises(ValidationError):
        es.create_expense(team.perms("owner"), team.project.id, "Labor", "abc")


def test_receipt_is_attached_after_save(services, team, receipt_store):
    es = services["expense_service"]
    outcome = es.create_expense(
        team.perms("member"),
        team.project.id,
        "Materials",
        42.0,
        receipt=ReceiptUpload("scan 01.pdf", b"%PDF-1.4"),
    )

    stored = es.get_expense(outcome.expense.id)
    assert outcome.receipt_attached
    assert not outcome.partially_saved
    assert stored.receipt_ref.startswith(f"{team.project.id}/")
    assert stored.receipt_ref.endswith("scan_01.pdf")
    assert receipt_store.path_for(stored.receipt_ref).read_bytes() == b"%PDF-1.4"
    assert es.receipt_url(stored).startswith("file://")


def test_failed_receipt_upload_keeps_the_expense(session, services, team):
    from core.services.expense import ExpenseService
    from infra.db.repositories import SqlAlchemyExpenseRepository, SqlAlchemyProjectRepository

    es = ExpenseService(
        session,
        SqlAlchemyExpenseRepository(session),
        SqlAlchemyProjectRepository(session),
        receipt_store=BrokenReceiptStore(),
    )
    outcome = es.create_expense(
        team.perms("member"),
        team.project.id,
        "Materials",
        42.0,
        receipt=ReceiptUpload("scan.pdf", b"data"),
    )

    assert outcome.partially_saved
    assert not outcome.receipt_attached
    assert "receipt could not be attached" in outcome.message
    assert "disk full" in outcome.message
    stored = es.get_expense(outcome.expense.id)
    assert stored.amount == pytest.approx(42.0)
    assert stored.receipt_ref is None


def test_empty_receipt_is_a_partial_save(services, team):
    outcome = services["expense_service"].create_expense(
        team.perms("member"),
        team.project.id,
        "Materials",
        5.0,
        receipt=ReceiptUpload("empty.png", b""),
    )
    assert outcome.partially_saved
    assert "empty" in outcome.receipt_error


def test_listing_filters_and_summary(services, team):
    es = services["expense_service"]
    owner = team.perms("owner")
    a = es.create_expense(owner, team.project.id, "Labor", 100.0, date(2024, 1, 1)).expense
    es.create_expense(owner, team.project.id, "Labor", 50.0, date(2024, 2, 1))
    es.create_expense(owner, team.project.id, "Materials", 25.0, date(2024, 3, 1))
    es.approve_expense(owner, a.id)

    labor = es.list_expenses(team.project.id, category="Labor")
    assert [e.amount for e in labor] == [50.0, 100.0]
    assert len(es.list_expenses(team.project.id, category="all")) == 3
    assert [e.id for e in es.list_expenses(team.project.id, status="approved")] == [a.id]

    with pytest.raises(ValidationError) as exc:
        es.list_expenses(team.project.id, status="bogus")
    assert exc.value.code == "EXPENSE_STATUS_INVALID"

    with pytest.raises(AuthorizationError):
        es.list_expenses(team.project.id, permissions=team.perms("stranger"))
    assert len(es.list_expenses(team.project.id, permissions=team.perms("viewer"))) == 3

    summary = es.summarize(team.project.id)
    assert summary.total == pytest.approx(175.0)
    assert summary.approved_total == pytest.approx(100.0)
    assert summary.pending_total == pytest.approx(75.0)
    assert summary.counts == {"pending": 2, "approved": 1, "rejected": 0}
    assert summary.by_category == {"Labor": 150.0, "Materials": 25.0}


def test_update_and_delete_expense(services, team):
    es = services["expense_service"]
    owner = team.perms("owner")
    expense = es.create_expense(owner, team.project.id, "Labor", 100.0).expense

    es.update_expense(owner, expense.id, amount=150.0, vendor=" Crew Co ")
    stored = es.get_expense(expense.id)
    assert stored.amount == pytest.approx(150.0)
    assert stored.vendor == "Crew Co"

    es.delete_expense(owner, expense.id)
    assert es.list_expenses(team.project.id) == []
