from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from core.models import Expense, ExpenseStatus, ForecastStatus, Project
from core.services.forecast import classify_forecast, forecast_portfolio, forecast_spend

NOW = datetime(2024, 3, 1, 15, 30, tzinfo=timezone.utc)


def _project(**extra):
    return Project.create("Harbour Tower", **extra)


def _expense(project, amount, status=ExpenseStatus.PENDING):
    e = Expense.create(project.id, "Labor", amount, date(2024, 2, 1))
    e.status = status
    return e


def test_burn_rate_projection():
    project = _project(budget=20000.0, start_date=date(2024, 1, 11), end_date=date(2024, 4, 11))
    expenses = [_expense(project, 6000.0, ExpenseStatus.APPROVED), _expense(project, 4000.0)]

    forecast = forecast_spend(project, expenses, now=NOW)

    assert forecast.days_passed == 50
    assert forecast.daily_rate == pytest.approx(200.0)
    assert forecast.days_remaining == 40
    assert forecast.projected_total == pytest.approx(18000.0)
    assert forecast.variance == pytest.approx(2000.0)
    assert forecast.variance_percent == pytest.approx(10.0)
    assert forecast.status == ForecastStatus.ON_TRACK


def test_first_day_counts_as_one_day():
    project = _project(budget=1000.0, start_date=date(2024, 3, 1), end_date=date(2024, 3, 11))
    forecast = forecast_spend(project, [_expense(project, 100.0)], now=NOW)
    assert forecast.days_passed == 1
    assert forecast.days_remaining == 9
    assert forecast.projected_total == pytest.approx(1000.0)


def test_missing_end_date_assumes_ninety_days():
    project = _project(budget=100000.0, start_date=date(2024, 2, 20))
    forecast = forecast_spend(project, [_expense(project, 1000.0)], now=NOW)
    assert forecast.days_remaining == 90


def test_missing_start_date_uses_creation_time():
    project = _project(budget=5000.0, end_date=date(2024, 3, 31))
    project.created_at = datetime(2024, 2, 20, 9, 0, tzinfo=timezone.utc)
    forecast = forecast_spend(project, [], now=NOW)
    assert forecast.days_passed == 10
    assert forecast.projected_total == 0.0
    assert forecast.status == ForecastStatus.ON_TRACK


def test_past_end_date_has_no_remaining_days():
    project = _project(budget=100.0, start_date=date(2024, 1, 1), end_date=date(2024, 2, 1))
    forecast = forecast_spend(project, [_expense(project, 150.0)], now=NOW)
    assert forecast.days_remaining == 0
    assert forecast.projected_total == pytest.approx(150.0)
    assert forecast.status == ForecastStatus.OVER_BUDGET


def test_zero_budget_does_not_divide():
    project = _project(start_date=date(2024, 1, 1))
    forecast = forecast_spend(project, [_expense(project, 10.0)], now=NOW)
    assert forecast.budget == 0.0
    assert forecast.variance_percent == 0.0


def test_status_boundaries():
    assert classify_forecast(-10.5) == ForecastStatus.OVER_BUDGET
    assert classify_forecast(-10.0) == ForecastStatus.AT_RISK
    assert classify_forecast(4.99) == ForecastStatus.AT_RISK
    assert classify_forecast(5.0) == ForecastStatus.ON_TRACK


def test_portfolio_skips_unbudgeted_projects():
    budgeted = _project(budget=1000.0, start_date=date(2024, 1, 1))
    unbudgeted = _project(start_date=date(2024, 1, 1))
    expenses = [_expense(budgeted, 100.0), _expense(unbudgeted, 999.0)]

    forecasts = forecast_portfolio([budgeted, unbudgeted], expenses, now=NOW)

    assert [f.project_id for f in forecasts] == [budgeted.id]
    assert forecasts[0].total_spent == pytest.approx(100.0)
