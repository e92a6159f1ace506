from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List

from core.models import Expense, ForecastStatus, Project

DEFAULT_REMAINING_DAYS = 90
OVER_BUDGET_BELOW_PERCENT = -10.0
ON_TRACK_FROM_PERCENT = 5.0


@dataclass(frozen=True)
class SpendForecast:
    project_id: str
    budget: float
    total_spent: float
    days_passed: int
    daily_rate: float
    days_remaining: int
    projected_total: float
    variance: float
    variance_percent: float
    status: ForecastStatus


def _as_utc_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _whole_days(delta: timedelta) -> int:
    return math.floor(delta.total_seconds() / 86400)


def classify_forecast(variance_percent: float) -> ForecastStatus:
    if variance_percent < OVER_BUDGET_BELOW_PERCENT:
        return ForecastStatus.OVER_BUDGET
    if variance_percent < ON_TRACK_FROM_PERCENT:
        return ForecastStatus.AT_RISK
    return ForecastStatus.ON_TRACK


def forecast_spend(
    project: Project,
    expenses: Iterable[Expense],
    *,
    now: datetime | None = None,
) -> SpendForecast:
    """
    Extrapolate end-of-project spend from the burn rate so far.

    Every expense counts regardless of approval status, matching the
    reconciliation totals.
    """
    now = _as_utc_datetime(now or datetime.now(timezone.utc))
    total_spent = sum(float(e.amount or 0.0) for e in expenses if e.project_id == project.id)

    start = _as_utc_datetime(project.start_date or project.created_at)
    days_passed = max(1, _whole_days(now - start))
    daily_rate = total_spent / days_passed

    end = (
        _as_utc_datetime(project.end_date)
        if project.end_date
        else now + timedelta(days=DEFAULT_REMAINING_DAYS)
    )
    days_remaining = max(0, _whole_days(end - now))

    projected_total = total_spent + daily_rate * days_remaining
    budget = float(project.budget or 0.0)
    variance = budget - projected_total
    variance_percent = (variance / budget * 100.0) if budget > 0 else 0.0

    return SpendForecast(
        project_id=project.id,
        budget=budget,
        total_spent=total_spent,
        days_passed=days_passed,
        daily_rate=daily_rate,
        days_remaining=days_remaining,
        projected_total=projected_total,
        variance=variance,
        variance_percent=variance_percent,
        status=classify_forecast(variance_percent),
    )


def forecast_portfolio(
    projects: Iterable[Project],
    expenses: Iterable[Expense],
    *,
    now: datetime | None = None,
) -> List[SpendForecast]:
    # projects without a budget baseline have nothing to forecast against
    expense_list = list(expenses)
    return [
        forecast_spend(p, expense_list, now=now)
        for p in projects
        if p.budget is not None
    ]


__all__ = ["SpendForecast", "classify_forecast", "forecast_spend", "forecast_portfolio"]
