from __future__ import annotations

import math
from dataclasses import dataclass

from core.models import Severity

MAX_FACTOR_POINTS = 25


@dataclass(frozen=True)
class SafetyInput:
    open_incidents: int = 0
    critical_incidents: int = 0


@dataclass(frozen=True)
class ComplianceInput:
    expired_permits: int = 0
    pending_permits: int = 0
    failed_inspections: int = 0


@dataclass(frozen=True)
class FactorScore:
    factor: str
    points: int


@dataclass(frozen=True)
class CompositeRisk:
    score: int
    severity: Severity
    factors: tuple[FactorScore, ...] = ()

    @property
    def factor_count(self) -> int:
        return len(self.factors)

    @property
    def total_points(self) -> int:
        return sum(f.points for f in self.factors)


def budget_points(usage_percent: float) -> int:
    if usage_percent > 100:
        return 25
    if usage_percent > 90:
        return 20
    if usage_percent > 80:
        return 10
    return 5


def schedule_points(overdue_ratio_percent: float) -> int:
    if overdue_ratio_percent > 30:
        return 25
    if overdue_ratio_percent > 20:
        return 20
    if overdue_ratio_percent > 10:
        return 10
    return 5


def safety_points(safety: SafetyInput) -> int:
    if safety.critical_incidents > 0:
        return 25
    if safety.open_incidents > 3:
        return 15
    if safety.open_incidents > 0:
        return 10
    return 5


def compliance_points(compliance: ComplianceInput) -> int:
    if compliance.expired_permits > 0 or compliance.failed_inspections > 0:
        return 25
    if compliance.pending_permits > 2:
        return 15
    if compliance.pending_permits > 0:
        return 10
    return 5


def severity_for_score(score: float) -> Severity:
    if score >= 75:
        return Severity.CRITICAL
    if score >= 50:
        return Severity.HIGH
    if score >= 25:
        return Severity.MEDIUM
    return Severity.LOW


def overdue_ratio_percent(overdue_tasks: int, total_tasks: int) -> float:
    if total_tasks <= 0:
        return 0.0
    return overdue_tasks / total_tasks * 100


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_composite_risk(
    budget_usage_percent: float | None = None,
    schedule_overdue_ratio: float | None = None,
    safety: SafetyInput | None = None,
    compliance: ComplianceInput | None = None,
) -> CompositeRisk:
    """
    Combine the budget, schedule, safety and compliance factors.

    Each present factor contributes 5-25 points; the score is the sum divided
    by the number of *present* factors, so a missing input never counts
    against the project. ``schedule_overdue_ratio`` is a percentage (0-100).
    Weather risk is tracked separately and is not part of this score.
    """
    factors: list[FactorScore] = []
    if budget_usage_percent is not None:
        factors.append(FactorScore("budget", budget_points(float(budget_usage_percent))))
    if schedule_overdue_ratio is not None:
        factors.append(FactorScore("schedule", schedule_points(float(schedule_overdue_ratio))))
    if safety is not None:
        factors.append(FactorScore("safety", safety_points(safety)))
    if compliance is not None:
        factors.append(FactorScore("compliance", compliance_points(compliance)))

    if not factors:
        return CompositeRisk(score=0, severity=Severity.LOW)
    score = _round_half_up(sum(f.points for f in factors) / len(factors))
    score = max(0, min(100, score))
    return CompositeRisk(score=score, severity=severity_for_score(score), factors=tuple(factors))


__all__ = [
    "SafetyInput",
    "ComplianceInput",
    "FactorScore",
    "CompositeRisk",
    "MAX_FACTOR_POINTS",
    "budget_points",
    "schedule_points",
    "safety_points",
    "compliance_points",
    "severity_for_score",
    "overdue_ratio_percent",
    "compute_composite_risk",
]
