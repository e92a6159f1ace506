from __future__ import annotations

from dataclasses import dataclass

from core.models import RiskSample, Severity
from core.services.risk.composite import ComplianceInput, SafetyInput


@dataclass(frozen=True)
class ScheduleInput:
    overdue_tasks: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0


@dataclass(frozen=True)
class RiskCategory:
    id: str
    title: str
    value: str
    description: str
    severity: Severity
    details: str


def budget_category(usage_percent: float | None, total_spent: float, budget: float | None) -> RiskCategory:
    usage = usage_percent or 0.0
    if usage > 100:
        severity = Severity.CRITICAL
    elif usage > 90:
        severity = Severity.HIGH
    elif usage > 80:
        severity = Severity.MEDIUM
    else:
        severity = Severity.LOW
    return RiskCategory(
        id="budget",
        title="Budget Risk",
        value="N/A" if not usage_percent else f"{usage_percent:.0f}%",
        description="Budget is nearly exhausted" if usage > 90 else "Budget is on track",
        severity=severity,
        details=f"${total_spent:,.0f} spent of ${(budget or 0.0):,.0f} budget",
    )


def schedule_category(schedule: ScheduleInput | None) -> RiskCategory:
    schedule = schedule or ScheduleInput()
    overdue = schedule.overdue_tasks
    if overdue > 5:
        severity = Severity.CRITICAL
    elif overdue > 2:
        severity = Severity.HIGH
    elif overdue > 0:
        severity = Severity.MEDIUM
    else:
        severity = Severity.LOW
    return RiskCategory(
        id="schedule",
        title="Schedule Risk",
        value=str(overdue),
        description=f"{overdue} overdue tasks" if overdue else "All tasks on schedule",
        severity=severity,
        details=f"{schedule.completed_tasks} of {schedule.total_tasks} tasks completed",
    )


def safety_category(safety: SafetyInput | None) -> RiskCategory:
    safety = safety or SafetyInput()
    if safety.critical_incidents > 0:
        severity = Severity.CRITICAL
    elif safety.open_incidents > 3:
        severity = Severity.HIGH
    elif safety.open_incidents > 0:
        severity = Severity.MEDIUM
    else:
        severity = Severity.LOW
    return RiskCategory(
        id="safety",
        title="Safety Risk",
        value=str(safety.open_incidents),
        description=(
            f"{safety.open_incidents} open incidents" if safety.open_incidents else "No open safety incidents"
        ),
        severity=severity,
        details=(
            f"{safety.critical_incidents} critical/high priority" if safety.critical_incidents else "All clear"
        ),
    )


def compliance_category(compliance: ComplianceInput | None) -> RiskCategory:
    compliance = compliance or ComplianceInput()
    if compliance.expired_permits > 0:
        severity = Severity.CRITICAL
    elif compliance.failed_inspections > 0:
        severity = Severity.HIGH
    elif compliance.pending_permits > 2:
        severity = Severity.MEDIUM
    else:
        severity = Severity.LOW
    return RiskCategory(
        id="compliance",
        title="Compliance Risk",
        value=str(compliance.expired_permits + compliance.failed_inspections),
        description=(
            f"{compliance.expired_permits} expired permits" if compliance.expired_permits else "Permits up to date"
        ),
        severity=severity,
        details=(
            f"{compliance.pending_permits} pending permits, "
            f"{compliance.failed_inspections} failed inspections"
        ),
    )


def weather_category(sample: RiskSample | None) -> RiskCategory:
    if sample is None:
        return RiskCategory(
            id="weather",
            title="Weather Risk",
            value="N/A",
            description="No active weather alerts",
            severity=Severity.LOW,
            details="Run analysis for details",
        )
    return RiskCategory(
        id="weather",
        title="Weather Risk",
        value=f"{sample.score}%" if sample.score else "N/A",
        description=f"{sample.severity.value} weather impact",
        severity=sample.severity,
        details=(
            f"{len(sample.factors)} risk factors identified" if sample.factors else "Run analysis for details"
        ),
    )


__all__ = [
    "ScheduleInput",
    "RiskCategory",
    "budget_category",
    "schedule_category",
    "safety_category",
    "compliance_category",
    "weather_category",
]
