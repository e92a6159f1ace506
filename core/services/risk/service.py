# core/services/risk/service.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, ExternalServiceError, NotFoundError
from core.interfaces import ProjectRepository, RiskAnalysisClient, RiskSampleRepository
from core.models import RiskSample, Severity
from core.services.auth.authorization import require_write
from core.services.auth.permissions import Permissions
from core.services.common.base import ServiceBase
from core.services.risk.bounded import call_with_timeout
from core.services.risk.categories import (
    RiskCategory,
    ScheduleInput,
    budget_category,
    compliance_category,
    safety_category,
    schedule_category,
    weather_category,
)
from core.services.risk.composite import (
    ComplianceInput,
    CompositeRisk,
    SafetyInput,
    compute_composite_risk,
    overdue_ratio_percent,
)
from core.services.risk.policy import (
    ALERT_VALID_HOURS,
    ASSESSMENT_VALID_HOURS,
    DEFAULT_LOCATION,
    analysis_timeout_seconds,
    lookup_timeout_seconds,
)

logger = logging.getLogger(__name__)

WEATHER_RISK_TYPE = "weather"
WEATHER_ALERT_TYPE = "weather_alert"
_ALERT_SEVERITIES = {Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL}


@dataclass(frozen=True)
class RiskOverview:
    project_id: str
    composite: CompositeRisk
    categories: list[RiskCategory]
    weather: RiskSample | None
    active_alerts: list[RiskSample]


@dataclass(frozen=True)
class WeatherAnalysisResult:
    assessment: RiskSample
    alert: RiskSample | None

    @property
    def alert_created(self) -> bool:
        return self.alert is not None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_analysis_payload(payload: dict[str, Any]) -> tuple[int, Severity, list[dict[str, Any]], list[str]]:
    """Normalize the analysis service response into score, severity, factors and actions."""
    body = payload.get("aiAnalysis", payload) if isinstance(payload, dict) else {}
    if not isinstance(body, dict):
        raise ExternalServiceError("Risk analysis returned an unreadable payload.", code="EXTERNAL_BAD_PAYLOAD")
    try:
        raw_score = float(body.get("riskScore", body.get("risk_score", 0)) or 0)
        severity = Severity(str(body.get("severityLevel", body.get("severity", "low"))).strip().lower())
    except (TypeError, ValueError) as exc:
        raise ExternalServiceError(
            f"Risk analysis returned an unreadable payload: {exc}", code="EXTERNAL_BAD_PAYLOAD"
        ) from exc
    if not math.isfinite(raw_score):
        raise ExternalServiceError(
            f"Risk analysis returned a non-numeric score: {raw_score}", code="EXTERNAL_BAD_PAYLOAD"
        )
    # strictly between 0 and 1 is a fraction; anything else is already on the 0-100 scale
    score = round(raw_score * 100) if 0 < raw_score < 1 else round(raw_score)
    factors = [
        f if isinstance(f, dict) else {"description": str(f)}
        for f in (body.get("riskFactors") or body.get("risk_factors") or [])
    ]
    actions = [str(a) for a in (body.get("recommendedActions") or [])]
    return max(0, min(100, int(score))), severity, factors, actions


def _alert_details(severity: Severity, factors: list[dict[str, Any]], actions: list[str]) -> dict[str, Any]:
    first = factors[0] if factors else {}
    lead_action = actions[0] if actions else "Monitor conditions closely."
    return {
        "alert_type": first.get("type") or "severe_weather",
        "title": f"Weather Risk Alert - {severity.value.upper()}",
        "description": (
            f"Weather conditions pose {severity.value} risk to construction activities. {lead_action}"
        ),
        "recommended_actions": actions,
    }


class RiskService(ServiceBase):
    def __init__(
        self,
        session: Session,
        project_repo: ProjectRepository,
        risk_repo: RiskSampleRepository,
        analysis_client: RiskAnalysisClient | None = None,
        audit_service=None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        super().__init__(session, audit_service)
        self._project_repo = project_repo
        self._risk_repo = risk_repo
        self._analysis_client = analysis_client
        self._clock = clock

    def compute_composite(
        self,
        *,
        budget_usage_percent: float | None = None,
        schedule: ScheduleInput | None = None,
        safety: SafetyInput | None = None,
        compliance: ComplianceInput | None = None,
    ) -> CompositeRisk:
        ratio = None
        if schedule is not None:
            ratio = overdue_ratio_percent(schedule.overdue_tasks, schedule.total_tasks)
        return compute_composite_risk(
            budget_usage_percent=budget_usage_percent,
            schedule_overdue_ratio=ratio,
            safety=safety,
            compliance=compliance,
        )

    def get_risk_overview(
        self,
        project_id: str,
        *,
        budget_usage_percent: float | None = None,
        total_spent: float = 0.0,
        schedule: ScheduleInput | None = None,
        safety: SafetyInput | None = None,
        compliance: ComplianceInput | None = None,
    ) -> RiskOverview:
        project = self._project_repo.get(project_id)
        if project is None:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        composite = self.compute_composite(
            budget_usage_percent=budget_usage_percent,
            schedule=schedule,
            safety=safety,
            compliance=compliance,
        )
        weather = self.latest_weather_assessment(project_id)
        categories = [
            budget_category(budget_usage_percent, total_spent, project.budget),
            schedule_category(schedule),
            safety_category(safety),
            compliance_category(compliance),
            # shown beside the composite, never averaged into it
            weather_category(weather),
        ]
        return RiskOverview(
            project_id=project_id,
            composite=composite,
            categories=categories,
            weather=weather,
            active_alerts=self.list_active_alerts(project_id),
        )

    def latest_weather_assessment(self, project_id: str) -> RiskSample | None:
        now = self._clock()
        samples = [
            s
            for s in self._risk_repo.list_by_project(project_id, risk_type=WEATHER_RISK_TYPE)
            if s.is_active and _as_utc(s.valid_until) >= now
        ]
        if not samples:
            return None
        return max(samples, key=lambda s: _as_utc(s.created_at))

    def list_active_alerts(self, project_id: str) -> List[RiskSample]:
        now = self._clock()
        alerts = [
            s
            for s in self._risk_repo.list_by_project(project_id, risk_type=WEATHER_ALERT_TYPE)
            if s.is_active and s.is_alert and _as_utc(s.valid_until) >= now
        ]
        alerts.sort(key=lambda s: _as_utc(s.created_at), reverse=True)
        return alerts

    def run_weather_analysis(
        self,
        permissions: Permissions,
        project_id: str,
        location: str | None = None,
    ) -> WeatherAnalysisResult:
        """
        Fetch weather, run the external risk analysis and store the result.

        Both calls are time-bounded. Any failure raises before anything is
        written, so earlier samples stay as they were.
        """
        require_write(permissions, project_id, operation_label="run risk analysis")
        if not self._project_repo.get(project_id):
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        if self._analysis_client is None:
            raise ExternalServiceError("Risk analysis service is not configured.", code="EXTERNAL_UNAVAILABLE")
        client = self._analysis_client
        place = (location or "").strip() or DEFAULT_LOCATION

        weather = call_with_timeout(
            lambda: client.fetch_weather(place),
            timeout_seconds=lookup_timeout_seconds(),
            label="Weather fetch",
        )
        if isinstance(weather, dict) and weather.get("location"):
            place = str(weather["location"])
        payload = call_with_timeout(
            lambda: client.analyze_risk(project_id, weather, place),
            timeout_seconds=analysis_timeout_seconds(),
            label="AI risk analysis",
        )
        score, severity, factors, actions = parse_analysis_payload(payload)

        now = self._clock()
        valid_until = now + timedelta(hours=ASSESSMENT_VALID_HOURS)
        assessment = RiskSample.create(
            project_id=project_id,
            risk_type=WEATHER_RISK_TYPE,
            score=score,
            severity=severity,
            valid_until=valid_until,
            factors=factors,
        )
        assessment.created_at = now
        self._risk_repo.add(assessment)

        alert: RiskSample | None = None
        if severity in _ALERT_SEVERITIES:
            alert = RiskSample.create(
                project_id=project_id,
                risk_type=WEATHER_ALERT_TYPE,
                score=score,
                severity=severity,
                valid_until=now + timedelta(hours=ALERT_VALID_HOURS),
                factors=[_alert_details(severity, factors, actions)],
                is_alert=True,
            )
            alert.created_at = now
            self._risk_repo.add(alert)
        self._commit()

        self._audit(
            action="risk.analyze",
            entity_type="risk_sample",
            entity_id=assessment.id,
            actor_user_id=permissions.user_id,
            project_id=project_id,
            details={"score": score, "severity": severity.value, "alert": alert is not None},
        )
        logger.info("Weather risk for project %s: %s (%d)", project_id, severity.value, score)
        domain_events.risk_changed.emit(project_id)
        return WeatherAnalysisResult(assessment=assessment, alert=alert)

    def dismiss_alert(self, permissions: Permissions, sample_id: str) -> None:
        sample = self._risk_repo.get(sample_id)
        if sample is None:
            raise NotFoundError("Risk alert not found.", code="RISK_SAMPLE_NOT_FOUND")
        require_write(permissions, sample.project_id, operation_label="dismiss risk alert")
        if not sample.is_alert:
            raise BusinessRuleError(
                "Only alerts can be dismissed; assessments expire on their own.",
                code="RISK_NOT_DISMISSABLE",
            )
        if not sample.is_active:
            return
        self._risk_repo.deactivate(sample_id)
        self._commit()
        self._audit(
            action="risk.dismiss",
            entity_type="risk_sample",
            entity_id=sample.id,
            actor_user_id=permissions.user_id,
            project_id=sample.project_id,
            details={"risk_type": sample.risk_type, "severity": sample.severity.value},
        )
        domain_events.risk_changed.emit(sample.project_id)


__all__ = ["RiskService", "RiskOverview", "WeatherAnalysisResult", "parse_analysis_payload"]
