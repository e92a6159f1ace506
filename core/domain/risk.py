from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from core.domain.enums import Severity
from core.domain.identifiers import generate_id


@dataclass
class RiskSample:
    """
    A stored risk reading for a project (e.g. a weather assessment).

    Samples are immutable once written; alert-shaped samples can only be
    deactivated through dismissal.
    """
    id: str
    project_id: str
    risk_type: str
    score: int
    severity: Severity
    valid_until: datetime
    factors: list[dict[str, Any]] = field(default_factory=list)
    is_active: bool = True
    is_alert: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        project_id: str,
        risk_type: str,
        score: int,
        severity: Severity,
        valid_until: datetime,
        factors: list[dict[str, Any]] | None = None,
        is_alert: bool = False,
    ) -> "RiskSample":
        return RiskSample(
            id=generate_id(),
            project_id=project_id,
            risk_type=risk_type,
            score=max(0, min(100, int(score))),
            severity=severity,
            valid_until=valid_until,
            factors=list(factors or []),
            is_alert=is_alert,
        )


__all__ = ["RiskSample"]
