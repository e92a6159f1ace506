from __future__ import annotations

from core.models import RiskSample
from infra.db.json_columns import dump_json, load_json_records
from infra.db.models import RiskSampleORM


def risk_sample_to_orm(sample: RiskSample) -> RiskSampleORM:
    return RiskSampleORM(
        id=sample.id,
        project_id=sample.project_id,
        risk_type=sample.risk_type,
        score=sample.score,
        severity=sample.severity,
        factors_json=dump_json(list(sample.factors or [])),
        valid_until=sample.valid_until,
        is_active=sample.is_active,
        is_alert=sample.is_alert,
        created_at=sample.created_at,
    )


def risk_sample_from_orm(obj: RiskSampleORM) -> RiskSample:
    return RiskSample(
        id=obj.id,
        project_id=obj.project_id,
        risk_type=obj.risk_type,
        score=obj.score,
        severity=obj.severity,
        valid_until=obj.valid_until,
        factors=load_json_records(obj.factors_json),
        is_active=obj.is_active,
        is_alert=obj.is_alert,
        created_at=obj.created_at,
    )


__all__ = ["risk_sample_to_orm", "risk_sample_from_orm"]
