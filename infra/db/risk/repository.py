from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from core.interfaces import RiskSampleRepository
from core.models import RiskSample
from infra.db.models import RiskSampleORM
from infra.db.risk.mapper import risk_sample_from_orm, risk_sample_to_orm


class SqlAlchemyRiskSampleRepository(RiskSampleRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, sample: RiskSample) -> None:
        self.session.add(risk_sample_to_orm(sample))

    def get(self, sample_id: str) -> Optional[RiskSample]:
        obj = self.session.get(RiskSampleORM, sample_id)
        return risk_sample_from_orm(obj) if obj else None

    def deactivate(self, sample_id: str) -> None:
        obj = self.session.get(RiskSampleORM, sample_id)
        if obj is None:
            raise NotFoundError("Risk sample not found.", code="RISK_SAMPLE_NOT_FOUND")
        obj.is_active = False

    def list_by_project(self, project_id: str, risk_type: str | None = None) -> List[RiskSample]:
        stmt = select(RiskSampleORM).where(RiskSampleORM.project_id == project_id)
        if risk_type is not None:
            stmt = stmt.where(RiskSampleORM.risk_type == risk_type)
        stmt = stmt.order_by(RiskSampleORM.created_at.desc())
        rows = self.session.execute(stmt).scalars().all()
        return [risk_sample_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyRiskSampleRepository"]
