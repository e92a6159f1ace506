from infra.db.risk.mapper import risk_sample_from_orm, risk_sample_to_orm
from infra.db.risk.repository import SqlAlchemyRiskSampleRepository

__all__ = ["risk_sample_to_orm", "risk_sample_from_orm", "SqlAlchemyRiskSampleRepository"]
