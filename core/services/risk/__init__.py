from core.services.risk.categories import RiskCategory, ScheduleInput
from core.services.risk.composite import (
    ComplianceInput,
    CompositeRisk,
    FactorScore,
    SafetyInput,
    compute_composite_risk,
    severity_for_score,
)
from core.services.risk.service import RiskOverview, RiskService, WeatherAnalysisResult

__all__ = [
    "RiskService",
    "RiskOverview",
    "WeatherAnalysisResult",
    "RiskCategory",
    "ScheduleInput",
    "SafetyInput",
    "ComplianceInput",
    "CompositeRisk",
    "FactorScore",
    "compute_composite_risk",
    "severity_for_score",
]
