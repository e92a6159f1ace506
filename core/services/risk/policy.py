from __future__ import annotations

import os

DEFAULT_LOOKUP_TIMEOUT_SECONDS = 25.0
DEFAULT_ANALYSIS_TIMEOUT_SECONDS = 45.0
ASSESSMENT_VALID_HOURS = 6
ALERT_VALID_HOURS = 12
DEFAULT_LOCATION = "Toronto, Ontario, Canada"


def _env_seconds(name: str, default: float) -> float:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def lookup_timeout_seconds() -> float:
    return _env_seconds("CF_RISK_LOOKUP_TIMEOUT_SECONDS", DEFAULT_LOOKUP_TIMEOUT_SECONDS)


def analysis_timeout_seconds() -> float:
    return _env_seconds("CF_RISK_ANALYSIS_TIMEOUT_SECONDS", DEFAULT_ANALYSIS_TIMEOUT_SECONDS)


__all__ = [
    "DEFAULT_LOOKUP_TIMEOUT_SECONDS",
    "DEFAULT_ANALYSIS_TIMEOUT_SECONDS",
    "ASSESSMENT_VALID_HOURS",
    "ALERT_VALID_HOURS",
    "DEFAULT_LOCATION",
    "lookup_timeout_seconds",
    "analysis_timeout_seconds",
]
