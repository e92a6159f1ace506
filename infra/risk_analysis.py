from __future__ import annotations

import json
import logging
import os
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from core.exceptions import ExternalServiceError
from core.interfaces import RiskAnalysisClient
from core.services.risk.policy import analysis_timeout_seconds, lookup_timeout_seconds

logger = logging.getLogger(__name__)


def default_risk_service_url() -> str | None:
    return (os.getenv("CF_RISK_SERVICE_URL") or "").strip() or None


class HttpRiskAnalysisClient(RiskAnalysisClient):
    """
    JSON-over-HTTP client for the weather and risk-analysis functions.

    Socket timeouts mirror the service-level bounds so a stalled connection
    is also released, not only abandoned by the caller.
    """

    def __init__(self, base_url: str, *, api_key: str | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key if api_key is not None else os.getenv("CF_RISK_SERVICE_KEY")

    def fetch_weather(self, location: str) -> dict:
        return self._post(
            "get-weather",
            {"location": location, "includeForecast": False},
            timeout=lookup_timeout_seconds(),
        )

    def analyze_risk(self, project_id: str, weather: dict, location: str) -> dict:
        return self._post(
            "ai-risk-analysis",
            {
                "projectId": project_id,
                "weatherData": weather,
                "projectType": "construction",
                "location": location,
            },
            timeout=analysis_timeout_seconds(),
        )

    def _post(self, function: str, body: dict[str, Any], *, timeout: float) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        request = Request(
            f"{self._base_url}/{function}",
            data=json.dumps(body).encode("utf-8"),
            headers=headers,
            method="POST",
        )
        try:
            with urlopen(request, timeout=timeout) as response:  # noqa: S310
                raw = response.read().decode("utf-8")
        except HTTPError as exc:
            raise ExternalServiceError(
                f"{function} failed with HTTP {exc.code}.", code="EXTERNAL_FAILURE"
            ) from exc
        except URLError as exc:
            raise ExternalServiceError(
                f"{function} is unreachable: {exc.reason}", code="EXTERNAL_UNAVAILABLE"
            ) from exc
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ExternalServiceError(
                f"{function} returned invalid JSON.", code="EXTERNAL_BAD_PAYLOAD"
            ) from exc
        if not isinstance(payload, dict):
            raise ExternalServiceError(f"{function} returned an unexpected payload.", code="EXTERNAL_BAD_PAYLOAD")
        if payload.get("error"):
            raise ExternalServiceError(f"{function}: {payload['error']}", code="EXTERNAL_FAILURE")
        logger.debug("%s responded with keys %s", function, sorted(payload))
        return payload


def build_risk_analysis_client() -> HttpRiskAnalysisClient | None:
    url = default_risk_service_url()
    return HttpRiskAnalysisClient(url) if url else None


__all__ = ["HttpRiskAnalysisClient", "build_risk_analysis_client", "default_risk_service_url"]
