from __future__ import annotations

import io
import json
from urllib.error import URLError

import pytest
from sqlalchemy import create_engine, inspect

import infra.risk_analysis as risk_analysis
from core.exceptions import ExternalServiceError, ValidationError
from core.services.invoice.policy import default_currency, default_tax_rate_percent
from core.services.risk.policy import analysis_timeout_seconds, lookup_timeout_seconds
from infra.migrate import run_migrations
from infra.path import user_data_dir
from infra.receipts import LocalReceiptStore
from infra.risk_analysis import HttpRiskAnalysisClient, build_risk_analysis_client


class _Response(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def test_env_configuration_defaults(monkeypatch):
    for name in (
        "CF_DEFAULT_TAX_RATE",
        "CF_DEFAULT_CURRENCY",
        "CF_RISK_LOOKUP_TIMEOUT_SECONDS",
        "CF_RISK_ANALYSIS_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    assert default_tax_rate_percent() == 13.0
    assert default_currency() == "CAD"
    assert lookup_timeout_seconds() == 25.0
    assert analysis_timeout_seconds() == 45.0


def test_env_configuration_overrides(monkeypatch):
    monkeypatch.setenv("CF_DEFAULT_TAX_RATE", "15")
    monkeypatch.setenv("CF_DEFAULT_CURRENCY", "usd")
    monkeypatch.setenv("CF_RISK_LOOKUP_TIMEOUT_SECONDS", "10")
    monkeypatch.setenv("CF_RISK_ANALYSIS_TIMEOUT_SECONDS", "not-a-number")

    assert default_tax_rate_percent() == 15.0
    assert default_currency() == "USD"
    assert lookup_timeout_seconds() == 10.0
    assert analysis_timeout_seconds() == 45.0


def test_data_dir_override(monkeypatch, tmp_path):
    monkeypatch.setenv("CF_DATA_DIR", str(tmp_path / "data"))
    assert user_data_dir() == tmp_path / "data"
    assert user_data_dir().is_dir()


def test_receipt_store_rejects_escaping_refs(tmp_path):
    store = LocalReceiptStore(tmp_path / "receipts")
    ref = store.upload("p1", "../../etc/passwd", b"x")

    assert ref.startswith("p1/")
    assert store.path_for(ref).is_file()
    with pytest.raises(ValidationError) as exc:
        store.path_for("../outside.txt")
    assert exc.value.code == "RECEIPT_REF_INVALID"


def test_http_client_posts_json(monkeypatch):
    captured = {}

    def fake_urlopen(request, timeout):
        captured["url"] = request.full_url
        captured["body"] = json.loads(request.data.decode("utf-8"))
        captured["auth"] = request.get_header("Authorization")
        captured["timeout"] = timeout
        return _Response(json.dumps({"location": "Toronto, ON"}).encode("utf-8"))

    monkeypatch.setattr(risk_analysis, "urlopen", fake_urlopen)
    monkeypatch.delenv("CF_RISK_LOOKUP_TIMEOUT_SECONDS", raising=False)
    client = HttpRiskAnalysisClient("https://risk.example/functions/v1/", api_key="k-1")

    assert client.fetch_weather("Toronto") == {"location": "Toronto, ON"}
    assert captured["url"] == "https://risk.example/functions/v1/get-weather"
    assert captured["body"] == {"location": "Toronto", "includeForecast": False}
    assert captured["auth"] == "Bearer k-1"
    assert captured["timeout"] == 25.0


def test_http_client_maps_failures(monkeypatch):
    def unreachable(request, timeout):
        raise URLError("connection refused")

    monkeypatch.setattr(risk_analysis, "urlopen", unreachable)
    client = HttpRiskAnalysisClient("https://risk.example", api_key="")
    with pytest.raises(ExternalServiceError) as exc:
        client.analyze_risk("p1", {}, "Toronto")
    assert exc.value.code == "EXTERNAL_UNAVAILABLE"

    monkeypatch.setattr(risk_analysis, "urlopen", lambda request, timeout: _Response(b"<html>"))
    with pytest.raises(ExternalServiceError) as exc:
        client.fetch_weather("Toronto")
    assert exc.value.code == "EXTERNAL_BAD_PAYLOAD"

    monkeypatch.setattr(
        risk_analysis, "urlopen", lambda request, timeout: _Response(b'{"error": "quota exceeded"}')
    )
    with pytest.raises(ExternalServiceError, match="quota exceeded"):
        client.fetch_weather("Toronto")


def test_client_is_built_only_when_configured(monkeypatch):
    monkeypatch.delenv("CF_RISK_SERVICE_URL", raising=False)
    assert build_risk_analysis_client() is None
    monkeypatch.setenv("CF_RISK_SERVICE_URL", "https://risk.example")
    assert isinstance(build_risk_analysis_client(), HttpRiskAnalysisClient)


def test_migrations_create_ledger_schema(tmp_path):
    db_file = tmp_path / "ledger.db"
    url = f"sqlite:///{db_file.as_posix()}"

    run_migrations(url)

    engine = create_engine(url, future=True)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {
        "projects",
        "project_memberships",
        "budget_allocations",
        "expenses",
        "invoices",
        "risk_samples",
        "audit_logs",
    } <= tables
