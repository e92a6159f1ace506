from __future__ import annotations

import json
import logging
import os
import re
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Iterator, Mapping

from core.exceptions import DomainError
from infra.path import user_data_dir
from infra.version import get_app_version

REDACTED = "<redacted>"
REDACTED_EMAIL = "<redacted-email>"

_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("cf_trace_id", default=None)
_SENSITIVE_KEY_PARTS = (
    "password",
    "token",
    "secret",
    "api_key",
    "apikey",
    "authorization",
    "client_email",
)
_EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_SECRET_PAIR_PATTERN = re.compile(
    r"(?i)\b(password|token|secret|api[_-]?key|authorization)\b\s*[:=]\s*([^\s,;]+)"
)


def create_trace_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"trc-{stamp}-{uuid.uuid4().hex[:8]}"


def current_trace_id() -> str | None:
    value = _TRACE_ID_CTX.get()
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


@contextmanager
def bind_trace_id(trace_id: str | None = None) -> Iterator[str]:
    """Tag every log line emitted inside the block with one request-scoped id."""
    normalized = (trace_id or "").strip() or create_trace_id()
    token = _TRACE_ID_CTX.set(normalized)
    try:
        yield normalized
    finally:
        _TRACE_ID_CTX.reset(token)


def _is_sensitive_key(value: object) -> bool:
    key = str(value or "").strip().lower().replace("-", "_")
    return any(part in key for part in _SENSITIVE_KEY_PARTS)


def redact_text(value: str) -> str:
    text = str(value or "")
    text = _EMAIL_PATTERN.sub(REDACTED_EMAIL, text)
    text = _SECRET_PAIR_PATTERN.sub(lambda m: f"{m.group(1)}={REDACTED}", text)
    return text


def redact_value(value: Any, *, _depth: int = 0, _max_depth: int = 8) -> Any:
    if _depth >= _max_depth:
        return "<max-depth>"

    if value is None or isinstance(value, (int, float, bool)):
        return value
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED
            if _is_sensitive_key(key)
            else redact_value(item, _depth=_depth + 1, _max_depth=_max_depth)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_value(item, _depth=_depth + 1, _max_depth=_max_depth) for item in value]
    return redact_text(str(value))


class TraceIdLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = current_trace_id() or "-"
        return True


class OperationalSupport:
    """Append-only JSONL stream of notable runtime events (startup, failures)."""

    def __init__(self, events_path: str | Path | None = None) -> None:
        if events_path is None:
            events_path = user_data_dir() / "logs" / "support-events.jsonl"
        self._events_path = Path(events_path)
        self._events_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()

    @property
    def events_path(self) -> Path:
        return self._events_path

    def emit_event(
        self,
        *,
        event_type: str,
        message: str,
        level: str = "INFO",
        data: Mapping[str, Any] | None = None,
    ) -> str:
        trace_id = current_trace_id() or create_trace_id()
        payload: dict[str, Any] = {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            "event_type": (event_type or "").strip() or "support.event",
            "level": (level or "INFO").strip().upper(),
            "trace_id": trace_id,
            "message": redact_text(message or ""),
            "app_version": get_app_version(),
            "pid": os.getpid(),
        }
        if data:
            payload["data"] = redact_value(dict(data))

        line = json.dumps(payload, ensure_ascii=True, sort_keys=True)
        with self._lock:
            with self._events_path.open("a", encoding="utf-8") as handle:
                handle.write(line)
                handle.write("\n")
        return trace_id

    def capture_exception(self, exc: BaseException, *, context: str) -> str:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return self.emit_event(
            event_type="app.failure",
            level="ERROR",
            message=f"Unhandled exception in {context}: {exc}",
            data={
                "context": context,
                "exception_type": type(exc).__name__,
                "code": getattr(exc, "code", None),
                "stacktrace": stack,
            },
        )


_GLOBAL_SUPPORT: OperationalSupport | None = None


def get_operational_support() -> OperationalSupport:
    global _GLOBAL_SUPPORT
    if _GLOBAL_SUPPORT is None:
        _GLOBAL_SUPPORT = OperationalSupport()
    return _GLOBAL_SUPPORT


@contextmanager
def traced_operation(context: str, *, support: OperationalSupport | None = None) -> Iterator[str]:
    """
    Run one command under a fresh trace id. Unexpected failures are written to
    the support stream before propagating; DomainError is a user-facing outcome
    and is left to the caller.
    """
    with bind_trace_id() as trace_id:
        try:
            yield trace_id
        except DomainError:
            raise
        except Exception as exc:
            (support or get_operational_support()).capture_exception(exc, context=context)
            raise


__all__ = [
    "OperationalSupport",
    "REDACTED",
    "REDACTED_EMAIL",
    "TraceIdLogFilter",
    "bind_trace_id",
    "create_trace_id",
    "current_trace_id",
    "get_operational_support",
    "redact_text",
    "redact_value",
    "traced_operation",
]
