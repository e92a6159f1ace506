from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from infra.operational_support import TraceIdLogFilter, get_operational_support
from infra.path import user_data_dir

FILE_FORMAT = "%(asctime)s [%(levelname)s] trace=%(trace_id)s %(name)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s [trace=%(trace_id)s]: %(message)s"

# chatty third-party loggers held at WARNING unless CF_LOG_LEVEL=DEBUG
_NOISY = ("sqlalchemy.engine", "alembic.runtime.migration", "urllib3")


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("CF_LOG_LEVEL") or "INFO").strip().upper()
    return getattr(logging, name, logging.INFO)


def setup_logging(level: str | None = None, *, console: bool = True) -> Path:
    """
    Route the root logger to ``<data dir>/logs/costflow.log`` (rotating) and,
    unless ``console`` is False, to stderr. Every record carries the current
    trace id.
    """
    log_dir = user_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "costflow.log"

    root = logging.getLogger()
    resolved = _resolve_level(level)
    root.setLevel(resolved)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    trace_filter = TraceIdLogFilter()

    file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5, encoding="utf-8")
    file_handler.addFilter(trace_filter)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root.addHandler(file_handler)

    if console:
        stream = logging.StreamHandler()
        stream.addFilter(trace_filter)
        stream.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        # stdout belongs to command output
        stream.setLevel(max(resolved, logging.WARNING))
        root.addHandler(stream)

    if resolved > logging.DEBUG:
        for name in _NOISY:
            logging.getLogger(name).setLevel(logging.WARNING)

    root.info("Logging initialized. Log file at %s", log_file)
    get_operational_support().emit_event(
        event_type="app.logging.initialized",
        message=f"Logging initialized at {log_file}",
        data={"log_file": str(log_file), "level": logging.getLevelName(resolved)},
    )
    return log_file


__all__ = ["setup_logging", "FILE_FORMAT", "CONSOLE_FORMAT"]
