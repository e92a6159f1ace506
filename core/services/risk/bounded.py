from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable, TypeVar

from core.exceptions import DomainError, ExternalServiceError, ExternalServiceTimeout

T = TypeVar("T")

logger = logging.getLogger(__name__)


def call_with_timeout(fn: Callable[[], T], *, timeout_seconds: float, label: str) -> T:
    """
    Run a blocking external call with a hard time budget.

    The worker thread is abandoned on timeout rather than joined, so the caller
    never waits past ``timeout_seconds``.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cf-external")
    future = executor.submit(fn)
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeout:
        future.cancel()
        logger.warning("%s timed out after %.0fs", label, timeout_seconds)
        raise ExternalServiceTimeout(
            f"{label} timed out after {timeout_seconds:.0f}s. Please try again.",
            code="EXTERNAL_TIMEOUT",
        ) from None
    except DomainError:
        raise
    except Exception as exc:
        logger.warning("%s failed: %s", label, exc)
        raise ExternalServiceError(f"{label} failed: {exc}", code="EXTERNAL_FAILURE") from exc
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


__all__ = ["call_with_timeout"]
