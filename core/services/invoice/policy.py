from __future__ import annotations

import os

DEFAULT_TAX_RATE_PERCENT = 13.0


def default_tax_rate_percent() -> float:
    raw = (os.getenv("CF_DEFAULT_TAX_RATE", "") or "").strip()
    if not raw:
        return DEFAULT_TAX_RATE_PERCENT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TAX_RATE_PERCENT
    return value if value >= 0 else DEFAULT_TAX_RATE_PERCENT


def default_currency() -> str:
    return (os.getenv("CF_DEFAULT_CURRENCY", "CAD") or "CAD").strip().upper() or "CAD"


__all__ = ["DEFAULT_TAX_RATE_PERCENT", "default_tax_rate_percent", "default_currency"]
