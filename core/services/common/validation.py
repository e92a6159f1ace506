from __future__ import annotations

import math

from core.exceptions import ValidationError


def require_text(value: str | None, *, field_label: str, code: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field_label} is required.", code=code)
    return cleaned


def require_amount(value: float | None, *, field_label: str, code: str) -> float:
    if value is None:
        raise ValidationError(f"{field_label} is required.", code=code)
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_label} must be a number.", code=code) from None
    if math.isnan(amount) or math.isinf(amount):
        raise ValidationError(f"{field_label} must be a finite number.", code=code)
    if amount < 0:
        raise ValidationError(f"{field_label} cannot be negative.", code=code)
    return amount


__all__ = ["require_text", "require_amount"]
