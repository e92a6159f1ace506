from __future__ import annotations

import json
from typing import Any


def dump_json(payload: Any) -> str:
    return json.dumps(payload, default=str, ensure_ascii=False)


def load_json_object(raw: str | None) -> dict[str, Any]:
    value = _load(raw)
    return value if isinstance(value, dict) else {}


def load_json_records(raw: str | None) -> list[dict[str, Any]]:
    value = _load(raw)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _load(raw: str | None) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return None


__all__ = ["dump_json", "load_json_object", "load_json_records"]
