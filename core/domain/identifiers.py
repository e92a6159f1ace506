from __future__ import annotations

import uuid


def generate_id() -> str:
    """Row identifier for every ledger entity: a random UUID in canonical text form."""
    return str(uuid.uuid4())


__all__ = ["generate_id"]
