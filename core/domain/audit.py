from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from core.domain.identifiers import generate_id


@dataclass
class AuditLogEntry:
    """
    One change to a ledger record.

    ``trace_id`` ties the entry to the log lines of the request that made the
    change; it is empty for writes made outside a traced block.
    """
    id: str
    occurred_at: datetime
    project_id: str | None
    entity_type: str
    entity_id: str
    action: str
    actor_user_id: str | None = None
    trace_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def verb(self) -> str:
        # "expense.approve" -> "approve"
        return self.action.rsplit(".", 1)[-1]

    @staticmethod
    def create(
        action: str,
        entity_type: str,
        entity_id: str,
        *,
        project_id: str | None = None,
        actor_user_id: str | None = None,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> "AuditLogEntry":
        return AuditLogEntry(
            id=generate_id(),
            occurred_at=datetime.now(timezone.utc),
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            actor_user_id=actor_user_id,
            trace_id=trace_id,
            details=dict(details or {}),
        )


__all__ = ["AuditLogEntry"]
