from __future__ import annotations

import logging
from typing import Any, Callable, List

from sqlalchemy.orm import Session

from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry

logger = logging.getLogger(__name__)


def _no_trace() -> str | None:
    return None


class AuditService:
    """
    Append-only trail of ledger mutations.

    Entries are written after the change they describe has committed, so a
    failed write never leaves an entry behind.
    """

    def __init__(
        self,
        session: Session,
        audit_repo: AuditLogRepository,
        trace_provider: Callable[[], str | None] = _no_trace,
    ):
        self._session = session
        self._audit_repo = audit_repo
        self._trace_provider = trace_provider

    def record(
        self,
        *,
        action: str,
        entity_type: str,
        entity_id: str,
        actor_user_id: str | None = None,
        project_id: str | None = None,
        details: dict[str, Any] | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        entry = AuditLogEntry.create(
            action,
            entity_type,
            entity_id,
            project_id=project_id,
            actor_user_id=actor_user_id,
            trace_id=self._trace_provider(),
            details=details,
        )
        self._audit_repo.add(entry)
        if commit:
            try:
                self._session.commit()
            except Exception:
                logger.exception("Audit entry %s for %s/%s not saved", action, entity_type, entity_id)
                self._session.rollback()
                raise
        logger.debug("Audit %s on %s/%s by %s", action, entity_type, entity_id, actor_user_id or "-")
        return entry

    def list_recent(
        self,
        limit: int = 200,
        *,
        project_id: str | None = None,
        entity_type: str | None = None,
    ) -> List[AuditLogEntry]:
        return self._audit_repo.list_recent(limit=limit, project_id=project_id, entity_type=entity_type)

    def entity_history(self, entity_type: str, entity_id: str) -> List[AuditLogEntry]:
        """Oldest-first trail of one record, e.g. an expense from creation to decision."""
        return self._audit_repo.list_for_entity(entity_type, entity_id)


__all__ = ["AuditService"]
