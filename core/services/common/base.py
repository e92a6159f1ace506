from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from core.services.audit.service import AuditService

logger = logging.getLogger(__name__)


class ServiceBase:
    """Session ownership shared by the ledger services: commit-or-rollback plus the audit trail."""

    def __init__(self, session: Session, audit_service: AuditService | None = None):
        self._session = session
        self._audit_service = audit_service

    def _commit(self) -> None:
        try:
            self._session.commit()
        except Exception:
            logger.exception("Commit failed; rolling back")
            self._session.rollback()
            raise

    def _audit(
        self,
        *,
        action: str,
        entity_type: str,
        entity_id: str,
        actor_user_id: str | None = None,
        project_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        # runs after the ledger row is committed, in its own transaction
        if self._audit_service is None:
            return
        self._audit_service.record(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_user_id=actor_user_id,
            project_id=project_id,
            details=details,
            commit=True,
        )


__all__ = ["ServiceBase"]
