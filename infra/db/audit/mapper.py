from __future__ import annotations

from core.models import AuditLogEntry
from infra.db.json_columns import dump_json, load_json_object
from infra.db.models import AuditLogORM
from infra.operational_support import redact_value


def audit_to_orm(entry: AuditLogEntry) -> AuditLogORM:
    # client e-mails and secrets never reach the table
    return AuditLogORM(
        id=entry.id,
        occurred_at=entry.occurred_at,
        project_id=entry.project_id,
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        action=entry.action,
        actor_user_id=entry.actor_user_id,
        trace_id=entry.trace_id,
        details_json=dump_json(redact_value(entry.details or {})),
    )


def audit_from_orm(obj: AuditLogORM) -> AuditLogEntry:
    return AuditLogEntry(
        id=obj.id,
        occurred_at=obj.occurred_at,
        project_id=obj.project_id,
        entity_type=obj.entity_type,
        entity_id=obj.entity_id,
        action=obj.action,
        actor_user_id=obj.actor_user_id,
        trace_id=obj.trace_id,
        details=load_json_object(obj.details_json),
    )


__all__ = ["audit_to_orm", "audit_from_orm"]
