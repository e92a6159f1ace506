from infra.db.audit.repository import SqlAlchemyAuditLogRepository

__all__ = ["SqlAlchemyAuditLogRepository"]
