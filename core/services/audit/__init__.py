from core.services.audit.service import AuditService

__all__ = ["AuditService"]
