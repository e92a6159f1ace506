from core.services.auth.authorization import require_decision_role, require_read, require_write
from core.services.auth.permissions import PermissionResolver, Permissions

__all__ = [
    "Permissions",
    "PermissionResolver",
    "require_read",
    "require_write",
    "require_decision_role",
]
