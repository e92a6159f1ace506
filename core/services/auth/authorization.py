from __future__ import annotations

from core.exceptions import AuthorizationError
from core.services.auth.permissions import Permissions


def _require_scope(permissions: Permissions, project_id: str, operation_label: str) -> None:
    if not permissions.applies_to(project_id):
        raise AuthorizationError(
            f"Permission denied for {operation_label}. Permissions were resolved for another project.",
            code="FORBIDDEN_PROJECT_SCOPE",
        )
    if not permissions.is_member:
        raise AuthorizationError(
            f"Permission denied for {operation_label}. You are not a member of this project.",
            code="FORBIDDEN_NOT_MEMBER",
        )


def require_read(permissions: Permissions, project_id: str, *, operation_label: str) -> None:
    _require_scope(permissions, project_id, operation_label)


def require_write(permissions: Permissions, project_id: str, *, operation_label: str) -> None:
    _require_scope(permissions, project_id, operation_label)
    if not permissions.can_write:
        raise AuthorizationError(
            f"Permission denied for {operation_label}. Role '{permissions.role.value}' is read-only.",
            code="FORBIDDEN",
        )


def require_decision_role(permissions: Permissions, project_id: str, *, operation_label: str) -> None:
    _require_scope(permissions, project_id, operation_label)
    if not permissions.can_decide_expenses:
        raise AuthorizationError(
            f"Permission denied for {operation_label}. Only project owners and admins can do this.",
            code="FORBIDDEN",
        )


__all__ = ["require_read", "require_write", "require_decision_role"]
