from __future__ import annotations

from dataclasses import dataclass

from core.interfaces import MembershipRepository
from core.models import ProjectRole

DECISION_ROLES = frozenset({ProjectRole.OWNER, ProjectRole.ADMIN})
WRITE_ROLES = frozenset({ProjectRole.OWNER, ProjectRole.ADMIN, ProjectRole.MEMBER})


@dataclass(frozen=True)
class Permissions:
    """Capabilities of one caller on one project, resolved once per request."""

    user_id: str
    project_id: str
    role: ProjectRole | None

    @property
    def is_member(self) -> bool:
        return self.role is not None

    @property
    def can_read(self) -> bool:
        return self.role is not None

    @property
    def can_write(self) -> bool:
        return self.role in WRITE_ROLES

    @property
    def can_decide_expenses(self) -> bool:
        return self.role in DECISION_ROLES

    def applies_to(self, project_id: str) -> bool:
        return self.project_id == project_id


class PermissionResolver:
    def __init__(self, membership_repo: MembershipRepository):
        self._membership_repo = membership_repo

    def resolve(self, project_id: str, user_id: str) -> Permissions:
        role = self._membership_repo.get_role(project_id, user_id)
        return Permissions(user_id=user_id, project_id=project_id, role=role)


__all__ = ["Permissions", "PermissionResolver", "DECISION_ROLES", "WRITE_ROLES"]
