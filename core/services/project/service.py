from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import MembershipRepository, ProjectRepository
from core.services.audit.service import AuditService
from core.services.common.base import ServiceBase
from core.services.project.lifecycle import ProjectLifecycleMixin
from core.services.project.query import ProjectQueryMixin


class ProjectService(ProjectLifecycleMixin, ProjectQueryMixin, ServiceBase):
    """Projects and their memberships; the lifecycle and query halves live in the mixins."""

    def __init__(
        self,
        session: Session,
        project_repo: ProjectRepository,
        membership_repo: MembershipRepository,
        audit_service: AuditService | None = None,
    ):
        super().__init__(session, audit_service)
        self._project_repo: ProjectRepository = project_repo
        self._membership_repo: MembershipRepository = membership_repo


__all__ = ["ProjectService"]
