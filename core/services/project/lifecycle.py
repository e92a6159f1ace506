from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError
from core.interfaces import MembershipRepository, ProjectRepository
from core.models import Project, ProjectMembership, ProjectRole, ProjectStatus
from core.services.auth.authorization import require_decision_role
from core.services.auth.permissions import Permissions
from core.services.invoice.policy import default_currency
from core.services.project.validation import ProjectValidationMixin

logger = logging.getLogger(__name__)


class ProjectLifecycleMixin(ProjectValidationMixin):
    _session: Session
    _project_repo: ProjectRepository
    _membership_repo: MembershipRepository

    def create_project(
        self,
        owner_user_id: str,
        name: str,
        budget: float | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        currency: str | None = None,
        status: ProjectStatus = ProjectStatus.PLANNING,
    ) -> Project:
        """Create a project and make the creator its owner."""
        self._validate_project_name(name)
        self._validate_budget(budget)
        self._validate_dates(start_date, end_date)
        project = Project.create(
            name=name.strip(),
            budget=budget,
            start_date=start_date,
            end_date=end_date,
            status=status,
            currency=(currency or "").strip().upper() or default_currency(),
        )
        membership = ProjectMembership.create(project.id, owner_user_id, ProjectRole.OWNER)

        try:
            self._project_repo.add(project)
            # memberships reference projects; no ORM relationship orders the inserts
            self._session.flush()
            self._membership_repo.add(membership)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Error creating project: %s", e)
            raise

        self._audit(
            action="project.create",
            entity_type="project",
            entity_id=project.id,
            actor_user_id=owner_user_id,
            project_id=project.id,
            details={"name": project.name, "budget": budget},
        )
        logger.info("Created project %s - %s", project.id, project.name)
        domain_events.project_changed.emit(project.id)
        return project

    def add_member(
        self,
        permissions: Permissions,
        project_id: str,
        user_id: str,
        role: ProjectRole = ProjectRole.MEMBER,
    ) -> ProjectMembership:
        require_decision_role(permissions, project_id, operation_label="add project member")
        if not self._project_repo.get(project_id):
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        membership = ProjectMembership.create(project_id, user_id, role)
        try:
            self._membership_repo.add(membership)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        self._audit(
            action="project.member_add",
            entity_type="project_membership",
            entity_id=membership.id,
            actor_user_id=permissions.user_id,
            project_id=project_id,
            details={"user_id": user_id, "role": role.value},
        )
        return membership

    def update_project(
        self,
        permissions: Permissions,
        project_id: str,
        name: str | None = None,
        budget: float | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status: ProjectStatus | None = None,
    ) -> Project:
        require_decision_role(permissions, project_id, operation_label="update project")
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")

        if name is not None:
            self._validate_project_name(name)
            project.name = name.strip()
        if budget is not None:
            self._validate_budget(budget)
            project.budget = budget
        if start_date is not None:
            project.start_date = start_date
        if end_date is not None:
            project.end_date = end_date
        self._validate_dates(project.start_date, project.end_date)
        if status is not None:
            project.status = status

        try:
            self._project_repo.update(project)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        self._audit(
            action="project.update",
            entity_type="project",
            entity_id=project.id,
            actor_user_id=permissions.user_id,
            project_id=project.id,
            details={"name": project.name, "status": project.status.value, "budget": project.budget},
        )
        domain_events.project_changed.emit(project_id)
        return project


__all__ = ["ProjectLifecycleMixin"]
