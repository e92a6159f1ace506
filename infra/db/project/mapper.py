from __future__ import annotations

from core.models import Project, ProjectMembership
from infra.db.models import ProjectMembershipORM, ProjectORM


def project_to_orm(project: Project) -> ProjectORM:
    return ProjectORM(
        id=project.id,
        name=project.name,
        budget=project.budget,
        start_date=project.start_date,
        end_date=project.end_date,
        status=project.status,
        currency=project.currency,
        created_at=project.created_at,
    )


def project_from_orm(obj: ProjectORM) -> Project:
    return Project(
        id=obj.id,
        name=obj.name,
        budget=obj.budget,
        start_date=obj.start_date,
        end_date=obj.end_date,
        status=obj.status,
        currency=obj.currency,
        created_at=obj.created_at,
    )


def membership_to_orm(membership: ProjectMembership) -> ProjectMembershipORM:
    return ProjectMembershipORM(
        id=membership.id,
        project_id=membership.project_id,
        user_id=membership.user_id,
        role=membership.role,
    )


def membership_from_orm(obj: ProjectMembershipORM) -> ProjectMembership:
    return ProjectMembership(
        id=obj.id,
        project_id=obj.project_id,
        user_id=obj.user_id,
        role=obj.role,
    )


__all__ = ["project_to_orm", "project_from_orm", "membership_to_orm", "membership_from_orm"]
