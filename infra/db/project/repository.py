from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from core.interfaces import MembershipRepository, ProjectRepository
from core.models import Project, ProjectMembership, ProjectRole
from infra.db.models import ProjectMembershipORM, ProjectORM
from infra.db.project.mapper import membership_to_orm, project_from_orm, project_to_orm


class SqlAlchemyProjectRepository(ProjectRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, project: Project) -> None:
        self.session.add(project_to_orm(project))

    def update(self, project: Project) -> None:
        obj = self.session.get(ProjectORM, project.id)
        if obj is None:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        obj.name = project.name
        obj.budget = project.budget
        obj.start_date = project.start_date
        obj.end_date = project.end_date
        obj.status = project.status
        obj.currency = project.currency

    def delete(self, project_id: str) -> None:
        self.session.query(ProjectORM).filter_by(id=project_id).delete()

    def get(self, project_id: str) -> Optional[Project]:
        obj = self.session.get(ProjectORM, project_id)
        return project_from_orm(obj) if obj else None

    def list_all(self) -> List[Project]:
        rows = self.session.execute(select(ProjectORM)).scalars().all()
        return [project_from_orm(row) for row in rows]

    def list_by_ids(self, project_ids: Iterable[str]) -> List[Project]:
        ids = list(project_ids)
        if not ids:
            return []
        stmt = select(ProjectORM).where(ProjectORM.id.in_(ids))
        rows = self.session.execute(stmt).scalars().all()
        return [project_from_orm(row) for row in rows]


class SqlAlchemyMembershipRepository(MembershipRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, membership: ProjectMembership) -> None:
        self.session.add(membership_to_orm(membership))

    def get_role(self, project_id: str, user_id: str) -> Optional[ProjectRole]:
        stmt = select(ProjectMembershipORM.role).where(
            ProjectMembershipORM.project_id == project_id,
            ProjectMembershipORM.user_id == user_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_project_ids_for_user(self, user_id: str) -> List[str]:
        stmt = select(ProjectMembershipORM.project_id).where(ProjectMembershipORM.user_id == user_id)
        return list(self.session.execute(stmt).scalars().all())


__all__ = ["SqlAlchemyProjectRepository", "SqlAlchemyMembershipRepository"]
