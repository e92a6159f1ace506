from __future__ import annotations

from typing import List

from core.models import Project, ProjectRole


class ProjectQueryMixin:
    def get_project(self, project_id: str) -> Project | None:
        return self._project_repo.get(project_id)

    def list_projects_for_user(self, user_id: str) -> List[Project]:
        project_ids = self._membership_repo.list_project_ids_for_user(user_id)
        projects = self._project_repo.list_by_ids(project_ids)
        return sorted(projects, key=lambda p: p.created_at, reverse=True)

    def get_role(self, project_id: str, user_id: str) -> ProjectRole | None:
        return self._membership_repo.get_role(project_id, user_id)


__all__ = ["ProjectQueryMixin"]
