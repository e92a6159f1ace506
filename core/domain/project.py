from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import ProjectRole, ProjectStatus
from core.domain.identifiers import generate_id


@dataclass
class Project:
    id: str
    name: str
    budget: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    currency: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(name: str, **extra) -> "Project":
        return Project(
            id=generate_id(),
            name=name,
            **extra,
        )


@dataclass
class ProjectMembership:
    id: str
    project_id: str
    user_id: str
    role: ProjectRole = ProjectRole.MEMBER

    @staticmethod
    def create(project_id: str, user_id: str, role: ProjectRole = ProjectRole.MEMBER) -> "ProjectMembership":
        return ProjectMembership(
            id=generate_id(),
            project_id=project_id,
            user_id=user_id,
            role=role,
        )


__all__ = ["Project", "ProjectMembership"]
