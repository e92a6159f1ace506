from infra.db.project.mapper import (
    membership_from_orm,
    membership_to_orm,
    project_from_orm,
    project_to_orm,
)
from infra.db.project.repository import (
    SqlAlchemyMembershipRepository,
    SqlAlchemyProjectRepository,
)

__all__ = [
    "project_to_orm",
    "project_from_orm",
    "membership_to_orm",
    "membership_from_orm",
    "SqlAlchemyProjectRepository",
    "SqlAlchemyMembershipRepository",
]
