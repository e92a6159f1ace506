from __future__ import annotations

from datetime import date

from core.exceptions import ValidationError


class ProjectValidationMixin:
    def _validate_project_name(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Project name cannot be empty.", code="PROJECT_NAME_EMPTY")

    def _validate_budget(self, budget: float | None) -> None:
        if budget is not None and budget < 0:
            raise ValidationError("Project budget cannot be negative.", code="PROJECT_BUDGET_NEGATIVE")

    def _validate_dates(self, start_date: date | None, end_date: date | None) -> None:
        if start_date and end_date and end_date < start_date:
            raise ValidationError(
                "Project end date cannot be before start date.",
                code="PROJECT_DATES_INVALID",
            )


__all__ = ["ProjectValidationMixin"]
