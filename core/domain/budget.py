from __future__ import annotations

from dataclasses import dataclass

from core.domain.identifiers import generate_id


@dataclass
class BudgetAllocation:
    id: str
    project_id: str
    category: str
    budgeted_amount: float = 0.0
    notes: str = ""

    @staticmethod
    def create(
        project_id: str,
        category: str,
        budgeted_amount: float,
        notes: str = "",
    ) -> "BudgetAllocation":
        return BudgetAllocation(
            id=generate_id(),
            project_id=project_id,
            category=category,
            budgeted_amount=budgeted_amount,
            notes=notes,
        )


__all__ = ["BudgetAllocation"]
