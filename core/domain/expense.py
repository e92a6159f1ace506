from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import ExpenseStatus
from core.domain.identifiers import generate_id


@dataclass
class Expense:
    id: str
    project_id: str
    category: str
    amount: float
    expense_date: date
    vendor: str = ""
    description: str = ""
    receipt_ref: Optional[str] = None
    status: ExpenseStatus = ExpenseStatus.PENDING
    created_by: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        project_id: str,
        category: str,
        amount: float,
        expense_date: date,
        vendor: str = "",
        description: str = "",
        created_by: Optional[str] = None,
    ) -> "Expense":
        return Expense(
            id=generate_id(),
            project_id=project_id,
            category=category,
            amount=amount,
            expense_date=expense_date,
            vendor=vendor,
            description=description,
            created_by=created_by,
        )


__all__ = ["Expense"]
