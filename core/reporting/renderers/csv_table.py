import csv
from dataclasses import asdict
from datetime import date, datetime
from enum import Enum
from pathlib import Path

from core.reporting.contexts import ExpenseTableContext

EXPENSE_COLUMNS = [
    "id",
    "project_id",
    "category",
    "amount",
    "expense_date",
    "vendor",
    "description",
    "receipt_ref",
    "status",
    "created_by",
    "approved_by",
    "approved_at",
    "created_at",
]


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class ExpenseCsvRenderer:
    def render(self, ctx: ExpenseTableContext, output_path: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", newline="", encoding="utf-8") as fh:
            # QUOTE_MINIMAL quotes cells holding commas, quotes or newlines
            writer = csv.writer(fh, quoting=csv.QUOTE_MINIMAL)
            writer.writerow(EXPENSE_COLUMNS)
            for expense in ctx.expenses:
                row = asdict(expense)
                writer.writerow([_cell(row.get(col)) for col in EXPENSE_COLUMNS])
        return output_path
