"""Reporting API wrappers around renderer classes."""

from pathlib import Path
from datetime import date
from typing import Iterable

from core.models import Expense
from core.reporting.contexts import ExpenseTableContext, FinanceWorkbookContext
from core.reporting.renderers.csv_table import ExpenseCsvRenderer
from core.reporting.renderers.excel import FinanceWorkbookRenderer
from core.services.budget.alerts import budget_alerts
from core.services.budget.reconciliation import ReconciliationResult
from core.services.finance.models import ProjectFinanceSnapshot


def _ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def default_export_name(table: str, as_of: date | None = None) -> str:
    as_of = as_of or date.today()
    return f"{table}_export_{as_of.isoformat()}.csv"


def export_expenses_csv(
    expenses: Iterable[Expense],
    output_path: str | Path,
    as_of: date | None = None,
) -> Path:
    """
    Write expenses to CSV. A directory target gets the dated default file name.
    """
    as_of = as_of or date.today()
    path = Path(output_path)
    if path.is_dir():
        path = path / default_export_name("expenses", as_of)
    ctx = ExpenseTableContext(expenses=list(expenses), as_of=as_of)
    return ExpenseCsvRenderer().render(ctx, _ensure_parent(path))


def export_reconciliation_xlsx(
    result: ReconciliationResult,
    output_path: str | Path,
    as_of: date | None = None,
) -> Path:
    ctx = FinanceWorkbookContext(
        reconciliation=result,
        alerts=budget_alerts(result),
        as_of=as_of or date.today(),
    )
    return FinanceWorkbookRenderer().render(ctx, _ensure_parent(Path(output_path)))


def export_finance_xlsx(
    snapshot: ProjectFinanceSnapshot,
    output_path: str | Path,
    as_of: date | None = None,
) -> Path:
    ctx = FinanceWorkbookContext(
        reconciliation=snapshot.reconciliation,
        alerts=list(snapshot.alerts),
        as_of=as_of or snapshot.computed_at.date(),
        snapshot=snapshot,
    )
    return FinanceWorkbookRenderer().render(ctx, _ensure_parent(Path(output_path)))
