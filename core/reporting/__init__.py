from core.reporting.api import (
    default_export_name,
    export_expenses_csv,
    export_finance_xlsx,
    export_reconciliation_xlsx,
)

__all__ = [
    "default_export_name",
    "export_expenses_csv",
    "export_finance_xlsx",
    "export_reconciliation_xlsx",
]
