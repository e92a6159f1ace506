from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from core.models import Expense
from core.services.budget.alerts import BudgetAlert
from core.services.budget.reconciliation import ReconciliationResult
from core.services.finance.models import ProjectFinanceSnapshot


@dataclass
class FinanceWorkbookContext:
    reconciliation: ReconciliationResult
    alerts: List[BudgetAlert]
    as_of: date
    snapshot: Optional[ProjectFinanceSnapshot] = None


@dataclass
class ExpenseTableContext:
    expenses: List[Expense]
    as_of: date
