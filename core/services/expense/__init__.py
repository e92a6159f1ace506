from core.services.expense.service import ExpenseSaveOutcome, ExpenseService, ReceiptUpload
from core.services.expense.state_machine import ALLOWED_TRANSITIONS, apply_decision, can_transition
from core.services.expense.summary import ExpenseSummary, filter_expenses, summarize_expenses

__all__ = [
    "ExpenseService",
    "ExpenseSaveOutcome",
    "ReceiptUpload",
    "ALLOWED_TRANSITIONS",
    "apply_decision",
    "can_transition",
    "ExpenseSummary",
    "filter_expenses",
    "summarize_expenses",
]
