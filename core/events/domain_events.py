"""Change notifications for ledger writes; each payload is the affected project id."""
from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.project_changed: Signal[str] = Signal("project_changed")
        self.budget_changed: Signal[str] = Signal("budget_changed")
        self.expenses_changed: Signal[str] = Signal("expenses_changed")
        self.invoices_changed: Signal[str] = Signal("invoices_changed")
        self.risk_changed: Signal[str] = Signal("risk_changed")

    def all_signals(self) -> list[Signal[str]]:
        return [
            self.project_changed,
            self.budget_changed,
            self.expenses_changed,
            self.invoices_changed,
            self.risk_changed,
        ]


# process-wide instance the services emit on
domain_events = DomainEvents()
