# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from core.models import (
    AuditLogEntry,
    BudgetAllocation,
    Expense,
    Invoice,
    Project,
    ProjectMembership,
    ProjectRole,
    RiskSample,
)


class ProjectRepository(ABC):
    @abstractmethod
    def add(self, project: Project) -> None: ...
    @abstractmethod
    def update(self, project: Project) -> None: ...
    @abstractmethod
    def delete(self, project_id: str) -> None: ...
    @abstractmethod
    def get(self, project_id: str) -> Optional[Project]: ...
    @abstractmethod
    def list_all(self) -> List[Project]: ...
    @abstractmethod
    def list_by_ids(self, project_ids: Iterable[str]) -> List[Project]: ...


class MembershipRepository(ABC):
    @abstractmethod
    def add(self, membership: ProjectMembership) -> None: ...
    @abstractmethod
    def get_role(self, project_id: str, user_id: str) -> Optional[ProjectRole]: ...
    @abstractmethod
    def list_project_ids_for_user(self, user_id: str) -> List[str]: ...


class BudgetAllocationRepository(ABC):
    @abstractmethod
    def add(self, allocation: BudgetAllocation) -> None: ...
    @abstractmethod
    def update(self, allocation: BudgetAllocation) -> None: ...
    @abstractmethod
    def delete(self, allocation_id: str) -> None: ...
    @abstractmethod
    def get(self, allocation_id: str) -> Optional[BudgetAllocation]: ...
    @abstractmethod
    def list_by_project(self, project_id: str) -> List[BudgetAllocation]: ...
    @abstractmethod
    def list_by_projects(self, project_ids: Iterable[str]) -> List[BudgetAllocation]: ...


class ExpenseRepository(ABC):
    @abstractmethod
    def add(self, expense: Expense) -> None: ...
    @abstractmethod
    def update(self, expense: Expense) -> None: ...
    @abstractmethod
    def delete(self, expense_id: str) -> None: ...
    @abstractmethod
    def get(self, expense_id: str) -> Optional[Expense]: ...
    @abstractmethod
    def list_by_project(self, project_id: str) -> List[Expense]: ...
    @abstractmethod
    def list_by_projects(self, project_ids: Iterable[str]) -> List[Expense]: ...


class InvoiceRepository(ABC):
    @abstractmethod
    def add(self, invoice: Invoice) -> None: ...
    @abstractmethod
    def update(self, invoice: Invoice) -> None: ...
    @abstractmethod
    def delete(self, invoice_id: str) -> None: ...
    @abstractmethod
    def get(self, invoice_id: str) -> Optional[Invoice]: ...
    @abstractmethod
    def list_by_project(self, project_id: str) -> List[Invoice]: ...


class RiskSampleRepository(ABC):
    @abstractmethod
    def add(self, sample: RiskSample) -> None: ...
    @abstractmethod
    def get(self, sample_id: str) -> Optional[RiskSample]: ...
    @abstractmethod
    def deactivate(self, sample_id: str) -> None: ...
    @abstractmethod
    def list_by_project(self, project_id: str, risk_type: str | None = None) -> List[RiskSample]: ...


class AuditLogRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditLogEntry) -> None: ...
    @abstractmethod
    def list_recent(
        self,
        limit: int = 200,
        *,
        project_id: str | None = None,
        entity_type: str | None = None,
    ) -> List[AuditLogEntry]: ...
    @abstractmethod
    def list_for_entity(self, entity_type: str, entity_id: str) -> List[AuditLogEntry]: ...


class ReceiptStore(ABC):
    """Opaque blob store for receipt images. Only the returned reference is persisted."""

    @abstractmethod
    def upload(self, project_id: str, filename: str, content: bytes) -> str: ...
    @abstractmethod
    def public_url(self, receipt_ref: str) -> str: ...


class RiskAnalysisClient(ABC):
    """External weather / risk analysis service. Implementations may block."""

    @abstractmethod
    def fetch_weather(self, location: str) -> dict: ...
    @abstractmethod
    def analyze_risk(self, project_id: str, weather: dict, location: str) -> dict: ...
