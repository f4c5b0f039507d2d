# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from core.models import (
    AuditLogEntry,
    BillingRecord,
    Company,
    CompanyOperationPricing,
    CompanyPricingPlan,
    Project,
    Role,
    Task,
    UserAccount,
)


class UserRepository(ABC):
    @abstractmethod
    def add(self, user: UserAccount) -> None: ...
    @abstractmethod
    def update(self, user: UserAccount) -> None: ...
    @abstractmethod
    def delete(self, user_id: str) -> None: ...
    @abstractmethod
    def get(self, user_id: str) -> Optional[UserAccount]: ...
    @abstractmethod
    def get_by_username(self, username: str) -> Optional[UserAccount]: ...
    @abstractmethod
    def list_all(self) -> List[UserAccount]: ...
    @abstractmethod
    def list_by_parent(self, parent_id: str, role: Role | None = None) -> List[UserAccount]: ...
    @abstractmethod
    def list_by_company(self, company_name: str) -> List[UserAccount]: ...
    @abstractmethod
    def debit_balance(self, user_id: str, amount: Decimal) -> bool: ...
    @abstractmethod
    def credit_balance(self, user_id: str, amount: Decimal) -> None: ...


class CompanyRepository(ABC):
    @abstractmethod
    def add(self, company: Company) -> None: ...
    @abstractmethod
    def update(self, company: Company) -> None: ...
    @abstractmethod
    def delete(self, company_id: str) -> None: ...
    @abstractmethod
    def get(self, company_id: str) -> Optional[Company]: ...
    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Company]: ...
    @abstractmethod
    def list_all(self, *, active_only: bool = False) -> List[Company]: ...


class PricingPlanRepository(ABC):
    @abstractmethod
    def add(self, plan: CompanyPricingPlan) -> None: ...
    @abstractmethod
    def update(self, plan: CompanyPricingPlan) -> None: ...
    @abstractmethod
    def delete(self, plan_id: str) -> None: ...
    @abstractmethod
    def get(self, plan_id: str) -> Optional[CompanyPricingPlan]: ...
    @abstractmethod
    def get_by_company(self, company_name: str, *, active_only: bool = False) -> Optional[CompanyPricingPlan]: ...
    @abstractmethod
    def list_all(self) -> List[CompanyPricingPlan]: ...


class OperationPricingRepository(ABC):
    @abstractmethod
    def add(self, pricing: CompanyOperationPricing) -> None: ...
    @abstractmethod
    def update(self, pricing: CompanyOperationPricing) -> None: ...
    @abstractmethod
    def delete(self, pricing_id: str) -> None: ...
    @abstractmethod
    def get(self, pricing_id: str) -> Optional[CompanyOperationPricing]: ...
    @abstractmethod
    def list_by_company(self, company_name: str | None = None) -> List[CompanyOperationPricing]: ...


class BillingRecordRepository(ABC):
    @abstractmethod
    def add(self, record: BillingRecord) -> None: ...
    @abstractmethod
    def update_status(self, record: BillingRecord) -> None: ...
    @abstractmethod
    def get(self, record_id: str) -> Optional[BillingRecord]: ...
    @abstractmethod
    def list_records(
        self,
        *,
        user_ids: list[str] | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[BillingRecord]: ...
    @abstractmethod
    def list_for_subject(self, subject_user_id: str) -> List[BillingRecord]: ...
    @abstractmethod
    def sum_total_by_users(self, user_ids: list[str]) -> Decimal: ...


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
    def list_all(self, company_name: str | None = None) -> List[Project]: ...


class TaskRepository(ABC):
    @abstractmethod
    def add(self, task: Task) -> None: ...
    @abstractmethod
    def update(self, task: Task) -> None: ...
    @abstractmethod
    def delete(self, task_id: str) -> None: ...
    @abstractmethod
    def get(self, task_id: str) -> Optional[Task]: ...
    @abstractmethod
    def list_all(self, *, assignee_id: str | None = None, project_id: str | None = None) -> List[Task]: ...
    @abstractmethod
    def delete_by_project(self, project_id: str) -> None: ...


class AuditLogRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditLogEntry) -> None: ...
    @abstractmethod
    def list_recent(
        self,
        limit: int = 200,
        *,
        company_name: str | None = None,
        entity_type: str | None = None,
    ) -> List[AuditLogEntry]: ...
    @abstractmethod
    def list_for_entity(
        self,
        entity_type: str,
        entity_id: str,
        *,
        company_name: str | None = None,
    ) -> List[AuditLogEntry]: ...


__all__ = [
    "UserRepository",
    "CompanyRepository",
    "PricingPlanRepository",
    "OperationPricingRepository",
    "BillingRecordRepository",
    "ProjectRepository",
    "TaskRepository",
    "AuditLogRepository",
]