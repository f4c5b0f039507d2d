from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from core.domain.company import DEFAULT_MAX_EMPLOYEES
from core.domain.enums import Capability
from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, ConcurrencyError, NotFoundError, UnauthorizedError
from core.interfaces import CompanyRepository, OperationPricingRepository, PricingPlanRepository, UserRepository
from core.models import Company
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService
from core.services.auth.authorization import require_capability, require_principal
from core.services.auth.permissions import is_platform_admin, is_project_manager
from core.services.auth.session import UserSessionContext
from core.services.company.validation import CompanyValidationMixin

logger = logging.getLogger(__name__)


class CompanyService(CompanyValidationMixin):
    """Registry of tenant companies.

    Changes need ``company.manage``. A project manager may read its own
    company. Users, pricing rows and projects refer to a company by name, so a
    company can only be renamed or deleted while nothing refers to it.
    """

    def __init__(
        self,
        session: Session,
        company_repo: CompanyRepository,
        user_repo: UserRepository,
        plan_repo: PricingPlanRepository,
        operation_repo: OperationPricingRepository,
        user_session: UserSessionContext | None = None,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._company_repo: CompanyRepository = company_repo
        self._user_repo: UserRepository = user_repo
        self._plan_repo: PricingPlanRepository = plan_repo
        self._operation_repo: OperationPricingRepository = operation_repo
        self._user_session: UserSessionContext | None = user_session
        self._audit_service: AuditService | None = audit_service

    def create_company(
        self,
        name: str,
        *,
        contact_email: str | None = None,
        contact_phone: str | None = None,
        max_employees: int = DEFAULT_MAX_EMPLOYEES,
    ) -> Company:
        require_capability(self._user_session, Capability.MANAGE_COMPANIES, operation_label="create company")
        company = Company.create(
            name=self._validate_company_name(name),
            contact_email=self._validate_contact_email(contact_email),
            contact_phone=(contact_phone or "").strip() or None,
            max_employees=self._validate_max_employees(max_employees),
        )
        try:
            self._company_repo.add(company)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Error creating company %s: %s", company.name, e)
            raise
        record_audit(
            self,
            action="company.create",
            entity_type="company",
            entity_id=company.id,
            company_name=company.name,
            details={"name": company.name, "max_employees": company.max_employees},
        )
        logger.info("Created company %s - %s", company.id, company.name)
        domain_events.companies_changed.emit(company.id)
        return company

    def get_company(self, company_id: str) -> Company:
        principal = require_principal(self._user_session, operation_label="view company")
        company = self._require_company(company_id)
        if is_platform_admin(principal):
            return company
        if is_project_manager(principal) and principal.company_name == company.name:
            return company
        raise UnauthorizedError("Permission denied for view company. Company is not yours.")

    def employee_count(self, company_id: str) -> int:
        company = self.get_company(company_id)
        return len(self._user_repo.list_by_company(company.name))

    def list_companies(self, active_only: bool = False) -> List[Company]:
        require_capability(self._user_session, Capability.MANAGE_COMPANIES, operation_label="list companies")
        return self._company_repo.list_all(active_only=active_only)

    def update_company(
        self,
        company_id: str,
        *,
        expected_version: int | None = None,
        name: str | None = None,
        contact_email: str | None = None,
        contact_phone: str | None = None,
        max_employees: int | None = None,
        is_active: bool | None = None,
    ) -> Company:
        require_capability(self._user_session, Capability.MANAGE_COMPANIES, operation_label="update company")
        company = self._require_company(company_id)
        if expected_version is not None and company.version != expected_version:
            raise ConcurrencyError(
                "Company changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )

        previous_name = company.name
        if name is not None:
            new_name = self._validate_company_name(name, current=company)
            if new_name != company.name:
                self._require_unreferenced(company, operation_label="rename company")
            company.name = new_name
        if contact_email is not None:
            company.contact_email = self._validate_contact_email(contact_email)
        if contact_phone is not None:
            company.contact_phone = contact_phone.strip() or None
        if max_employees is not None:
            company.max_employees = self._validate_max_employees(max_employees)
        if is_active is not None:
            company.is_active = bool(is_active)

        details = {"name": company.name, "is_active": company.is_active, "max_employees": company.max_employees}
        if company.name != previous_name:
            details["previous_name"] = previous_name
        return self._save(company, action="company.update", details=details)

    def toggle_company_status(self, company_id: str) -> Company:
        require_capability(self._user_session, Capability.MANAGE_COMPANIES, operation_label="toggle company status")
        company = self._require_company(company_id)
        company.is_active = not company.is_active
        return self._save(company, action="company.set_active", details={"is_active": company.is_active})

    def delete_company(self, company_id: str) -> None:
        require_capability(self._user_session, Capability.MANAGE_COMPANIES, operation_label="delete company")
        company = self._require_company(company_id)
        members = self._user_repo.list_by_company(company.name)
        if members:
            raise BusinessRuleError(
                f"Cannot delete company '{company.name}' with {len(members)} member(s). "
                "Move or delete its users first.",
                code="COMPANY_HAS_MEMBERS",
            )
        try:
            self._company_repo.delete(company.id)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action="company.delete",
            entity_type="company",
            entity_id=company.id,
            company_name=company.name,
            details={"name": company.name},
        )
        logger.info("Deleted company %s", company.name)
        domain_events.companies_changed.emit(company.id)

    # ---- helpers ------------------------------------------------------

    def _save(self, company: Company, *, action: str, details: dict) -> Company:
        company.updated_at = datetime.now(timezone.utc)
        try:
            self._company_repo.update(company)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action=action,
            entity_type="company",
            entity_id=company.id,
            company_name=company.name,
            details=details,
        )
        domain_events.companies_changed.emit(company.id)
        return company

    def _require_company(self, company_id: str) -> Company:
        company = self._company_repo.get(company_id)
        if company is None:
            raise NotFoundError("Company not found.", code="COMPANY_NOT_FOUND")
        return company

    def _require_unreferenced(self, company: Company, *, operation_label: str) -> None:
        if (
            self._user_repo.list_by_company(company.name)
            or self._plan_repo.get_by_company(company.name) is not None
            or self._operation_repo.list_by_company(company.name)
        ):
            raise BusinessRuleError(
                f"Cannot {operation_label} '{company.name}' while users or pricing refer to it.",
                code="COMPANY_IN_USE",
            )


__all__ = ["CompanyService"]
