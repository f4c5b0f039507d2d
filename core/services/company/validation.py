from __future__ import annotations

import re

from core.domain.enums import Role
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import CompanyRepository, UserRepository
from core.models import Company

MAX_COMPANY_NAME_LENGTH = 100

_EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


def require_registered_company(
    company_repo: CompanyRepository,
    company_name: str,
    *,
    require_active: bool = True,
) -> Company:
    """Look up a company by name for services that attach records to it."""
    company = company_repo.get_by_name(company_name)
    if company is None:
        raise NotFoundError(f"Company '{company_name}' is not registered.", code="COMPANY_NOT_FOUND")
    if require_active and not company.is_active:
        raise BusinessRuleError(f"Company '{company_name}' is deactivated.", code="COMPANY_INACTIVE")
    return company


def require_seat_available(user_repo: UserRepository, company: Company) -> None:
    executors = [user for user in user_repo.list_by_company(company.name) if user.role == Role.TASK_EXECUTOR]
    if len(executors) >= company.max_employees:
        raise BusinessRuleError(
            f"Company '{company.name}' already has {len(executors)} of {company.max_employees} employees.",
            code="COMPANY_FULL",
        )


class CompanyValidationMixin:
    _company_repo: CompanyRepository

    def _validate_company_name(self, name: str, *, current: Company | None = None) -> str:
        value = (name or "").strip()
        if not value:
            raise ValidationError("Company name is required.", code="COMPANY_NAME_REQUIRED")
        if len(value) > MAX_COMPANY_NAME_LENGTH:
            raise ValidationError(
                f"Company name must be at most {MAX_COMPANY_NAME_LENGTH} characters.",
                code="COMPANY_NAME_TOO_LONG",
            )
        existing = self._company_repo.get_by_name(value)
        if existing is not None and (current is None or existing.id != current.id):
            raise BusinessRuleError(f"Company '{value}' already exists.", code="COMPANY_EXISTS")
        return value

    @staticmethod
    def _validate_contact_email(email: str | None) -> str | None:
        value = (email or "").strip()
        if not value:
            return None
        if not _EMAIL_RE.fullmatch(value):
            raise ValidationError("Contact email is invalid.", code="INVALID_EMAIL")
        return value

    @staticmethod
    def _validate_max_employees(max_employees: int) -> int:
        if isinstance(max_employees, bool) or not isinstance(max_employees, int) or max_employees < 1:
            raise ValidationError("Max employees must be at least 1.", code="INVALID_MAX_EMPLOYEES")
        return max_employees


__all__ = [
    "CompanyValidationMixin",
    "MAX_COMPANY_NAME_LENGTH",
    "require_registered_company",
    "require_seat_available",
]
