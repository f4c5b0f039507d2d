from __future__ import annotations

from core.models import Company
from infra.db.mappers import as_utc
from infra.db.models import CompanyORM


def company_to_orm(company: Company) -> CompanyORM:
    return CompanyORM(
        id=company.id,
        name=company.name,
        contact_email=company.contact_email,
        contact_phone=company.contact_phone,
        max_employees=company.max_employees,
        is_active=company.is_active,
        created_at=company.created_at,
        updated_at=company.updated_at,
        version=getattr(company, "version", 1),
    )


def company_from_orm(obj: CompanyORM) -> Company:
    return Company(
        id=obj.id,
        name=obj.name,
        contact_email=obj.contact_email,
        contact_phone=obj.contact_phone,
        max_employees=obj.max_employees,
        is_active=obj.is_active,
        created_at=as_utc(obj.created_at),
        updated_at=as_utc(obj.updated_at),
        version=getattr(obj, "version", 1),
    )


__all__ = ["company_to_orm", "company_from_orm"]
