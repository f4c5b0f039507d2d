from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from core.interfaces import CompanyRepository
from core.models import Company
from infra.db.company.mapper import company_from_orm, company_to_orm
from infra.db.models import CompanyORM
from infra.db.optimistic import update_with_version_check


class SqlAlchemyCompanyRepository(CompanyRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, company: Company) -> None:
        self.session.add(company_to_orm(company))

    def update(self, company: Company) -> None:
        company.version = update_with_version_check(
            self.session,
            CompanyORM,
            company.id,
            getattr(company, "version", 1),
            {
                "name": company.name,
                "contact_email": company.contact_email,
                "contact_phone": company.contact_phone,
                "max_employees": company.max_employees,
                "is_active": company.is_active,
                "updated_at": company.updated_at,
            },
            not_found_message="Company not found.",
            stale_message="Company was updated by another user.",
        )

    def delete(self, company_id: str) -> None:
        self.session.execute(delete(CompanyORM).where(CompanyORM.id == company_id))

    def get(self, company_id: str) -> Optional[Company]:
        obj = self.session.get(CompanyORM, company_id, populate_existing=True)
        return company_from_orm(obj) if obj else None

    def get_by_name(self, name: str) -> Optional[Company]:
        stmt = select(CompanyORM).where(CompanyORM.name == name)
        obj = self.session.execute(stmt).scalars().first()
        return company_from_orm(obj) if obj else None

    def list_all(self, *, active_only: bool = False) -> List[Company]:
        stmt = select(CompanyORM)
        if active_only:
            stmt = stmt.where(CompanyORM.is_active.is_(True))
        rows = self.session.execute(stmt.order_by(CompanyORM.name)).scalars().all()
        return [company_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyCompanyRepository"]
