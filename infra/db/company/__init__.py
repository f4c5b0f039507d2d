from infra.db.company.mapper import company_from_orm, company_to_orm
from infra.db.company.repository import SqlAlchemyCompanyRepository

__all__ = [
    "company_to_orm",
    "company_from_orm",
    "SqlAlchemyCompanyRepository",
]
