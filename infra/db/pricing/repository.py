from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from core.interfaces import OperationPricingRepository, PricingPlanRepository
from core.models import CompanyOperationPricing, CompanyPricingPlan
from infra.db.models import CompanyOperationPricingORM, CompanyPricingPlanORM
from infra.db.optimistic import update_with_version_check
from infra.db.pricing.mapper import (
    operation_pricing_from_orm,
    operation_pricing_to_orm,
    plan_from_orm,
    plan_to_orm,
)


class SqlAlchemyPricingPlanRepository(PricingPlanRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, plan: CompanyPricingPlan) -> None:
        self.session.add(plan_to_orm(plan))

    def update(self, plan: CompanyPricingPlan) -> None:
        plan.version = update_with_version_check(
            self.session,
            CompanyPricingPlanORM,
            plan.id,
            getattr(plan, "version", 1),
            {
                "company_name": plan.company_name,
                "plan_name": plan.plan_name,
                "employee_monthly_fee": plan.employee_monthly_fee,
                "is_active": plan.is_active,
                "updated_at": plan.updated_at,
            },
            not_found_message="Pricing plan not found.",
            stale_message="Pricing plan was updated by another user.",
        )

    def delete(self, plan_id: str) -> None:
        self.session.execute(delete(CompanyPricingPlanORM).where(CompanyPricingPlanORM.id == plan_id))

    def get(self, plan_id: str) -> Optional[CompanyPricingPlan]:
        obj = self.session.get(CompanyPricingPlanORM, plan_id)
        return plan_from_orm(obj) if obj else None

    def get_by_company(self, company_name: str, *, active_only: bool = False) -> Optional[CompanyPricingPlan]:
        stmt = select(CompanyPricingPlanORM).where(CompanyPricingPlanORM.company_name == company_name)
        if active_only:
            stmt = stmt.where(CompanyPricingPlanORM.is_active.is_(True))
        # the active plan wins over retired ones
        stmt = stmt.order_by(CompanyPricingPlanORM.is_active.desc(), CompanyPricingPlanORM.updated_at.desc())
        obj = self.session.execute(stmt).scalars().first()
        return plan_from_orm(obj) if obj else None

    def list_all(self) -> List[CompanyPricingPlan]:
        stmt = select(CompanyPricingPlanORM).order_by(CompanyPricingPlanORM.company_name)
        rows = self.session.execute(stmt).scalars().all()
        return [plan_from_orm(row) for row in rows]


class SqlAlchemyOperationPricingRepository(OperationPricingRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, pricing: CompanyOperationPricing) -> None:
        self.session.add(operation_pricing_to_orm(pricing))

    def update(self, pricing: CompanyOperationPricing) -> None:
        pricing.version = update_with_version_check(
            self.session,
            CompanyOperationPricingORM,
            pricing.id,
            getattr(pricing, "version", 1),
            {
                "company_name": pricing.company_name,
                "platform": pricing.platform,
                "operation_type": pricing.operation_type,
                "unit_price": pricing.unit_price,
                "is_active": pricing.is_active,
                "updated_at": pricing.updated_at,
            },
            not_found_message="Operation pricing not found.",
            stale_message="Operation pricing was updated by another user.",
        )

    def delete(self, pricing_id: str) -> None:
        self.session.execute(
            delete(CompanyOperationPricingORM).where(CompanyOperationPricingORM.id == pricing_id)
        )

    def get(self, pricing_id: str) -> Optional[CompanyOperationPricing]:
        obj = self.session.get(CompanyOperationPricingORM, pricing_id)
        return operation_pricing_from_orm(obj) if obj else None

    def list_by_company(self, company_name: str | None = None) -> List[CompanyOperationPricing]:
        stmt = select(CompanyOperationPricingORM)
        if company_name is not None:
            stmt = stmt.where(CompanyOperationPricingORM.company_name == company_name)
        stmt = stmt.order_by(
            CompanyOperationPricingORM.company_name,
            CompanyOperationPricingORM.platform,
            CompanyOperationPricingORM.operation_type,
        )
        rows = self.session.execute(stmt).scalars().all()
        return [operation_pricing_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyPricingPlanRepository", "SqlAlchemyOperationPricingRepository"]
