from __future__ import annotations

from core.models import CompanyOperationPricing, CompanyPricingPlan
from infra.db.mappers import as_decimal, as_utc
from infra.db.models import CompanyOperationPricingORM, CompanyPricingPlanORM


def plan_to_orm(plan: CompanyPricingPlan) -> CompanyPricingPlanORM:
    return CompanyPricingPlanORM(
        id=plan.id,
        company_name=plan.company_name,
        plan_name=plan.plan_name,
        employee_monthly_fee=plan.employee_monthly_fee,
        is_active=plan.is_active,
        created_at=plan.created_at,
        updated_at=plan.updated_at,
        version=getattr(plan, "version", 1),
    )


def plan_from_orm(obj: CompanyPricingPlanORM) -> CompanyPricingPlan:
    return CompanyPricingPlan(
        id=obj.id,
        company_name=obj.company_name,
        plan_name=obj.plan_name,
        employee_monthly_fee=as_decimal(obj.employee_monthly_fee),
        is_active=obj.is_active,
        created_at=as_utc(obj.created_at),
        updated_at=as_utc(obj.updated_at),
        version=getattr(obj, "version", 1),
    )


def operation_pricing_to_orm(pricing: CompanyOperationPricing) -> CompanyOperationPricingORM:
    return CompanyOperationPricingORM(
        id=pricing.id,
        company_name=pricing.company_name,
        platform=pricing.platform,
        operation_type=pricing.operation_type,
        unit_price=pricing.unit_price,
        is_active=pricing.is_active,
        created_at=pricing.created_at,
        updated_at=pricing.updated_at,
        version=getattr(pricing, "version", 1),
    )


def operation_pricing_from_orm(obj: CompanyOperationPricingORM) -> CompanyOperationPricing:
    return CompanyOperationPricing(
        id=obj.id,
        company_name=obj.company_name,
        platform=obj.platform,
        operation_type=obj.operation_type,
        unit_price=as_decimal(obj.unit_price),
        is_active=obj.is_active,
        created_at=as_utc(obj.created_at),
        updated_at=as_utc(obj.updated_at),
        version=getattr(obj, "version", 1),
    )


__all__ = [
    "plan_to_orm",
    "plan_from_orm",
    "operation_pricing_to_orm",
    "operation_pricing_from_orm",
]
