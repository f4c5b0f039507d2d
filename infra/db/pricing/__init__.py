from infra.db.pricing.mapper import (
    operation_pricing_from_orm,
    operation_pricing_to_orm,
    plan_from_orm,
    plan_to_orm,
)
from infra.db.pricing.repository import (
    SqlAlchemyOperationPricingRepository,
    SqlAlchemyPricingPlanRepository,
)

__all__ = [
    "plan_to_orm",
    "plan_from_orm",
    "operation_pricing_to_orm",
    "operation_pricing_from_orm",
    "SqlAlchemyPricingPlanRepository",
    "SqlAlchemyOperationPricingRepository",
]
