from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from core.domain.enums import OperationType, Platform
from core.domain.identifiers import generate_id


@dataclass
class CompanyPricingPlan:
    id: str
    company_name: str
    plan_name: str
    employee_monthly_fee: Decimal
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1

    @staticmethod
    def create(
        company_name: str,
        plan_name: str,
        employee_monthly_fee: Decimal,
        is_active: bool = True,
    ) -> "CompanyPricingPlan":
        now = datetime.now(timezone.utc)
        return CompanyPricingPlan(
            id=generate_id(),
            company_name=company_name,
            plan_name=plan_name,
            employee_monthly_fee=employee_monthly_fee,
            is_active=is_active,
            created_at=now,
            updated_at=now,
            version=1,
        )


@dataclass
class CompanyOperationPricing:
    id: str
    company_name: str
    platform: Platform
    operation_type: OperationType
    unit_price: Decimal
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1

    @staticmethod
    def create(
        company_name: str,
        platform: Platform,
        operation_type: OperationType,
        unit_price: Decimal,
        is_active: bool = True,
    ) -> "CompanyOperationPricing":
        now = datetime.now(timezone.utc)
        return CompanyOperationPricing(
            id=generate_id(),
            company_name=company_name,
            platform=platform,
            operation_type=operation_type,
            unit_price=unit_price,
            is_active=is_active,
            created_at=now,
            updated_at=now,
            version=1,
        )

    def matches(self, company_name: str, platform: Platform, operation_type: OperationType) -> bool:
        return (
            self.is_active
            and self.company_name == company_name
            and self.platform == platform
            and self.operation_type == operation_type
        )


__all__ = ["CompanyPricingPlan", "CompanyOperationPricing"]
