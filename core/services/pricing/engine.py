"""Pure pricing computations over already-fetched pricing rows.

Nothing here performs I/O; callers load plans and operation prices and pass
them in.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from core.domain.enums import BillingType, MissingPricePolicy, OperationType, Platform
from core.domain.money import to_decimal, to_display_amount, to_fee, to_unit_price
from core.domain.pricing import CompanyOperationPricing, CompanyPricingPlan
from core.exceptions import PricingNotFoundError, ValidationError

# Business rule: companies without an active plan pay this per employee seat.
DEFAULT_EMPLOYEE_MONTHLY_FEE = Decimal("300.00")


@dataclass(frozen=True)
class BillingQuote:
    billing_type: BillingType
    quantity: int
    unit_price: Decimal
    total_amount: Decimal

    def display_total(self) -> Decimal:
        return to_display_amount(self.total_amount)


def _normalize_company(company_name: str | None) -> str:
    return (company_name or "").strip()


def get_operation_price(
    rows: Iterable[CompanyOperationPricing],
    company_name: str,
    platform: Platform | str,
    operation_type: OperationType | str,
    *,
    policy: MissingPricePolicy = MissingPricePolicy.ERROR,
    default_price: Decimal | None = None,
) -> Decimal:
    company = _normalize_company(company_name)
    platform_value = Platform(platform)
    operation_value = OperationType(operation_type)
    for row in rows:
        if row.matches(company, platform_value, operation_value):
            return to_unit_price(row.unit_price)

    if policy == MissingPricePolicy.DEFAULT:
        if default_price is None:
            raise ValidationError(
                "A default operation price is required for the 'default' policy.",
                code="DEFAULT_PRICE_REQUIRED",
            )
        return to_unit_price(default_price)
    if policy == MissingPricePolicy.ZERO:
        return Decimal("0.000")
    raise PricingNotFoundError(
        f"No active price for {company or '<no company>'} / "
        f"{platform_value.value} / {operation_value.value}."
    )


def find_active_plan(
    plans: Iterable[CompanyPricingPlan],
    company_name: str | None,
) -> CompanyPricingPlan | None:
    company = _normalize_company(company_name)
    if not company:
        return None
    for plan in plans:
        if plan.is_active and plan.company_name == company:
            return plan
    return None


def get_employee_monthly_fee(plans: Iterable[CompanyPricingPlan], company_name: str | None) -> Decimal:
    plan = find_active_plan(plans, company_name)
    if plan is None:
        return DEFAULT_EMPLOYEE_MONTHLY_FEE
    return to_fee(plan.employee_monthly_fee)


def calculate_billing(
    billing_type: BillingType | str,
    quantity: int,
    unit_price: Decimal | str | int,
) -> BillingQuote:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer.", code="INVALID_QUANTITY")
    price = to_decimal(unit_price)
    if price < 0:
        raise ValidationError("Unit price cannot be negative.", code="NEGATIVE_PRICE")
    return BillingQuote(
        billing_type=BillingType(billing_type),
        quantity=quantity,
        unit_price=price,
        total_amount=price * quantity,
    )


__all__ = [
    "DEFAULT_EMPLOYEE_MONTHLY_FEE",
    "BillingQuote",
    "get_operation_price",
    "find_active_plan",
    "get_employee_monthly_fee",
    "calculate_billing",
]
