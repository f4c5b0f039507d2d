from core.services.pricing.engine import (
    DEFAULT_EMPLOYEE_MONTHLY_FEE,
    BillingQuote,
    calculate_billing,
    find_active_plan,
    get_employee_monthly_fee,
    get_operation_price,
)
from core.services.pricing.policy import resolve_default_operation_price, resolve_missing_price_policy
from core.services.pricing.service import PricingService

__all__ = [
    "DEFAULT_EMPLOYEE_MONTHLY_FEE",
    "BillingQuote",
    "PricingService",
    "calculate_billing",
    "find_active_plan",
    "get_employee_monthly_fee",
    "get_operation_price",
    "resolve_default_operation_price",
    "resolve_missing_price_policy",
]
