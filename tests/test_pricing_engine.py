from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from core.domain.billing import billing_period_bounds, next_billing_date
from core.domain.enums import BillingType, MissingPricePolicy, OperationType, Platform
from core.domain.money import to_display_amount, to_fee, to_unit_price
from core.exceptions import PricingNotFoundError, ValidationError
from core.models import CompanyOperationPricing, CompanyPricingPlan
from core.services.pricing import (
    DEFAULT_EMPLOYEE_MONTHLY_FEE,
    calculate_billing,
    get_employee_monthly_fee,
    get_operation_price,
)


def _price(company="Acme", platform=Platform.XIAOHONGSHU, op=OperationType.FOLLOW, price="0.050", active=True):
    return CompanyOperationPricing.create(company, platform, op, Decimal(price), is_active=active)


def test_operation_price_uses_first_active_match():
    rows = [
        _price(price="0.090", active=False),
        _price(op=OperationType.LIKE, price="0.010"),
        _price(price="0.050"),
        _price(price="0.070"),
    ]

    assert get_operation_price(rows, "Acme", "xiaohongshu", "follow") == Decimal("0.050")
    assert get_operation_price(rows, " Acme ", Platform.XIAOHONGSHU, OperationType.LIKE) == Decimal("0.010")


def test_missing_operation_price_raises_by_default():
    rows = [_price(platform=Platform.DOUYIN)]

    with pytest.raises(PricingNotFoundError) as exc:
        get_operation_price(rows, "Acme", Platform.XIAOHONGSHU, OperationType.FOLLOW)
    assert exc.value.code == "PRICING_NOT_FOUND"


def test_missing_operation_price_policies():
    assert get_operation_price(
        [], "Acme", "douyin", "comment", policy=MissingPricePolicy.DEFAULT, default_price=Decimal("0.05")
    ) == Decimal("0.050")
    assert get_operation_price([], "Acme", "douyin", "comment", policy=MissingPricePolicy.ZERO) == Decimal("0.000")
    with pytest.raises(ValidationError):
        get_operation_price([], "Acme", "douyin", "comment", policy=MissingPricePolicy.DEFAULT)


def test_inactive_plan_falls_back_to_default_fee():
    plans = [
        CompanyPricingPlan.create("Acme", "Gold", Decimal("450.00"), is_active=False),
        CompanyPricingPlan.create("Other", "Basic", Decimal("120.00")),
    ]

    assert get_employee_monthly_fee(plans, "Acme") == DEFAULT_EMPLOYEE_MONTHLY_FEE == Decimal("300.00")
    assert get_employee_monthly_fee(plans, "Other") == Decimal("120.00")
    assert get_employee_monthly_fee(plans, None) == Decimal("300.00")


def test_calculate_billing_is_exact():
    quote = calculate_billing(BillingType.FOLLOW_COUNT, 3, Decimal("0.001"))

    assert quote.total_amount == Decimal("0.003")
    assert quote.display_total() == Decimal("0.00")
    assert quote.unit_price == Decimal("0.001")


def test_small_charges_do_not_drift():
    unit = to_unit_price(0.05)
    total = Decimal("0")
    for _ in range(1000):
        total += calculate_billing("follow_count", 1, unit).total_amount

    assert total == Decimal("50.000")
    assert calculate_billing("follow_count", 1000, unit).total_amount == total


def test_negative_quantity_is_allowed_for_corrections():
    assert calculate_billing("follow_count", -20, "0.050").total_amount == Decimal("-1.000")


@pytest.mark.parametrize("quantity", [1.5, "3", True])
def test_quantity_must_be_integer(quantity):
    with pytest.raises(ValidationError):
        calculate_billing("follow_count", quantity, "0.050")


def test_negative_price_is_rejected():
    with pytest.raises(ValidationError):
        calculate_billing("employee_count", 1, "-1")


@pytest.mark.parametrize(
    "value, fee, unit",
    [
        ("300", Decimal("300.00"), Decimal("300.000")),
        (0.1, Decimal("0.10"), Decimal("0.100")),
        (Decimal("0.0045"), Decimal("0.00"), Decimal("0.005")),
        (2, Decimal("2.00"), Decimal("2.000")),
        ("12.345", Decimal("12.35"), Decimal("12.345")),
    ],
)
def test_money_quantization(value, fee, unit):
    assert to_fee(value) == fee
    assert to_unit_price(value) == unit


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", None, True, [1]])
def test_invalid_money_values(value):
    with pytest.raises(ValidationError):
        to_fee(value)


def test_display_amount_rounds_half_up():
    assert to_display_amount(Decimal("2.345")) == Decimal("2.35")
    assert to_display_amount(Decimal("2.344")) == Decimal("2.34")


def test_next_billing_date_is_a_fixed_31_day_interval():
    assert next_billing_date(date(2024, 1, 31)) == date(2024, 3, 2)
    assert next_billing_date(date(2023, 1, 31)) == date(2023, 3, 3)
    assert next_billing_date(date(2024, 2, 1)) == date(2024, 3, 3)


def test_billing_period_bounds_chain_without_gaps():
    created = datetime(2026, 1, 31, 9, 30, tzinfo=timezone.utc)

    first = billing_period_bounds(created, 0)
    second = billing_period_bounds(created, 1)

    assert first == (created, next_billing_date(created))
    assert second[0] == first[1]
    assert second[1] == datetime(2026, 4, 3, 9, 30, tzinfo=timezone.utc)
