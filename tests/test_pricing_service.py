from __future__ import annotations

from decimal import Decimal

import pytest

from core.domain.enums import MissingPricePolicy, OperationType, Platform, Role
from core.exceptions import (
    BusinessRuleError,
    ConcurrencyError,
    PricingNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from core.services.pricing import PricingService
from infra.db.company import SqlAlchemyCompanyRepository
from infra.db.pricing.repository import SqlAlchemyOperationPricingRepository, SqlAlchemyPricingPlanRepository


def test_plan_lifecycle(services, admin):
    ps = services["pricing_service"]

    plan = ps.create_pricing_plan(" Acme ", "Startup", "150")
    assert plan.company_name == "Acme"
    assert plan.employee_monthly_fee == Decimal("150.00")
    assert ps.get_employee_monthly_fee("Acme") == Decimal("150.00")

    updated = ps.update_pricing_plan(plan.id, expected_version=plan.version, employee_monthly_fee="175.5")
    assert updated.employee_monthly_fee == Decimal("175.50")
    assert ps.get_employee_monthly_fee("Acme") == Decimal("175.50")

    with pytest.raises(ConcurrencyError):
        ps.update_pricing_plan(plan.id, expected_version=plan.version - 1, plan_name="Growth")

    ps.update_pricing_plan(plan.id, is_active=False)
    assert ps.get_employee_monthly_fee("Acme") == Decimal("300.00")

    ps.delete_pricing_plan(plan.id)
    assert ps.list_pricing_plans() == []


def test_one_plan_per_company(services, admin):
    ps = services["pricing_service"]
    ps.create_pricing_plan("Acme", "Startup", "150")

    with pytest.raises(BusinessRuleError) as exc:
        ps.create_pricing_plan("Acme", "Second", "10")
    assert exc.value.code == "PLAN_EXISTS"


def test_retired_plan_does_not_block_a_new_one(services, admin):
    ps = services["pricing_service"]
    old = ps.create_pricing_plan("Acme", "Old", "200")
    ps.update_pricing_plan(old.id, is_active=False)

    new = ps.create_pricing_plan("Acme", "New", "250")

    assert new.is_active
    assert ps.get_employee_monthly_fee("Acme") == Decimal("250.00")
    assert ps.get_company_plan("Acme").id == new.id
    with pytest.raises(BusinessRuleError) as exc:
        ps.update_pricing_plan(old.id, is_active=True)
    assert exc.value.code == "PLAN_EXISTS"
    assert ps.get_employee_monthly_fee("Acme") == Decimal("250.00")


@pytest.mark.parametrize(
    "company, name, fee, code",
    [
        ("", "Startup", "10", "COMPANY_REQUIRED"),
        ("Acme", "  ", "10", "PLAN_NAME_EMPTY"),
        ("Acme", "Startup", "-1", "NEGATIVE_FEE"),
    ],
)
def test_plan_validation(services, admin, company, name, fee, code):
    with pytest.raises(ValidationError) as exc:
        services["pricing_service"].create_pricing_plan(company, name, fee)
    assert exc.value.code == code


def test_manager_reads_only_its_own_company_plan(services, login, admin, manager):
    ps = services["pricing_service"]
    ps.create_pricing_plan("Acme", "Startup", "150")
    ps.create_pricing_plan("Globex", "Enterprise", "90")

    login(manager)
    assert ps.get_company_plan("Acme").plan_name == "Startup"
    with pytest.raises(UnauthorizedError):
        ps.get_company_plan("Globex")
    with pytest.raises(UnauthorizedError):
        ps.create_pricing_plan("Acme", "Mine", "1")


def test_executor_cannot_read_plans(services, login, admin, manager):
    login(manager)
    executor = services["user_service"].create_user("exec1", Role.TASK_EXECUTOR)
    login(executor)

    with pytest.raises(UnauthorizedError):
        services["pricing_service"].get_company_plan("Acme")


def test_operation_pricing_crud(services, admin):
    ps = services["pricing_service"]
    row = ps.create_operation_pricing("Acme", "douyin", "comment", "0.1")

    assert row.platform == Platform.DOUYIN
    assert row.operation_type == OperationType.COMMENT
    assert row.unit_price == Decimal("0.100")
    assert ps.get_operation_price("Acme", Platform.DOUYIN, OperationType.COMMENT) == Decimal("0.100")

    ps.update_operation_pricing(row.id, unit_price="0.125")
    assert ps.get_operation_price("Acme", "douyin", "comment") == Decimal("0.125")
    assert [item.id for item in ps.list_operation_pricing("Acme")] == [row.id]
    assert ps.list_operation_pricing("Globex") == []

    ps.delete_operation_pricing(row.id)
    with pytest.raises(PricingNotFoundError):
        ps.get_operation_price("Acme", "douyin", "comment")


def test_operation_pricing_rejects_unknown_operation(services, admin):
    with pytest.raises(ValidationError) as exc:
        services["pricing_service"].create_operation_pricing("Acme", "weibo", "follow", "0.1")
    assert exc.value.code == "INVALID_OPERATION"


def test_inactive_operation_price_is_not_used(services, admin):
    ps = services["pricing_service"]
    row = ps.create_operation_pricing("Acme", "xiaohongshu", "like", "0.02")
    ps.update_operation_pricing(row.id, is_active=False)

    with pytest.raises(PricingNotFoundError):
        ps.get_operation_price("Acme", "xiaohongshu", "like")


def test_missing_price_policy_comes_from_environment(session, services, admin, monkeypatch):
    monkeypatch.setenv("TF_MISSING_PRICE_POLICY", "default")
    monkeypatch.setenv("TF_DEFAULT_OPERATION_PRICE", "0.04")
    ps = PricingService(
        session,
        SqlAlchemyPricingPlanRepository(session),
        SqlAlchemyOperationPricingRepository(session),
        SqlAlchemyCompanyRepository(session),
    )

    assert ps.get_operation_price("Nobody", "douyin", "follow") == Decimal("0.040")


def test_explicit_zero_policy(session):
    ps = PricingService(
        session,
        SqlAlchemyPricingPlanRepository(session),
        SqlAlchemyOperationPricingRepository(session),
        SqlAlchemyCompanyRepository(session),
        missing_price_policy=MissingPricePolicy.ZERO,
    )

    assert ps.get_operation_price("Nobody", "douyin", "follow") == Decimal("0")
