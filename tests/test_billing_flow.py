from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from core.domain.enums import AdjustmentReason, BillingStatus, BillingType, OperationType, Platform, Role
from core.exceptions import (
    BusinessRuleError,
    InsufficientBalanceError,
    PricingNotFoundError,
    UnauthorizedError,
    ValidationError,
)


def _hire(services, login, pm, username="exec1"):
    login(pm)
    return services["user_service"].create_user(username, Role.TASK_EXECUTOR, display_name=username.title())


def test_creating_an_executor_debits_the_manager_and_records_the_charge(services, login, manager):
    executor = _hire(services, login, manager)
    bs = services["billing_service"]

    summary = bs.get_billing_summary()
    records = bs.list_billing_records()

    assert executor.parent_id == manager.id
    assert executor.company_name == "Acme"
    assert summary.balance == Decimal("700.00")
    assert summary.total_spent == Decimal("300.00")
    assert summary.employee_count == 1
    assert summary.monthly_fee == Decimal("300.00")

    assert len(records) == 1
    charge = records[0]
    assert charge.user_id == manager.id
    assert charge.subject_user_id == executor.id
    assert charge.billing_type == BillingType.EMPLOYEE_COUNT
    assert charge.quantity == 1
    assert charge.total_amount == Decimal("300.00")
    assert charge.status == BillingStatus.PAID
    assert charge.period_end - charge.period_start == timedelta(days=31)


def test_company_plan_fee_replaces_the_default(services, login, admin, manager):
    services["pricing_service"].create_pricing_plan("Acme", "Startup", "120")
    _hire(services, login, manager)

    summary = services["billing_service"].get_billing_summary()

    assert summary.balance == Decimal("880.00")
    assert summary.monthly_fee == Decimal("120.00")


def test_short_balance_refuses_creation_before_any_write(services, login, admin):
    us = services["user_service"]
    pm = us.create_user("pm_short", Role.PROJECT_MANAGER, company_name="Acme", initial_balance="299.99")
    login(pm)

    with pytest.raises(InsufficientBalanceError) as exc:
        us.create_user("exec_short", Role.TASK_EXECUTOR)

    assert exc.value.balance == Decimal("299.99")
    assert exc.value.required == Decimal("300.00")
    assert exc.value.code == "INSUFFICIENT_BALANCE"
    assert "top up" in str(exc.value)
    assert us.list_users() == []
    assert services["billing_service"].list_billing_records() == []

    login(admin)
    assert us.get_user(pm.id).balance == Decimal("299.99")


def test_exact_balance_is_enough(services, login, admin):
    us = services["user_service"]
    pm = us.create_user("pm_exact", Role.PROJECT_MANAGER, company_name="Acme", initial_balance="300")
    login(pm)

    us.create_user("exec_exact", Role.TASK_EXECUTOR)

    assert services["billing_service"].get_billing_summary().balance == Decimal("0.00")


def test_stale_balance_read_is_still_refused_by_the_conditional_debit(services, login, admin, manager, monkeypatch):
    bs = services["billing_service"]
    us = services["user_service"]
    login(manager)
    us.create_user("exec_a", Role.TASK_EXECUTOR)
    us.create_user("exec_b", Role.TASK_EXECUTOR)
    us.create_user("exec_c", Role.TASK_EXECUTOR)

    # simulate a second request that read the balance before it was drained
    monkeypatch.setattr(bs, "ensure_can_afford", lambda admin_user, amount: None)
    with pytest.raises(InsufficientBalanceError):
        us.create_user("exec_d", Role.TASK_EXECUTOR)

    summary = bs.get_billing_summary()
    assert summary.balance == Decimal("100.00")
    assert summary.employee_count == 3
    assert len(bs.list_billing_records()) == 3


def test_follow_count_adjustment_records_reason_and_audit(services, login, admin, manager):
    ps = services["pricing_service"]
    bs = services["billing_service"]
    ps.create_operation_pricing("Acme", Platform.XIAOHONGSHU, OperationType.FOLLOW, "0.050")

    record = bs.adjust_follow_count(manager.id, -20, AdjustmentReason.REFUND, description="duplicate follows")

    assert record.billing_type == BillingType.FOLLOW_COUNT
    assert record.quantity == -20
    assert record.unit_price == Decimal("0.050")
    assert record.total_amount == Decimal("-1.000")
    assert record.reason == AdjustmentReason.REFUND
    assert record.status == BillingStatus.PENDING

    entries = services["audit_service"].list_recent(entity_type="billing_record")
    adjust = [entry for entry in entries if entry.action == "billing.adjust_follow_count"]
    assert len(adjust) == 1
    assert adjust[0].details["reason"] == "refund"
    assert adjust[0].details["delta"] == -20
    assert adjust[0].actor_username == "admin"


@pytest.mark.parametrize("delta", [0, 1.5, True])
def test_adjustment_delta_must_be_a_non_zero_integer(services, admin, manager, delta):
    with pytest.raises(ValidationError):
        services["billing_service"].adjust_follow_count(manager.id, delta, "bonus")


def test_adjustment_reason_must_be_known(services, admin, manager):
    with pytest.raises(ValidationError):
        services["billing_service"].adjust_follow_count(manager.id, 5, "goodwill")


def test_adjustment_without_price_follows_missing_price_policy(services, admin, manager):
    with pytest.raises(PricingNotFoundError):
        services["billing_service"].adjust_follow_count(manager.id, 5, "bonus")


def test_only_platform_admin_adjusts(services, login, manager):
    login(manager)
    with pytest.raises(UnauthorizedError):
        services["billing_service"].adjust_follow_count(manager.id, 5, "bonus")


def test_executor_records_its_own_operation_charges(services, login, admin, manager):
    services["pricing_service"].create_operation_pricing("Acme", "douyin", "like", "0.012")
    executor = _hire(services, login, manager)
    login(executor)

    record = services["billing_service"].record_operation_charge(executor.id, "Acme", "douyin", "like", 250)

    assert record.total_amount == Decimal("3.000")
    assert record.unit_price == Decimal("0.012")
    assert record.description == "douyin like x250"


def test_executor_cannot_charge_someone_else(services, login, admin, manager):
    services["pricing_service"].create_operation_pricing("Acme", "douyin", "like", "0.012")
    executor = _hire(services, login, manager)
    other = services["user_service"].create_user("exec2", Role.TASK_EXECUTOR)
    login(executor)

    with pytest.raises(UnauthorizedError):
        services["billing_service"].record_operation_charge(other.id, "Acme", "douyin", "like", 1)


def test_billing_record_listing_is_scoped(services, login, admin, manager):
    executor = _hire(services, login, manager)
    bs = services["billing_service"]

    with pytest.raises(UnauthorizedError):
        bs.list_billing_records(admin.id)

    login(executor)
    with pytest.raises(UnauthorizedError):
        bs.list_billing_records()

    login(admin)
    assert len(bs.list_billing_records()) == 1
    assert len(bs.list_billing_records(manager.id)) == 1
    assert bs.list_billing_records(admin.id) == []
    assert bs.list_billing_records(page=2, limit=1) == []
    with pytest.raises(ValidationError):
        bs.list_billing_records(page=0)


def test_status_transitions_only_leave_pending(services, admin, manager):
    ps = services["pricing_service"]
    bs = services["billing_service"]
    ps.create_operation_pricing("Acme", "xiaohongshu", "follow", "0.050")
    record = bs.adjust_follow_count(manager.id, 10, "manual_adjustment")

    paid = bs.mark_paid(record.id)

    assert paid.status == BillingStatus.PAID
    assert paid.paid_at is not None
    with pytest.raises(BusinessRuleError) as exc:
        bs.mark_overdue(record.id)
    assert exc.value.code == "INVALID_BILLING_TRANSITION"

    other = bs.adjust_follow_count(manager.id, 1, "other")
    assert bs.mark_overdue(other.id).status == BillingStatus.OVERDUE
    with pytest.raises(BusinessRuleError):
        bs.mark_paid(other.id)


def test_recurring_billing_covers_each_started_period_once(services, login, admin, manager):
    executor = _hire(services, login, manager)
    login(admin)
    bs = services["billing_service"]

    as_of = executor.created_at + timedelta(days=65)
    created = bs.run_recurring_billing(as_of)

    assert len(created) == 2
    assert {record.status for record in created} == {BillingStatus.PENDING}
    assert [record.period_start for record in created] == [
        executor.created_at + timedelta(days=31),
        executor.created_at + timedelta(days=62),
    ]
    assert all(record.user_id == manager.id for record in created)
    assert bs.run_recurring_billing(as_of) == []


def test_recurring_billing_treats_naive_cutoff_as_utc(services, login, admin, manager):
    executor = _hire(services, login, manager)
    login(admin)

    naive = (executor.created_at + timedelta(days=40)).replace(tzinfo=None)
    created = services["billing_service"].run_recurring_billing(naive)

    assert [record.period_start for record in created] == [executor.created_at + timedelta(days=31)]


def test_recurring_billing_skips_inactive_executors(services, login, admin, manager):
    executor = _hire(services, login, manager)
    services["user_service"].set_active(executor.id, False)
    login(admin)

    assert services["billing_service"].run_recurring_billing(executor.created_at + timedelta(days=40)) == []


def test_manager_can_top_up_only_through_platform_admin(services, login, admin, manager):
    us = services["user_service"]

    topped = us.top_up_balance(manager.id, "50.5")
    assert topped.balance == Decimal("1050.50")

    login(manager)
    with pytest.raises(UnauthorizedError):
        us.top_up_balance(manager.id, "10")

    login(admin)
    with pytest.raises(ValidationError):
        us.top_up_balance(manager.id, "0")
