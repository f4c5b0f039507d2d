from __future__ import annotations

import pytest

from core.domain.enums import Role
from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, ConcurrencyError, NotFoundError, UnauthorizedError, ValidationError


def _by_name(services, name):
    return next(c for c in services["company_service"].list_companies() if c.name == name)


def test_company_lifecycle(services, admin):
    cs = services["company_service"]
    seen = []
    domain_events.companies_changed.connect(seen.append)
    try:
        company = cs.create_company("  Initech ", contact_email="it@initech.test", max_employees=3)
    finally:
        domain_events.companies_changed.disconnect(seen.append)

    assert company.name == "Initech"
    assert company.is_active
    assert company.max_employees == 3
    assert seen == [company.id]
    assert [c.name for c in cs.list_companies()] == ["Acme", "Globex", "Initech"]

    updated = cs.update_company(company.id, expected_version=company.version, name="Initrode", contact_phone=" 555 ")
    assert updated.name == "Initrode"
    assert updated.contact_phone == "555"
    with pytest.raises(ConcurrencyError):
        cs.update_company(company.id, expected_version=company.version - 1, max_employees=5)

    assert cs.toggle_company_status(company.id).is_active is False
    assert [c.name for c in cs.list_companies(active_only=True)] == ["Acme", "Globex"]
    assert cs.toggle_company_status(company.id).is_active is True

    cs.delete_company(company.id)
    with pytest.raises(NotFoundError):
        cs.get_company(company.id)


@pytest.mark.parametrize(
    "kwargs, code",
    [
        ({"name": "   "}, "COMPANY_NAME_REQUIRED"),
        ({"name": "x" * 101}, "COMPANY_NAME_TOO_LONG"),
        ({"name": "Hooli", "contact_email": "not-an-email"}, "INVALID_EMAIL"),
        ({"name": "Hooli", "max_employees": 0}, "INVALID_MAX_EMPLOYEES"),
        ({"name": "Hooli", "max_employees": True}, "INVALID_MAX_EMPLOYEES"),
    ],
)
def test_company_validation(services, admin, kwargs, code):
    name = kwargs.pop("name")
    with pytest.raises(ValidationError) as exc:
        services["company_service"].create_company(name, **kwargs)
    assert exc.value.code == code


def test_company_names_are_unique(services, admin):
    with pytest.raises(BusinessRuleError) as exc:
        services["company_service"].create_company("Acme")
    assert exc.value.code == "COMPANY_EXISTS"

    globex = _by_name(services, "Globex")
    with pytest.raises(BusinessRuleError):
        services["company_service"].update_company(globex.id, name="Acme")


def test_company_with_members_cannot_be_deleted_or_renamed(services, admin, manager):
    cs = services["company_service"]
    acme = _by_name(services, "Acme")

    with pytest.raises(BusinessRuleError) as exc:
        cs.delete_company(acme.id)
    assert exc.value.code == "COMPANY_HAS_MEMBERS"
    with pytest.raises(BusinessRuleError) as exc:
        cs.update_company(acme.id, name="Acme Corp")
    assert exc.value.code == "COMPANY_IN_USE"

    services["user_service"].delete_user(manager.id)
    assert cs.employee_count(acme.id) == 0
    cs.delete_company(acme.id)


def test_pricing_blocks_rename(services, admin):
    globex = _by_name(services, "Globex")
    services["pricing_service"].create_operation_pricing("Globex", "douyin", "like", "0.01")

    with pytest.raises(BusinessRuleError) as exc:
        services["company_service"].update_company(globex.id, name="Globex Intl")
    assert exc.value.code == "COMPANY_IN_USE"


def test_manager_reads_only_its_own_company(services, login, admin, manager):
    cs = services["company_service"]
    acme = _by_name(services, "Acme")
    globex = _by_name(services, "Globex")

    login(manager)
    assert cs.get_company(acme.id).name == "Acme"
    assert cs.employee_count(acme.id) == 1
    with pytest.raises(UnauthorizedError):
        cs.get_company(globex.id)
    with pytest.raises(UnauthorizedError):
        cs.list_companies()
    with pytest.raises(UnauthorizedError):
        cs.create_company("Mine")
    with pytest.raises(UnauthorizedError):
        cs.toggle_company_status(acme.id)

    executor = services["user_service"].create_user("exec1", Role.TASK_EXECUTOR)
    login(executor)
    with pytest.raises(UnauthorizedError):
        cs.get_company(acme.id)


def test_managers_need_a_registered_active_company(services, admin):
    us = services["user_service"]

    with pytest.raises(NotFoundError) as exc:
        us.create_user("pm_x", Role.PROJECT_MANAGER, company_name="Umbrella")
    assert exc.value.code == "COMPANY_NOT_FOUND"

    globex = _by_name(services, "Globex")
    services["company_service"].toggle_company_status(globex.id)
    with pytest.raises(BusinessRuleError) as exc:
        us.create_user("pm_g", Role.PROJECT_MANAGER, company_name="Globex")
    assert exc.value.code == "COMPANY_INACTIVE"
    assert services["user_service"].list_users(company_name="Globex") == []


def test_moving_a_user_requires_a_registered_company(services, admin, manager):
    us = services["user_service"]

    with pytest.raises(NotFoundError):
        us.update_user(manager.id, company_name="Umbrella")
    assert us.update_user(manager.id, company_name=" Globex ").company_name == "Globex"


def test_pricing_needs_a_registered_company(services, admin):
    ps = services["pricing_service"]

    with pytest.raises(NotFoundError) as exc:
        ps.create_pricing_plan("Umbrella", "Startup", "100")
    assert exc.value.code == "COMPANY_NOT_FOUND"
    with pytest.raises(NotFoundError):
        ps.create_operation_pricing("Umbrella", "douyin", "follow", "0.01")


def test_executor_hires_stop_at_the_company_limit(services, login, admin, manager):
    acme = _by_name(services, "Acme")
    services["company_service"].update_company(acme.id, max_employees=1)
    us = services["user_service"]

    login(manager)
    us.create_user("exec1", Role.TASK_EXECUTOR)
    with pytest.raises(BusinessRuleError) as exc:
        us.create_user("exec2", Role.TASK_EXECUTOR)
    assert exc.value.code == "COMPANY_FULL"
    assert [member.username for member in us.list_team_members()] == ["exec1"]
    assert services["billing_service"].get_billing_summary(manager.id).balance == 700
