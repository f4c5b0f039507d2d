from __future__ import annotations

from decimal import Decimal

import pytest

from core.domain.enums import Role
from core.exceptions import BusinessRuleError, UnauthorizedError, ValidationError


def test_bootstrap_admin_is_idempotent(services, monkeypatch):
    monkeypatch.setenv("TF_ADMIN_USERNAME", "Root")
    us = services["user_service"]

    first = us.bootstrap_admin()
    second = us.bootstrap_admin()

    assert first.username == "root"
    assert first.role == Role.PLATFORM_ADMIN
    assert second.id == first.id


def test_platform_admin_creates_managers_with_company(services, admin):
    us = services["user_service"]

    pm = us.create_user(" Lead ", "project_manager", company_name="Acme", email="lead@acme.test")

    assert pm.username == "lead"
    assert pm.role == Role.PROJECT_MANAGER
    assert pm.balance == Decimal("0.00")
    assert pm.parent_id is None
    with pytest.raises(ValidationError) as exc:
        us.create_user("nocompany", Role.PROJECT_MANAGER)
    assert exc.value.code == "COMPANY_REQUIRED"


def test_platform_admin_cannot_create_executors_directly(services, admin):
    with pytest.raises(UnauthorizedError):
        services["user_service"].create_user("exec1", Role.TASK_EXECUTOR)


def test_manager_only_creates_executors(services, login, manager):
    login(manager)
    with pytest.raises(UnauthorizedError):
        services["user_service"].create_user("pm_b", Role.PROJECT_MANAGER, company_name="Acme")


def test_executor_inherits_company_and_parent(services, login, manager):
    login(manager)
    executor = services["user_service"].create_user("exec1", Role.TASK_EXECUTOR, company_name="Ignored")

    assert executor.company_name == "Acme"
    assert executor.parent_id == manager.id


@pytest.mark.parametrize(
    "kwargs, code",
    [
        ({"username": "pm1"}, "USERNAME_EXISTS"),
        ({"username": "  "}, "USERNAME_REQUIRED"),
        ({"username": "mail", "email": "not-an-email"}, "INVALID_EMAIL"),
        ({"username": "neg", "initial_balance": "-5"}, "NEGATIVE_BALANCE"),
    ],
)
def test_create_user_validation(services, manager, kwargs, code):
    params = {"company_name": "Acme", **kwargs}
    username = params.pop("username")
    with pytest.raises(ValidationError) as exc:
        services["user_service"].create_user(username, Role.PROJECT_MANAGER, **params)
    assert exc.value.code == code


def test_unknown_role_is_rejected(services, admin):
    with pytest.raises(ValidationError):
        services["user_service"].create_user("who", "superuser", company_name="Acme")


def test_self_protection(services, admin):
    us = services["user_service"]

    with pytest.raises(BusinessRuleError) as exc:
        us.change_role(admin.id, Role.PROJECT_MANAGER)
    assert exc.value.code == "SELF_ROLE_CHANGE"
    with pytest.raises(BusinessRuleError) as exc:
        us.set_active(admin.id, False)
    assert exc.value.code == "SELF_DEACTIVATE"
    with pytest.raises(BusinessRuleError) as exc:
        us.delete_user(admin.id)
    assert exc.value.code == "SELF_DELETE"


def test_manager_manages_only_own_team(services, login, admin, manager):
    us = services["user_service"]
    other_pm = us.create_user("pm2", Role.PROJECT_MANAGER, company_name="Globex", initial_balance="300")
    login(other_pm)
    outsider = us.create_user("exec_other", Role.TASK_EXECUTOR)

    login(manager)
    own = us.create_user("exec_own", Role.TASK_EXECUTOR)

    assert [user.id for user in us.list_users()] == [own.id]
    assert us.update_user(own.id, display_name="Own").display_name == "Own"
    with pytest.raises(UnauthorizedError):
        us.update_user(outsider.id, display_name="Nope")
    with pytest.raises(UnauthorizedError):
        us.delete_user(outsider.id)
    with pytest.raises(UnauthorizedError):
        us.update_user(own.id, company_name="Globex")
    with pytest.raises(UnauthorizedError):
        us.change_role(own.id, Role.PROJECT_MANAGER)


def test_team_members_view(services, login, manager):
    us = services["user_service"]
    login(manager)
    first = us.create_user("exec1", Role.TASK_EXECUTOR)
    second = us.create_user("exec2", Role.TASK_EXECUTOR)

    assert {user.id for user in us.list_team_members()} == {first.id, second.id}
    login(first)
    assert {user.id for user in us.list_team_members()} == {first.id, second.id}


def test_admin_lists_by_company(services, admin, manager):
    us = services["user_service"]
    us.create_user("pm2", Role.PROJECT_MANAGER, company_name="Globex")

    assert [user.username for user in us.list_users("Acme")] == ["pm1"]
    assert {user.username for user in us.list_users()} == {"admin", "pm1", "pm2"}


def test_change_role_and_deactivate(services, admin, manager):
    us = services["user_service"]

    demoted = us.set_active(manager.id, False)
    assert demoted.is_active is False
    promoted = us.change_role(manager.id, "platform_admin")
    assert promoted.role == Role.PLATFORM_ADMIN
    us.delete_user(manager.id)
    assert [user.username for user in us.list_users()] == ["admin"]
