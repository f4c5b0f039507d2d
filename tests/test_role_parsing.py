from __future__ import annotations

import pytest

from core.domain.enums import Role
from core.exceptions import ValidationError
from core.services.auth import build_principal, parse_role, try_parse_role
from core.services.auth.roles import role_display_name


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("platform_admin", Role.PLATFORM_ADMIN),
        ("PlatformAdmin", Role.PLATFORM_ADMIN),
        ("  project_manager ", Role.PROJECT_MANAGER),
        ("ProjectManager", Role.PROJECT_MANAGER),
        ("TASK_EXECUTOR", Role.TASK_EXECUTOR),
        ("taskexecutor", Role.TASK_EXECUTOR),
        (Role.TASK_EXECUTOR, Role.TASK_EXECUTOR),
    ],
)
def test_canonical_role_names_parse(raw, expected):
    assert try_parse_role(raw) == expected
    assert parse_role(raw) == expected


@pytest.mark.parametrize("raw", ["system_admin", "user_admin", "employee", "CompanyAdmin", "SystemAdmin"])
def test_legacy_names_need_explicit_opt_in(raw):
    assert try_parse_role(raw) is None
    assert try_parse_role(raw, legacy_aliases=True) is not None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("system_admin", Role.PLATFORM_ADMIN),
        ("user_admin", Role.PROJECT_MANAGER),
        ("company_admin", Role.PROJECT_MANAGER),
        ("employee", Role.TASK_EXECUTOR),
    ],
)
def test_legacy_aliases_map_onto_current_roles(raw, expected):
    assert parse_role(raw, legacy_aliases=True) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "root", 3, object()])
def test_unknown_values_do_not_parse(raw):
    assert try_parse_role(raw) is None
    with pytest.raises(ValidationError) as exc:
        parse_role(raw)
    assert exc.value.code == "UNKNOWN_ROLE"


def test_build_principal_parses_role_once_and_derives_capabilities():
    principal = build_principal(
        {"id": 42, "username": "exec", "role": " TaskExecutor ", "company": "Acme", "full_name": "E X"}
    )

    assert principal.user_id == "42"
    assert principal.role == Role.TASK_EXECUTOR
    assert principal.company_name == "Acme"
    assert principal.display_name == "E X"
    assert principal.capabilities


def test_build_principal_rejects_legacy_role_without_opt_in():
    payload = {"id": "7", "username": "old", "role": "employee"}

    with pytest.raises(ValidationError):
        build_principal(payload)
    assert build_principal(payload, legacy_aliases=True).role == Role.TASK_EXECUTOR


def test_build_principal_requires_an_id():
    with pytest.raises(ValidationError) as exc:
        build_principal({"username": "ghost", "role": "platform_admin"})
    assert exc.value.code == "USER_ID_REQUIRED"


def test_every_role_has_a_display_name():
    assert [role_display_name(role) for role in Role] == ["Platform Admin", "Project Manager", "Task Executor"]
