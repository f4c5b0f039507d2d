from __future__ import annotations

import pytest

from core.domain.enums import Role
from core.services.auth import permissions as perms
from core.services.auth.policy import desktop_features

PA = Role.PLATFORM_ADMIN
PM = Role.PROJECT_MANAGER
TE = Role.TASK_EXECUTOR

# predicate -> roles that are granted
MATRIX = {
    perms.can_manage_companies: {PA},
    perms.can_manage_users: {PA, PM},
    perms.can_access_tasks: {PM, TE},
    perms.can_access_projects: {PM, TE},
    perms.can_view_analytics: {PA, PM},
    perms.can_create_task: {PM, TE},
    perms.can_delete_task: {PM},
    perms.can_assign_task: {PM},
    perms.can_update_task_status: {PM, TE},
    perms.can_create_project: {PM},
    perms.can_edit_project: {PM},
    perms.can_delete_project: {PM},
    perms.can_create_user: {PA, PM},
    perms.can_edit_user: {PA, PM},
    perms.can_delete_user: {PA, PM},
    perms.can_view_team_members: {PM, TE},
    perms.can_export_data: {PA, PM},
}


def _user(role, user_id="u-1"):
    return {"id": user_id, "role": role}


@pytest.mark.parametrize("predicate, granted", list(MATRIX.items()))
@pytest.mark.parametrize("role", list(Role))
def test_capability_matrix(predicate, granted, role):
    assert predicate(_user(role)) is (role in granted)


@pytest.mark.parametrize("predicate", list(MATRIX))
def test_absent_user_is_always_denied(predicate):
    assert predicate(None) is False


@pytest.mark.parametrize("predicate", list(MATRIX))
@pytest.mark.parametrize("bad", [{}, {"role": None}, {"role": "superuser"}, {"role": 7}, object()])
def test_unparseable_users_are_denied_without_raising(predicate, bad):
    assert predicate(bad) is False


@pytest.mark.parametrize(
    "role, checks",
    [
        (PA, (True, False, False, True)),
        (PM, (False, True, False, True)),
        (TE, (False, False, True, False)),
    ],
)
def test_role_wrappers(role, checks):
    user = _user(role)
    assert (
        perms.is_platform_admin(user),
        perms.is_project_manager(user),
        perms.is_task_executor(user),
        perms.has_admin_role(user),
    ) == checks


def test_has_role_accepts_single_role_or_collection():
    user = _user(PM)
    assert perms.has_role(user, PM)
    assert perms.has_role(user, [PA, PM])
    assert not perms.has_role(user, {TE})
    assert not perms.has_role(None, [PA, PM, TE])


def test_has_role_parses_raw_role_strings():
    user = {"id": 1, "role": "project_manager"}
    assert perms.has_role(user, "project_manager")
    assert perms.has_role(user, " ProjectManager ")
    assert perms.has_role(user, ["platform_admin", "project_manager"])
    assert not perms.has_role(user, "task_executor")
    assert not perms.has_role(user, "p")
    assert not perms.has_role(user, None)


def test_whitespace_padded_role_strings_still_match():
    assert perms.is_project_manager({"id": 1, "role": " project_manager\n"})


def test_project_manager_edits_any_task():
    pm = _user(PM, "10")
    assert perms.can_edit_task(pm, {"assignee_id": "99"})
    assert perms.can_edit_task(pm, None)


@pytest.mark.parametrize(
    "user_id, assignee, allowed",
    [
        ("42", "42", True),
        (42, "42", True),
        ("42", 42, True),
        (" 42 ", "42", True),
        ("42", "43", False),
        ("42", None, False),
        ("42", "", False),
    ],
)
def test_task_executor_edits_only_own_tasks(user_id, assignee, allowed):
    executor = _user(TE, user_id)
    assert perms.can_edit_task(executor, {"assignee_id": assignee}) is allowed
    assert perms.can_edit_task(executor, assignee) is allowed


def test_task_executor_without_id_cannot_edit_unassigned_tasks():
    assert perms.can_edit_task({"role": TE}, {"assignee_id": None}) is False


def test_platform_admin_cannot_edit_tasks():
    assert perms.can_edit_task(_user(PA), {"assignee_id": "u-1"}) is False


def test_predicates_accept_attribute_objects():
    class _Principal:
        user_id = "5"
        role = TE

    assert perms.can_edit_task(_Principal(), {"assignee_id": "5"})
    assert perms.can_access_tasks(_Principal())


def test_desktop_features_follow_capabilities():
    assert desktop_features(TE) == ["view_tasks", "update_task_status", "view_profile", "work_logs", "create_task"]
    assert "manage_companies" in desktop_features(PA)
    assert "view_tasks" not in desktop_features(PA)
    assert {"assign_task", "manage_projects", "manage_users"} <= set(desktop_features(PM))
