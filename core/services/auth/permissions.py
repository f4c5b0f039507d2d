"""Role and capability predicates.

Every predicate is total: an absent user, an unparseable role or a missing
ownership context yields ``False``, never an exception.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from core.domain.enums import Capability, Role
from core.domain.identifiers import same_user
from core.services.auth.policy import capabilities_for, is_ownership_scoped
from core.services.auth.roles import try_parse_role

_ADMIN_ROLES = frozenset({Role.PLATFORM_ADMIN, Role.PROJECT_MANAGER})


def _field(user: Any, *names: str) -> Any:
    for name in names:
        if isinstance(user, Mapping):
            if name in user:
                return user[name]
        elif hasattr(user, name):
            return getattr(user, name)
    return None


def resolve_role(user: Any) -> Role | None:
    if user is None:
        return None
    if isinstance(user, Role):
        return user
    return try_parse_role(_field(user, "role"))


def resolve_user_id(user: Any) -> Any:
    if user is None:
        return None
    return _field(user, "user_id", "id")


def _role_set(roles: Any) -> frozenset[Role]:
    # a bare string is one role, not an iterable of characters
    if isinstance(roles, str):
        roles = (roles,)
    elif not isinstance(roles, Iterable):
        return frozenset()
    parsed = (try_parse_role(item) for item in roles)
    return frozenset(role for role in parsed if role is not None)


def has_role(user: Any, roles: Role | str | Iterable[Role | str]) -> bool:
    role = resolve_role(user)
    if role is None:
        return False
    return role in _role_set(roles)


def is_platform_admin(user: Any) -> bool:
    return has_role(user, Role.PLATFORM_ADMIN)


def is_project_manager(user: Any) -> bool:
    return has_role(user, Role.PROJECT_MANAGER)


def is_task_executor(user: Any) -> bool:
    return has_role(user, Role.TASK_EXECUTOR)


def has_admin_role(user: Any) -> bool:
    return has_role(user, _ADMIN_ROLES)


def has_capability(user: Any, capability: Capability, *, resource_owner_id: Any = None) -> bool:
    role = resolve_role(user)
    if role is None:
        return False
    if capability not in capabilities_for(role):
        return False
    if is_ownership_scoped(role, capability):
        return same_user(resource_owner_id, resolve_user_id(user))
    return True


def can_manage_companies(user: Any) -> bool:
    return has_capability(user, Capability.MANAGE_COMPANIES)


def can_manage_users(user: Any) -> bool:
    return has_capability(user, Capability.MANAGE_USERS)


def can_access_tasks(user: Any) -> bool:
    return has_capability(user, Capability.ACCESS_TASKS)


def can_access_projects(user: Any) -> bool:
    return has_capability(user, Capability.ACCESS_PROJECTS)


def can_view_analytics(user: Any) -> bool:
    return has_capability(user, Capability.VIEW_ANALYTICS)


def can_create_task(user: Any) -> bool:
    return has_capability(user, Capability.CREATE_TASK)


def can_edit_task(user: Any, task: Any) -> bool:
    """``task`` is a task object (its ``assignee_id`` is used) or a bare assignee id."""
    if isinstance(task, (str, int)) or task is None:
        assignee_id = task
    else:
        assignee_id = _field(task, "assignee_id")
    return has_capability(user, Capability.EDIT_TASK, resource_owner_id=assignee_id)


def can_delete_task(user: Any) -> bool:
    return has_capability(user, Capability.DELETE_TASK)


def can_assign_task(user: Any) -> bool:
    return has_capability(user, Capability.ASSIGN_TASK)


def can_update_task_status(user: Any) -> bool:
    return has_capability(user, Capability.UPDATE_TASK_STATUS)


def can_create_project(user: Any) -> bool:
    return has_capability(user, Capability.CREATE_PROJECT)


def can_edit_project(user: Any) -> bool:
    return has_capability(user, Capability.EDIT_PROJECT)


def can_delete_project(user: Any) -> bool:
    return has_capability(user, Capability.DELETE_PROJECT)


def can_create_user(user: Any) -> bool:
    return has_capability(user, Capability.CREATE_USER)


def can_edit_user(user: Any) -> bool:
    return has_capability(user, Capability.EDIT_USER)


def can_delete_user(user: Any) -> bool:
    return has_capability(user, Capability.DELETE_USER)


def can_view_team_members(user: Any) -> bool:
    return has_capability(user, Capability.VIEW_TEAM_MEMBERS)


def can_export_data(user: Any) -> bool:
    return has_capability(user, Capability.EXPORT_DATA)


__all__ = [
    "resolve_role",
    "resolve_user_id",
    "has_role",
    "is_platform_admin",
    "is_project_manager",
    "is_task_executor",
    "has_admin_role",
    "has_capability",
    "can_manage_companies",
    "can_manage_users",
    "can_access_tasks",
    "can_access_projects",
    "can_view_analytics",
    "can_create_task",
    "can_edit_task",
    "can_delete_task",
    "can_assign_task",
    "can_update_task_status",
    "can_create_project",
    "can_edit_project",
    "can_delete_project",
    "can_create_user",
    "can_edit_user",
    "can_delete_user",
    "can_view_team_members",
    "can_export_data",
]
