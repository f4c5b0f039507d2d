from __future__ import annotations

from core.domain.enums import Role
from core.exceptions import ValidationError

_CANONICAL: dict[str, Role] = {}
for _role in Role:
    _CANONICAL[_role.value] = _role
    _CANONICAL[_role.name.lower()] = _role
    _CANONICAL[_role.name.replace("_", "").lower()] = _role

# Older servers still emit these names on the wire.
LEGACY_ROLE_ALIASES: dict[str, Role] = {
    "system_admin": Role.PLATFORM_ADMIN,
    "systemadmin": Role.PLATFORM_ADMIN,
    "user_admin": Role.PROJECT_MANAGER,
    "company_admin": Role.PROJECT_MANAGER,
    "companyadmin": Role.PROJECT_MANAGER,
    "employee": Role.TASK_EXECUTOR,
}

_DISPLAY_NAMES = {
    Role.PLATFORM_ADMIN: "Platform Admin",
    Role.PROJECT_MANAGER: "Project Manager",
    Role.TASK_EXECUTOR: "Task Executor",
}


def try_parse_role(value: object, *, legacy_aliases: bool = False) -> Role | None:
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    token = value.strip().lower()
    if not token:
        return None
    role = _CANONICAL.get(token)
    if role is None and legacy_aliases:
        role = LEGACY_ROLE_ALIASES.get(token)
    return role


def parse_role(value: object, *, legacy_aliases: bool = False) -> Role:
    role = try_parse_role(value, legacy_aliases=legacy_aliases)
    if role is None:
        raise ValidationError(f"Unknown role: {value!r}", code="UNKNOWN_ROLE")
    return role


def role_display_name(role: Role) -> str:
    return _DISPLAY_NAMES[role]


__all__ = [
    "LEGACY_ROLE_ALIASES",
    "parse_role",
    "try_parse_role",
    "role_display_name",
]
