from __future__ import annotations

from typing import Any

from core.domain.enums import Capability
from core.exceptions import UnauthenticatedError, UnauthorizedError
from core.services.auth.permissions import can_edit_task, has_capability
from core.services.auth.session import UserSessionContext, UserSessionPrincipal


def require_principal(
    user_session: UserSessionContext | None,
    *,
    operation_label: str,
) -> UserSessionPrincipal:
    principal = user_session.principal if user_session is not None else None
    if principal is None:
        raise UnauthenticatedError(f"Sign-in required to {operation_label}.")
    return principal


def require_capability(
    user_session: UserSessionContext | None,
    capability: Capability,
    *,
    operation_label: str,
    resource_owner_id: Any = None,
) -> UserSessionPrincipal:
    principal = require_principal(user_session, operation_label=operation_label)
    if has_capability(principal, capability, resource_owner_id=resource_owner_id):
        return principal
    raise UnauthorizedError(
        f"Permission denied for {operation_label}. Missing '{capability.value}'."
    )


def require_task_edit(
    user_session: UserSessionContext | None,
    task: Any,
    *,
    operation_label: str = "edit task",
) -> UserSessionPrincipal:
    principal = require_principal(user_session, operation_label=operation_label)
    if can_edit_task(principal, task):
        return principal
    raise UnauthorizedError(
        f"Permission denied for {operation_label}. Task is not assigned to you."
    )


__all__ = ["require_principal", "require_capability", "require_task_edit"]
