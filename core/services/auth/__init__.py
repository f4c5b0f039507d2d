from core.services.auth.authorization import require_capability, require_principal, require_task_edit
from core.services.auth.guard import GuardOutcome, RouteDecision, RouteRule, RouteTable, resolve_route_access
from core.services.auth.permissions import (
    can_edit_task,
    has_admin_role,
    has_capability,
    has_role,
    is_platform_admin,
    is_project_manager,
    is_task_executor,
)
from core.services.auth.roles import parse_role, try_parse_role
from core.services.auth.session import (
    UserSessionContext,
    UserSessionPrincipal,
    build_principal,
    principal_for_user,
)

__all__ = [
    "UserSessionPrincipal",
    "UserSessionContext",
    "build_principal",
    "principal_for_user",
    "parse_role",
    "try_parse_role",
    "has_role",
    "has_capability",
    "has_admin_role",
    "is_platform_admin",
    "is_project_manager",
    "is_task_executor",
    "can_edit_task",
    "require_capability",
    "require_principal",
    "require_task_edit",
    "GuardOutcome",
    "RouteDecision",
    "RouteRule",
    "RouteTable",
    "resolve_route_access",
]
