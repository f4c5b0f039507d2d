from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from core.domain.enums import Role
from core.services.auth.permissions import has_role
from core.services.auth.session import UserSessionContext

LOGIN_PATH = "/login"
UNAUTHORIZED_PATH = "/unauthorized"
DEFAULT_PATH = "/dashboard"


class GuardOutcome(str, Enum):
    PENDING = "pending"
    AUTHORIZED = "authorized"
    REDIRECT_LOGIN = "redirect_login"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class RouteRule:
    path: str
    allowed_roles: frozenset[Role] | None = None


@dataclass(frozen=True)
class RouteDecision:
    path: str
    outcome: GuardOutcome
    redirect_to: str | None = None


def resolve_route_access(
    user_session: UserSessionContext | None,
    allowed_roles: Iterable[Role] | None = None,
) -> GuardOutcome:
    if user_session is not None and user_session.is_loading():
        return GuardOutcome.PENDING
    principal = user_session.principal if user_session is not None else None
    if principal is None:
        return GuardOutcome.REDIRECT_LOGIN
    if allowed_roles is None:
        return GuardOutcome.AUTHORIZED
    if has_role(principal, allowed_roles):
        return GuardOutcome.AUTHORIZED
    return GuardOutcome.FORBIDDEN


_ALL_ROLES = frozenset(Role)
_WORKSPACE_ROLES = frozenset({Role.PROJECT_MANAGER, Role.TASK_EXECUTOR})
_ADMIN_ROLES = frozenset({Role.PLATFORM_ADMIN, Role.PROJECT_MANAGER})

DEFAULT_ROUTES: tuple[RouteRule, ...] = (
    RouteRule("/dashboard", _ALL_ROLES),
    RouteRule("/tasks", _WORKSPACE_ROLES),
    RouteRule("/projects", _WORKSPACE_ROLES),
    RouteRule("/analytics", _ADMIN_ROLES),
    RouteRule("/users", _ADMIN_ROLES),
    RouteRule("/billing", _ADMIN_ROLES),
    RouteRule("/companies", frozenset({Role.PLATFORM_ADMIN})),
    RouteRule("/pricing", frozenset({Role.PLATFORM_ADMIN})),
    RouteRule("/profile", None),
)


class RouteTable:
    def __init__(self, rules: Iterable[RouteRule] = DEFAULT_ROUTES, *, fallback_path: str = DEFAULT_PATH):
        self._rules: dict[str, RouteRule] = {self._normalize(rule.path): rule for rule in rules}
        self._fallback_path = fallback_path

    @staticmethod
    def _normalize(path: str) -> str:
        cleaned = "/" + (path or "").strip().strip("/")
        return cleaned.lower()

    def rule_for(self, path: str) -> RouteRule | None:
        return self._rules.get(self._normalize(path))

    def resolve(self, path: str, user_session: UserSessionContext | None) -> RouteDecision:
        normalized = self._normalize(path)
        if normalized == LOGIN_PATH:
            return RouteDecision(path=normalized, outcome=GuardOutcome.AUTHORIZED)
        rule = self.rule_for(normalized)
        if rule is None:
            outcome = resolve_route_access(user_session)
            if outcome == GuardOutcome.REDIRECT_LOGIN:
                return RouteDecision(path=normalized, outcome=outcome, redirect_to=LOGIN_PATH)
            if outcome == GuardOutcome.PENDING:
                return RouteDecision(path=normalized, outcome=outcome)
            return RouteDecision(path=normalized, outcome=outcome, redirect_to=self._fallback_path)

        outcome = resolve_route_access(user_session, rule.allowed_roles)
        if outcome == GuardOutcome.REDIRECT_LOGIN:
            return RouteDecision(path=normalized, outcome=outcome, redirect_to=LOGIN_PATH)
        if outcome == GuardOutcome.FORBIDDEN:
            return RouteDecision(path=normalized, outcome=outcome, redirect_to=UNAUTHORIZED_PATH)
        return RouteDecision(path=normalized, outcome=outcome)


__all__ = [
    "GuardOutcome",
    "RouteRule",
    "RouteDecision",
    "RouteTable",
    "DEFAULT_ROUTES",
    "resolve_route_access",
    "LOGIN_PATH",
    "UNAUTHORIZED_PATH",
    "DEFAULT_PATH",
]
