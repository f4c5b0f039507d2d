from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Mapping

from core.domain.enums import Capability, Role
from core.domain.identifiers import normalize_user_id
from core.exceptions import ValidationError
from core.services.auth.policy import capabilities_for
from core.services.auth.roles import parse_role


@dataclass(frozen=True)
class UserSessionPrincipal:
    user_id: str
    username: str
    role: Role
    company_name: str | None = None
    display_name: str | None = None
    capabilities: FrozenSet[Capability] = field(default_factory=frozenset)


class UserSessionContext:
    """Current sign-in state, passed explicitly to services and guards."""

    def __init__(self):
        self._principal: UserSessionPrincipal | None = None
        self._loading: bool = False

    @property
    def principal(self) -> UserSessionPrincipal | None:
        return self._principal

    def begin_loading(self) -> None:
        self._loading = True

    def set_principal(self, principal: UserSessionPrincipal) -> None:
        self._principal = principal
        self._loading = False

    def clear(self) -> None:
        self._principal = None
        self._loading = False

    def is_loading(self) -> bool:
        return self._loading

    def is_authenticated(self) -> bool:
        return self._principal is not None

    def has_capability(self, capability: Capability) -> bool:
        if self._principal is None:
            return False
        return capability in self._principal.capabilities


def build_principal(payload: Mapping[str, Any], *, legacy_aliases: bool = False) -> UserSessionPrincipal:
    """Build a principal from an authentication-service user payload.

    The role string is parsed into :class:`Role` here and nowhere else.
    """
    user_id = normalize_user_id(payload.get("id", payload.get("user_id")))
    if not user_id:
        raise ValidationError("User payload is missing an id.", code="USER_ID_REQUIRED")
    username = str(payload.get("username") or "").strip()
    role = parse_role(payload.get("role"), legacy_aliases=legacy_aliases)
    company = str(payload.get("company") or payload.get("company_name") or "").strip() or None
    display_name = str(payload.get("full_name") or payload.get("display_name") or "").strip() or None
    return UserSessionPrincipal(
        user_id=user_id,
        username=username,
        role=role,
        company_name=company,
        display_name=display_name,
        capabilities=capabilities_for(role),
    )


def principal_for_user(user) -> UserSessionPrincipal:
    return UserSessionPrincipal(
        user_id=user.id,
        username=user.username,
        role=user.role,
        company_name=user.company_name,
        display_name=user.display_name,
        capabilities=capabilities_for(user.role),
    )


__all__ = [
    "UserSessionPrincipal",
    "UserSessionContext",
    "build_principal",
    "principal_for_user",
]
