from __future__ import annotations

import logging
from typing import Any, List

from sqlalchemy.orm import Session

from core.domain.enums import Capability
from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry
from core.services.auth.authorization import require_capability
from core.services.auth.permissions import is_platform_admin
from core.services.auth.session import UserSessionContext, UserSessionPrincipal

logger = logging.getLogger(__name__)

MAX_AUDIT_ROWS = 1000


class AuditService:
    """Append-only change trail.

    Writes are attributed to whoever is signed in (or to the system when no one
    is). Reads need ``analytics.view`` and are confined to the reader's company
    unless the reader is a platform admin.
    """

    def __init__(
        self,
        session: Session,
        audit_repo: AuditLogRepository,
        user_session: UserSessionContext | None = None,
    ):
        self._session: Session = session
        self._audit_repo: AuditLogRepository = audit_repo
        self._user_session: UserSessionContext | None = user_session

    def record(
        self,
        *,
        action: str,
        entity_type: str,
        entity_id: str,
        company_name: str | None = None,
        details: dict[str, Any] | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        principal = self._user_session.principal if self._user_session else None
        if company_name is None and principal is not None:
            company_name = principal.company_name
        entry = AuditLogEntry.create(
            action,
            entity_type,
            entity_id,
            actor_user_id=principal.user_id if principal else None,
            actor_username=principal.username if principal else None,
            actor_role=principal.role if principal else None,
            company_name=company_name,
            details=details,
        )
        self._audit_repo.add(entry)
        if commit:
            self._session.commit()
        logger.debug("Audit %s %s/%s by %s", action, entity_type, entity_id, entry.actor_username or "system")
        return entry

    def rollback(self) -> None:
        self._session.rollback()

    def list_recent(
        self,
        limit: int = 200,
        *,
        company_name: str | None = None,
        entity_type: str | None = None,
    ) -> List[AuditLogEntry]:
        principal = self._require_reader("view audit log")
        return self._audit_repo.list_recent(
            limit=min(max(1, int(limit)), MAX_AUDIT_ROWS),
            company_name=self._company_scope(principal, company_name),
            entity_type=entity_type,
        )

    def history(self, entity_type: str, entity_id: str) -> List[AuditLogEntry]:
        principal = self._require_reader("view audit history")
        return self._audit_repo.list_for_entity(
            entity_type,
            entity_id,
            company_name=self._company_scope(principal, None),
        )

    def _require_reader(self, operation_label: str) -> UserSessionPrincipal:
        return require_capability(self._user_session, Capability.VIEW_ANALYTICS, operation_label=operation_label)

    @staticmethod
    def _company_scope(principal: UserSessionPrincipal, requested: str | None) -> str | None:
        if is_platform_admin(principal):
            return requested
        # "" matches nothing, so a manager without a company sees an empty trail
        return principal.company_name or ""


__all__ = ["AuditService", "MAX_AUDIT_ROWS"]
