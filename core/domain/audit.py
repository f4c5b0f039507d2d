from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from core.domain.enums import Role
from core.domain.identifiers import generate_id


@dataclass
class AuditLogEntry:
    """One committed change, attributed to the signed-in user who made it.

    Entries are scoped by ``company_name`` so project managers only ever read
    their own company's trail.
    """

    id: str
    action: str
    entity_type: str
    entity_id: str
    occurred_at: datetime
    actor_user_id: Optional[str] = None
    actor_username: Optional[str] = None
    actor_role: Optional[Role] = None
    company_name: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def create(action: str, entity_type: str, entity_id: str, **extra) -> "AuditLogEntry":
        details = extra.pop("details", None) or {}
        return AuditLogEntry(
            id=generate_id(),
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            occurred_at=datetime.now(timezone.utc),
            details=dict(details),
            **extra,
        )

    @property
    def is_system(self) -> bool:
        return self.actor_user_id is None


__all__ = ["AuditLogEntry"]
