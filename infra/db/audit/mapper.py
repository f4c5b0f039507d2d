from __future__ import annotations

import json
import logging
from typing import Any

from core.models import AuditLogEntry
from infra.db.mappers import as_utc
from infra.db.models import AuditLogORM

logger = logging.getLogger(__name__)


def dump_details(details: dict[str, Any]) -> str:
    # Decimal and datetime values are stored as their string form
    return json.dumps(details, default=str, ensure_ascii=False, sort_keys=True)


def load_details(raw: str | None, *, entry_id: str = "?") -> dict[str, Any]:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Audit entry %s has unreadable details; showing none.", entry_id)
        return {}
    return value if isinstance(value, dict) else {"value": value}


def audit_to_orm(entry: AuditLogEntry) -> AuditLogORM:
    return AuditLogORM(
        id=entry.id,
        occurred_at=entry.occurred_at,
        actor_user_id=entry.actor_user_id,
        actor_username=entry.actor_username,
        actor_role=entry.actor_role,
        action=entry.action,
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        company_name=entry.company_name,
        details_json=dump_details(entry.details),
    )


def audit_from_orm(obj: AuditLogORM) -> AuditLogEntry:
    return AuditLogEntry(
        id=obj.id,
        action=obj.action,
        entity_type=obj.entity_type,
        entity_id=obj.entity_id,
        occurred_at=as_utc(obj.occurred_at),
        actor_user_id=obj.actor_user_id,
        actor_username=obj.actor_username,
        actor_role=obj.actor_role,
        company_name=obj.company_name,
        details=load_details(obj.details_json, entry_id=obj.id),
    )


__all__ = ["audit_to_orm", "audit_from_orm", "dump_details", "load_details"]
