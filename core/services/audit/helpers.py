from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


def record_audit(
    owner: object,
    *,
    action: str,
    entity_type: str,
    entity_id: str,
    company_name: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Write an audit entry after the business change has been committed.

    A failed audit write is logged and rolled back; it never undoes the change.
    """
    audit_service = getattr(owner, "_audit_service", None)
    if audit_service is None:
        return
    try:
        audit_service.record(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            company_name=company_name,
            details=details or {},
            commit=True,
        )
    except SQLAlchemyError as exc:
        audit_service.rollback()
        logger.warning("Audit write failed for %s %s: %s", action, entity_id, exc)


__all__ = ["record_audit"]
