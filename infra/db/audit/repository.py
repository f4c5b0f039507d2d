from __future__ import annotations

from typing import List

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry
from infra.db.audit.mapper import audit_from_orm, audit_to_orm
from infra.db.models import AuditLogORM


class SqlAlchemyAuditLogRepository(AuditLogRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: AuditLogEntry) -> None:
        self.session.add(audit_to_orm(entry))

    def list_recent(
        self,
        limit: int = 200,
        *,
        company_name: str | None = None,
        entity_type: str | None = None,
    ) -> List[AuditLogEntry]:
        stmt = select(AuditLogORM)
        if entity_type is not None:
            stmt = stmt.where(AuditLogORM.entity_type == entity_type)
        return self._fetch(stmt, company_name=company_name, limit=limit)

    def list_for_entity(
        self,
        entity_type: str,
        entity_id: str,
        *,
        company_name: str | None = None,
    ) -> List[AuditLogEntry]:
        stmt = select(AuditLogORM).where(
            AuditLogORM.entity_type == entity_type,
            AuditLogORM.entity_id == entity_id,
        )
        return self._fetch(stmt, company_name=company_name)

    def _fetch(self, stmt: Select, *, company_name: str | None, limit: int | None = None) -> List[AuditLogEntry]:
        if company_name is not None:
            stmt = stmt.where(AuditLogORM.company_name == company_name)
        stmt = stmt.order_by(AuditLogORM.occurred_at.desc(), AuditLogORM.id)
        if limit is not None:
            stmt = stmt.limit(max(1, int(limit)))
        return [audit_from_orm(row) for row in self.session.execute(stmt).scalars()]


__all__ = ["SqlAlchemyAuditLogRepository"]
