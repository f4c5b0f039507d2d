from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import BillingRecordRepository
from core.models import BillingRecord
from infra.db.billing.mapper import billing_record_from_orm, billing_record_to_orm
from infra.db.mappers import as_decimal
from infra.db.models import BillingRecordORM
from infra.db.optimistic import update_with_version_check


class SqlAlchemyBillingRecordRepository(BillingRecordRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, record: BillingRecord) -> None:
        self.session.add(billing_record_to_orm(record))

    def update_status(self, record: BillingRecord) -> None:
        record.version = update_with_version_check(
            self.session,
            BillingRecordORM,
            record.id,
            getattr(record, "version", 1),
            {"status": record.status, "paid_at": record.paid_at},
            not_found_message="Billing record not found.",
            stale_message="Billing record was updated by another user.",
        )

    def get(self, record_id: str) -> Optional[BillingRecord]:
        obj = self.session.get(BillingRecordORM, record_id, populate_existing=True)
        return billing_record_from_orm(obj) if obj else None

    def list_records(
        self,
        *,
        user_ids: list[str] | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[BillingRecord]:
        stmt = select(BillingRecordORM)
        if user_ids is not None:
            if not user_ids:
                return []
            stmt = stmt.where(BillingRecordORM.user_id.in_(user_ids))
        stmt = (
            stmt.order_by(BillingRecordORM.created_at.desc(), BillingRecordORM.id)
            .offset(max(0, int(offset)))
            .limit(max(1, int(limit)))
        )
        rows = self.session.execute(stmt).scalars().all()
        return [billing_record_from_orm(row) for row in rows]

    def list_for_subject(self, subject_user_id: str) -> List[BillingRecord]:
        stmt = (
            select(BillingRecordORM)
            .where(BillingRecordORM.subject_user_id == subject_user_id)
            .order_by(BillingRecordORM.period_start)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [billing_record_from_orm(row) for row in rows]

    def sum_total_by_users(self, user_ids: list[str]) -> Decimal:
        if not user_ids:
            return Decimal("0")
        # Summed in Python so the result stays exact; SQLite aggregates as REAL.
        stmt = select(BillingRecordORM.total_amount).where(BillingRecordORM.user_id.in_(user_ids))
        return sum(
            (as_decimal(value) for value in self.session.execute(stmt).scalars().all()),
            Decimal("0"),
        )


__all__ = ["SqlAlchemyBillingRecordRepository"]
