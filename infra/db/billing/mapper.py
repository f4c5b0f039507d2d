from __future__ import annotations

from core.models import BillingRecord
from infra.db.mappers import as_decimal, as_utc
from infra.db.models import BillingRecordORM


def billing_record_to_orm(record: BillingRecord) -> BillingRecordORM:
    return BillingRecordORM(
        id=record.id,
        user_id=record.user_id,
        subject_user_id=record.subject_user_id,
        billing_type=record.billing_type,
        quantity=record.quantity,
        unit_price=record.unit_price,
        total_amount=record.total_amount,
        billing_period=record.billing_period,
        period_start=record.period_start,
        period_end=record.period_end,
        status=record.status,
        reason=record.reason,
        description=record.description,
        created_at=record.created_at,
        paid_at=record.paid_at,
        version=getattr(record, "version", 1),
    )


def billing_record_from_orm(obj: BillingRecordORM) -> BillingRecord:
    return BillingRecord(
        id=obj.id,
        user_id=obj.user_id,
        subject_user_id=obj.subject_user_id,
        billing_type=obj.billing_type,
        quantity=obj.quantity,
        unit_price=as_decimal(obj.unit_price),
        total_amount=as_decimal(obj.total_amount),
        billing_period=obj.billing_period,
        period_start=as_utc(obj.period_start),
        period_end=as_utc(obj.period_end),
        status=obj.status,
        reason=obj.reason,
        description=obj.description,
        created_at=as_utc(obj.created_at),
        paid_at=as_utc(obj.paid_at),
        version=getattr(obj, "version", 1),
    )


__all__ = ["billing_record_to_orm", "billing_record_from_orm"]
