from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, TypeVar

from core.domain.enums import AdjustmentReason, BillingStatus, BillingType
from core.domain.identifiers import generate_id
from core.exceptions import BusinessRuleError

# Employee seats renew a fixed 31 days after creation, not on calendar months.
RECURRING_INTERVAL = timedelta(days=31)

_D = TypeVar("_D", date, datetime)


def as_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are taken to be UTC; aware ones are converted."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def next_billing_date(created_at: _D) -> _D:
    return created_at + RECURRING_INTERVAL


def billing_period_bounds(created_at: _D, period_index: int) -> tuple[_D, _D]:
    start = created_at + RECURRING_INTERVAL * period_index
    return start, start + RECURRING_INTERVAL


def billing_period_key(period_start: date | datetime) -> str:
    day = period_start.date() if isinstance(period_start, datetime) else period_start
    return day.isoformat()


@dataclass
class BillingRecord:
    id: str
    user_id: str
    billing_type: BillingType
    quantity: int
    unit_price: Decimal
    total_amount: Decimal
    billing_period: str
    period_start: datetime
    period_end: datetime
    status: BillingStatus = BillingStatus.PENDING
    created_at: datetime | None = None
    paid_at: Optional[datetime] = None
    reason: Optional[AdjustmentReason] = None
    description: Optional[str] = None
    subject_user_id: Optional[str] = None
    version: int = 1

    @staticmethod
    def create(
        user_id: str,
        billing_type: BillingType,
        quantity: int,
        unit_price: Decimal,
        total_amount: Decimal,
        period_start: datetime,
        period_end: datetime,
        *,
        status: BillingStatus = BillingStatus.PENDING,
        reason: AdjustmentReason | None = None,
        description: str | None = None,
        subject_user_id: str | None = None,
        paid_at: datetime | None = None,
    ) -> "BillingRecord":
        return BillingRecord(
            id=generate_id(),
            user_id=user_id,
            billing_type=billing_type,
            quantity=quantity,
            unit_price=unit_price,
            total_amount=total_amount,
            billing_period=billing_period_key(period_start),
            period_start=period_start,
            period_end=period_end,
            status=status,
            created_at=datetime.now(timezone.utc),
            paid_at=paid_at,
            reason=reason,
            description=description,
            subject_user_id=subject_user_id,
            version=1,
        )

    def mark_paid(self, paid_at: datetime | None = None) -> None:
        self._require_pending(BillingStatus.PAID)
        self.status = BillingStatus.PAID
        self.paid_at = paid_at or datetime.now(timezone.utc)

    def mark_overdue(self) -> None:
        self._require_pending(BillingStatus.OVERDUE)
        self.status = BillingStatus.OVERDUE

    def _require_pending(self, target: BillingStatus) -> None:
        if self.status != BillingStatus.PENDING:
            raise BusinessRuleError(
                f"Billing record cannot move from {self.status.value} to {target.value}.",
                code="INVALID_BILLING_TRANSITION",
            )


__all__ = [
    "RECURRING_INTERVAL",
    "BillingRecord",
    "as_utc",
    "billing_period_bounds",
    "billing_period_key",
    "next_billing_date",
]
