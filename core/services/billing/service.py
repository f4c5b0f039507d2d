from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from core.domain.billing import as_utc, billing_period_bounds, billing_period_key, next_billing_date
from core.domain.enums import AdjustmentReason, BillingStatus, BillingType, Capability, OperationType, Platform, Role
from core.domain.identifiers import same_user
from core.domain.money import to_display_amount
from core.events.domain_events import domain_events
from core.exceptions import InsufficientBalanceError, NotFoundError, UnauthorizedError, ValidationError
from core.interfaces import BillingRecordRepository, UserRepository
from core.models import BillingRecord, UserAccount
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService
from core.services.auth.authorization import require_capability, require_principal
from core.services.auth.permissions import has_capability, is_platform_admin
from core.services.auth.session import UserSessionContext
from core.services.billing.models import BillingSummary
from core.services.pricing.engine import calculate_billing
from core.services.pricing.service import PricingService

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


class BillingService:
    def __init__(
        self,
        session: Session,
        user_repo: UserRepository,
        billing_repo: BillingRecordRepository,
        pricing_service: PricingService,
        user_session: UserSessionContext | None = None,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._user_repo: UserRepository = user_repo
        self._billing_repo: BillingRecordRepository = billing_repo
        self._pricing_service: PricingService = pricing_service
        self._user_session: UserSessionContext | None = user_session
        self._audit_service: AuditService | None = audit_service

    # ---- charges ------------------------------------------------------

    def ensure_can_afford(self, admin: UserAccount, amount: Decimal) -> None:
        if admin.balance < amount:
            logger.warning(
                "Refused charge for %s: balance %s below required %s",
                admin.username,
                admin.balance,
                amount,
            )
            raise InsufficientBalanceError(admin.balance, amount)

    def employee_fee_for(self, admin: UserAccount, company_name: str | None = None) -> Decimal:
        return self._pricing_service.get_employee_monthly_fee(company_name or admin.company_name)

    def create_employee_charge_record(
        self,
        admin_user_id: str,
        employee: UserAccount,
        *,
        company_name: str | None = None,
        commit: bool = True,
    ) -> BillingRecord:
        """Debit the employee fee from ``admin_user_id`` and record the charge.

        The balance is checked before anything is written. The debit itself is
        conditional, so a concurrent charge that drained the balance in between
        still refuses instead of going negative. With ``commit=False`` the
        caller owns the transaction.
        """
        require_capability(self._user_session, Capability.CREATE_USER, operation_label="charge for employee")
        admin = self._user_repo.get(admin_user_id)
        if admin is None:
            raise NotFoundError("Billing user not found.", code="USER_NOT_FOUND")
        fee = self.employee_fee_for(admin, company_name)
        self.ensure_can_afford(admin, fee)

        period_start = employee.created_at or datetime.now(timezone.utc)
        quote = calculate_billing(BillingType.EMPLOYEE_COUNT, 1, fee)
        record = BillingRecord.create(
            user_id=admin.id,
            billing_type=BillingType.EMPLOYEE_COUNT,
            quantity=quote.quantity,
            unit_price=quote.unit_price,
            total_amount=quote.total_amount,
            period_start=period_start,
            period_end=next_billing_date(period_start),
            status=BillingStatus.PAID,
            paid_at=datetime.now(timezone.utc),
            description=f"Employee seat: {employee.username}",
            subject_user_id=employee.id,
        )

        try:
            if not self._user_repo.debit_balance(admin.id, fee):
                current = self._user_repo.get(admin.id)
                raise InsufficientBalanceError(current.balance if current else Decimal("0.00"), fee)
            self._billing_repo.add(record)
            if commit:
                self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info("Charged %s %s for employee %s", admin.username, fee, employee.username)
        if commit:
            self.publish_charge(record)
        return record

    def publish_charge(self, record: BillingRecord) -> None:
        record_audit(
            self,
            action="billing.charge",
            entity_type="billing_record",
            entity_id=record.id,
            details={
                "user_id": record.user_id,
                "billing_type": record.billing_type.value,
                "total_amount": str(record.total_amount),
                "subject_user_id": record.subject_user_id,
            },
        )
        domain_events.billing_changed.emit(record.user_id)

    def adjust_follow_count(
        self,
        user_id: str,
        delta: int,
        reason: AdjustmentReason | str,
        *,
        platform: Platform | str = Platform.XIAOHONGSHU,
        description: str | None = None,
    ) -> BillingRecord:
        require_capability(self._user_session, Capability.ADJUST_BILLING, operation_label="adjust follow count")
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise ValidationError("Adjustment delta must be a non-zero integer.", code="INVALID_DELTA")
        try:
            reason_value = AdjustmentReason(reason)
        except ValueError as exc:
            raise ValidationError(f"Unknown adjustment reason: {reason!r}", code="INVALID_REASON") from exc
        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError("User not found.", code="USER_NOT_FOUND")

        unit_price = self._pricing_service.get_operation_price(user.company_name or "", platform, OperationType.FOLLOW)
        quote = calculate_billing(BillingType.FOLLOW_COUNT, delta, unit_price)
        now = datetime.now(timezone.utc)
        record = BillingRecord.create(
            user_id=user.id,
            billing_type=BillingType.FOLLOW_COUNT,
            quantity=quote.quantity,
            unit_price=quote.unit_price,
            total_amount=quote.total_amount,
            period_start=now,
            period_end=now,
            reason=reason_value,
            description=(description or "").strip() or None,
        )
        try:
            self._billing_repo.add(record)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        record_audit(
            self,
            action="billing.adjust_follow_count",
            entity_type="billing_record",
            entity_id=record.id,
            company_name=user.company_name,
            details={
                "user_id": user.id,
                "delta": delta,
                "reason": reason_value.value,
                "total_amount": str(record.total_amount),
            },
        )
        logger.info("Adjusted follow count for %s by %s (%s)", user.username, delta, reason_value.value)
        domain_events.billing_changed.emit(user.id)
        return record

    def record_operation_charge(
        self,
        user_id: str,
        company_name: str,
        platform: Platform | str,
        operation_type: OperationType | str,
        quantity: int,
    ) -> BillingRecord:
        principal = require_principal(self._user_session, operation_label="record operation charge")
        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError("User not found.", code="USER_NOT_FOUND")
        if not (
            has_capability(principal, Capability.ADJUST_BILLING)
            or same_user(principal.user_id, user.id)
            or same_user(principal.user_id, user.parent_id)
        ):
            raise UnauthorizedError("Permission denied for record operation charge.")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Operation quantity must be a positive integer.", code="INVALID_QUANTITY")

        unit_price = self._pricing_service.get_operation_price(company_name, platform, operation_type)
        quote = calculate_billing(BillingType.FOLLOW_COUNT, quantity, unit_price)
        now = datetime.now(timezone.utc)
        record = BillingRecord.create(
            user_id=user.id,
            billing_type=BillingType.FOLLOW_COUNT,
            quantity=quote.quantity,
            unit_price=quote.unit_price,
            total_amount=quote.total_amount,
            period_start=now,
            period_end=now,
            description=f"{Platform(platform).value} {OperationType(operation_type).value} x{quantity}",
        )
        try:
            self._billing_repo.add(record)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        self.publish_charge(record)
        return record

    # ---- status transitions -------------------------------------------

    def mark_paid(self, record_id: str, paid_at: datetime | None = None) -> BillingRecord:
        require_capability(self._user_session, Capability.ADJUST_BILLING, operation_label="mark billing record paid")
        record = self._get_record(record_id)
        record.mark_paid(paid_at)
        return self._save_status(record, action="billing.mark_paid")

    def mark_overdue(self, record_id: str) -> BillingRecord:
        require_capability(self._user_session, Capability.ADJUST_BILLING, operation_label="mark billing record overdue")
        record = self._get_record(record_id)
        record.mark_overdue()
        return self._save_status(record, action="billing.mark_overdue")

    def _get_record(self, record_id: str) -> BillingRecord:
        record = self._billing_repo.get(record_id)
        if record is None:
            raise NotFoundError("Billing record not found.", code="BILLING_RECORD_NOT_FOUND")
        return record

    def _save_status(self, record: BillingRecord, *, action: str) -> BillingRecord:
        try:
            self._billing_repo.update_status(record)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action=action,
            entity_type="billing_record",
            entity_id=record.id,
            details={"status": record.status.value},
        )
        domain_events.billing_changed.emit(record.user_id)
        return record

    # ---- queries ------------------------------------------------------

    def list_billing_records(
        self,
        user_id: str | None = None,
        *,
        page: int = 1,
        limit: int = 20,
    ) -> List[BillingRecord]:
        principal = require_capability(self._user_session, Capability.VIEW_BILLING, operation_label="list billing records")
        if page < 1:
            raise ValidationError("Page must be at least 1.", code="INVALID_PAGE")
        limit = max(1, min(int(limit), MAX_PAGE_SIZE))

        if is_platform_admin(principal):
            user_ids = [user_id] if user_id else None
        else:
            if user_id and not same_user(user_id, principal.user_id):
                raise UnauthorizedError("Permission denied for list billing records. Records belong to another user.")
            user_ids = [principal.user_id]
        return self._billing_repo.list_records(user_ids=user_ids, limit=limit, offset=(page - 1) * limit)

    def get_billing_summary(self, user_id: str | None = None) -> BillingSummary:
        principal = require_capability(self._user_session, Capability.VIEW_BILLING, operation_label="view billing summary")
        target_id = user_id or principal.user_id
        if not is_platform_admin(principal) and not same_user(target_id, principal.user_id):
            raise UnauthorizedError("Permission denied for view billing summary. Summary belongs to another user.")
        user = self._user_repo.get(target_id)
        if user is None:
            raise NotFoundError("User not found.", code="USER_NOT_FOUND")

        employees = [
            member
            for member in self._user_repo.list_by_parent(user.id, Role.TASK_EXECUTOR)
            if member.is_active
        ]
        return BillingSummary(
            user_id=user.id,
            balance=user.balance,
            total_spent=to_display_amount(self._billing_repo.sum_total_by_users([user.id])),
            employee_count=len(employees),
            monthly_fee=self.employee_fee_for(user),
        )

    # ---- recurring ----------------------------------------------------

    def run_recurring_billing(self, as_of: datetime | None = None) -> List[BillingRecord]:
        """Create pending seat charges for every started 31-day period not yet billed.

        Safe to run repeatedly; periods already carrying a record are skipped.
        """
        require_capability(self._user_session, Capability.ADJUST_BILLING, operation_label="run recurring billing")
        as_of = as_utc(as_of) if as_of is not None else datetime.now(timezone.utc)
        created: List[BillingRecord] = []

        for employee in self._user_repo.list_all():
            if employee.role != Role.TASK_EXECUTOR or not employee.is_active:
                continue
            if not employee.parent_id or employee.created_at is None:
                continue
            admin = self._user_repo.get(employee.parent_id)
            if admin is None:
                continue
            billed = {record.billing_period for record in self._billing_repo.list_for_subject(employee.id)}
            fee = self.employee_fee_for(admin)

            index = 0
            while True:
                period_start, period_end = billing_period_bounds(as_utc(employee.created_at), index)
                if period_start > as_of:
                    break
                index += 1
                if billing_period_key(period_start) in billed:
                    continue
                quote = calculate_billing(BillingType.EMPLOYEE_COUNT, 1, fee)
                record = BillingRecord.create(
                    user_id=admin.id,
                    billing_type=BillingType.EMPLOYEE_COUNT,
                    quantity=quote.quantity,
                    unit_price=quote.unit_price,
                    total_amount=quote.total_amount,
                    period_start=period_start,
                    period_end=period_end,
                    description=f"Employee seat renewal: {employee.username}",
                    subject_user_id=employee.id,
                )
                self._billing_repo.add(record)
                created.append(record)

        if not created:
            return created
        try:
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action="billing.recurring_run",
            entity_type="billing_record",
            entity_id=as_of.isoformat(),
            details={"created": len(created)},
        )
        logger.info("Recurring billing created %s record(s) as of %s", len(created), as_of.isoformat())
        for user_id in sorted({record.user_id for record in created}):
            domain_events.billing_changed.emit(user_id)
        return created


__all__ = ["BillingService"]
