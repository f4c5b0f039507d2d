from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from core.domain.enums import BillingType, Capability, MissingPricePolicy, OperationType, Platform
from core.domain.money import to_fee, to_unit_price
from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, ConcurrencyError, NotFoundError, UnauthorizedError, ValidationError
from core.interfaces import CompanyRepository, OperationPricingRepository, PricingPlanRepository
from core.models import CompanyOperationPricing, CompanyPricingPlan
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService
from core.services.auth.authorization import require_capability
from core.services.auth.permissions import is_platform_admin
from core.services.auth.session import UserSessionContext
from core.services.company.validation import require_registered_company
from core.services.pricing.engine import (
    BillingQuote,
    calculate_billing,
    get_employee_monthly_fee,
    get_operation_price,
)
from core.services.pricing.policy import resolve_default_operation_price, resolve_missing_price_policy

logger = logging.getLogger(__name__)


def _require_company(company_name: str | None) -> str:
    company = (company_name or "").strip()
    if not company:
        raise ValidationError("Company name is required.", code="COMPANY_REQUIRED")
    return company


class PricingService:
    """Company pricing plans, per-operation prices and the lookups billing relies on."""

    def __init__(
        self,
        session: Session,
        plan_repo: PricingPlanRepository,
        operation_repo: OperationPricingRepository,
        company_repo: CompanyRepository,
        user_session: UserSessionContext | None = None,
        audit_service: AuditService | None = None,
        missing_price_policy: MissingPricePolicy | None = None,
        default_operation_price: Decimal | None = None,
    ):
        self._session: Session = session
        self._plan_repo: PricingPlanRepository = plan_repo
        self._operation_repo: OperationPricingRepository = operation_repo
        self._company_repo: CompanyRepository = company_repo
        self._user_session: UserSessionContext | None = user_session
        self._audit_service: AuditService | None = audit_service
        self._missing_price_policy = missing_price_policy or resolve_missing_price_policy()
        self._default_operation_price = (
            default_operation_price if default_operation_price is not None else resolve_default_operation_price()
        )

    # ---- pricing plans ------------------------------------------------

    def create_pricing_plan(
        self,
        company_name: str,
        plan_name: str,
        employee_monthly_fee: Decimal | str | int,
        is_active: bool = True,
    ) -> CompanyPricingPlan:
        require_capability(self._user_session, Capability.MANAGE_PRICING, operation_label="create pricing plan")
        company = _require_company(company_name)
        name = (plan_name or "").strip()
        if not name:
            raise ValidationError("Plan name is required.", code="PLAN_NAME_EMPTY")
        fee = to_fee(employee_monthly_fee)
        if fee < 0:
            raise ValidationError("Monthly fee cannot be negative.", code="NEGATIVE_FEE")
        company = require_registered_company(self._company_repo, company, require_active=False).name
        if is_active:
            self._require_no_active_plan(company)

        plan = CompanyPricingPlan.create(
            company_name=company,
            plan_name=name,
            employee_monthly_fee=fee,
            is_active=is_active,
        )
        try:
            self._plan_repo.add(plan)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Error creating pricing plan for %s: %s", company, e)
            raise
        record_audit(
            self,
            action="pricing_plan.create",
            entity_type="pricing_plan",
            entity_id=plan.id,
            company_name=company,
            details={"plan_name": name, "employee_monthly_fee": str(fee)},
        )
        logger.info("Created pricing plan %s for %s (%s)", plan.id, company, fee)
        domain_events.pricing_changed.emit(company)
        return plan

    def update_pricing_plan(
        self,
        plan_id: str,
        *,
        expected_version: int | None = None,
        plan_name: str | None = None,
        employee_monthly_fee: Decimal | str | int | None = None,
        is_active: bool | None = None,
    ) -> CompanyPricingPlan:
        require_capability(self._user_session, Capability.MANAGE_PRICING, operation_label="update pricing plan")
        plan = self._plan_repo.get(plan_id)
        if plan is None:
            raise NotFoundError("Pricing plan not found.", code="PLAN_NOT_FOUND")
        if expected_version is not None and plan.version != expected_version:
            raise ConcurrencyError(
                "Pricing plan changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )

        if plan_name is not None:
            if not plan_name.strip():
                raise ValidationError("Plan name is required.", code="PLAN_NAME_EMPTY")
            plan.plan_name = plan_name.strip()
        if employee_monthly_fee is not None:
            fee = to_fee(employee_monthly_fee)
            if fee < 0:
                raise ValidationError("Monthly fee cannot be negative.", code="NEGATIVE_FEE")
            plan.employee_monthly_fee = fee
        if is_active is not None:
            if is_active and not plan.is_active:
                self._require_no_active_plan(plan.company_name)
            plan.is_active = bool(is_active)
        plan.updated_at = datetime.now(timezone.utc)

        try:
            self._plan_repo.update(plan)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action="pricing_plan.update",
            entity_type="pricing_plan",
            entity_id=plan.id,
            company_name=plan.company_name,
            details={
                "plan_name": plan.plan_name,
                "employee_monthly_fee": str(plan.employee_monthly_fee),
                "is_active": plan.is_active,
            },
        )
        domain_events.pricing_changed.emit(plan.company_name)
        return plan

    def delete_pricing_plan(self, plan_id: str) -> None:
        require_capability(self._user_session, Capability.MANAGE_PRICING, operation_label="delete pricing plan")
        plan = self._plan_repo.get(plan_id)
        if plan is None:
            raise NotFoundError("Pricing plan not found.", code="PLAN_NOT_FOUND")
        try:
            self._plan_repo.delete(plan_id)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action="pricing_plan.delete",
            entity_type="pricing_plan",
            entity_id=plan_id,
            company_name=plan.company_name,
            details={"plan_name": plan.plan_name},
        )
        domain_events.pricing_changed.emit(plan.company_name)

    def list_pricing_plans(self) -> List[CompanyPricingPlan]:
        require_capability(self._user_session, Capability.MANAGE_PRICING, operation_label="list pricing plans")
        return self._plan_repo.list_all()

    def get_company_plan(self, company_name: str) -> CompanyPricingPlan | None:
        principal = require_capability(
            self._user_session,
            Capability.VIEW_BILLING,
            operation_label="view pricing plan",
        )
        company = _require_company(company_name)
        if not is_platform_admin(principal) and principal.company_name != company:
            raise UnauthorizedError("Permission denied for view pricing plan. Plan belongs to another company.")
        return self._plan_repo.get_by_company(company)

    def _require_no_active_plan(self, company: str) -> None:
        if self._plan_repo.get_by_company(company, active_only=True) is not None:
            raise BusinessRuleError(
                f"Company '{company}' already has an active pricing plan.",
                code="PLAN_EXISTS",
            )

    # ---- operation pricing --------------------------------------------

    def create_operation_pricing(
        self,
        company_name: str,
        platform: Platform | str,
        operation_type: OperationType | str,
        unit_price: Decimal | str | int,
        is_active: bool = True,
    ) -> CompanyOperationPricing:
        require_capability(self._user_session, Capability.MANAGE_PRICING, operation_label="create operation pricing")
        company = _require_company(company_name)
        price = to_unit_price(unit_price)
        if price < 0:
            raise ValidationError("Unit price cannot be negative.", code="NEGATIVE_PRICE")
        try:
            platform_value = Platform(platform)
            operation_value = OperationType(operation_type)
        except ValueError as exc:
            raise ValidationError(str(exc), code="INVALID_OPERATION") from exc
        company = require_registered_company(self._company_repo, company, require_active=False).name

        pricing = CompanyOperationPricing.create(
            company_name=company,
            platform=platform_value,
            operation_type=operation_value,
            unit_price=price,
            is_active=is_active,
        )
        try:
            self._operation_repo.add(pricing)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Error creating operation pricing for %s: %s", company, e)
            raise
        record_audit(
            self,
            action="operation_pricing.create",
            entity_type="operation_pricing",
            entity_id=pricing.id,
            company_name=company,
            details={
                "platform": platform_value.value,
                "operation_type": operation_value.value,
                "unit_price": str(price),
            },
        )
        domain_events.pricing_changed.emit(company)
        return pricing

    def update_operation_pricing(
        self,
        pricing_id: str,
        *,
        expected_version: int | None = None,
        unit_price: Decimal | str | int | None = None,
        is_active: bool | None = None,
    ) -> CompanyOperationPricing:
        require_capability(self._user_session, Capability.MANAGE_PRICING, operation_label="update operation pricing")
        pricing = self._operation_repo.get(pricing_id)
        if pricing is None:
            raise NotFoundError("Operation pricing not found.", code="OPERATION_PRICING_NOT_FOUND")
        if expected_version is not None and pricing.version != expected_version:
            raise ConcurrencyError(
                "Operation pricing changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        if unit_price is not None:
            price = to_unit_price(unit_price)
            if price < 0:
                raise ValidationError("Unit price cannot be negative.", code="NEGATIVE_PRICE")
            pricing.unit_price = price
        if is_active is not None:
            pricing.is_active = bool(is_active)
        pricing.updated_at = datetime.now(timezone.utc)

        try:
            self._operation_repo.update(pricing)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action="operation_pricing.update",
            entity_type="operation_pricing",
            entity_id=pricing.id,
            company_name=pricing.company_name,
            details={"unit_price": str(pricing.unit_price), "is_active": pricing.is_active},
        )
        domain_events.pricing_changed.emit(pricing.company_name)
        return pricing

    def delete_operation_pricing(self, pricing_id: str) -> None:
        require_capability(self._user_session, Capability.MANAGE_PRICING, operation_label="delete operation pricing")
        pricing = self._operation_repo.get(pricing_id)
        if pricing is None:
            raise NotFoundError("Operation pricing not found.", code="OPERATION_PRICING_NOT_FOUND")
        try:
            self._operation_repo.delete(pricing_id)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action="operation_pricing.delete",
            entity_type="operation_pricing",
            entity_id=pricing_id,
            company_name=pricing.company_name,
            details={
                "platform": pricing.platform.value,
                "operation_type": pricing.operation_type.value,
            },
        )
        domain_events.pricing_changed.emit(pricing.company_name)

    def list_operation_pricing(self, company_name: str | None = None) -> List[CompanyOperationPricing]:
        require_capability(self._user_session, Capability.MANAGE_PRICING, operation_label="list operation pricing")
        return self._operation_repo.list_by_company(company_name)

    # ---- lookups ------------------------------------------------------
    # Read-only helpers used while charging; they do not check capabilities.

    def get_operation_price(
        self,
        company_name: str,
        platform: Platform | str,
        operation_type: OperationType | str,
    ) -> Decimal:
        company = (company_name or "").strip()
        return get_operation_price(
            self._operation_repo.list_by_company(company),
            company,
            platform,
            operation_type,
            policy=self._missing_price_policy,
            default_price=self._default_operation_price,
        )

    def get_employee_monthly_fee(self, company_name: str | None) -> Decimal:
        company = (company_name or "").strip()
        plan = self._plan_repo.get_by_company(company, active_only=True) if company else None
        return get_employee_monthly_fee([plan] if plan else [], company)

    def calculate_billing(
        self,
        billing_type: BillingType | str,
        quantity: int,
        unit_price: Decimal | str | int,
    ) -> BillingQuote:
        return calculate_billing(billing_type, quantity, unit_price)


__all__ = ["PricingService"]
