# core/models.py
from __future__ import annotations

from core.domain import (
    RECURRING_INTERVAL,
    AdjustmentReason,
    AuditLogEntry,
    BillingRecord,
    BillingStatus,
    BillingType,
    Capability,
    Company,
    CompanyOperationPricing,
    CompanyPricingPlan,
    MissingPricePolicy,
    OperationType,
    Platform,
    Project,
    ProjectStatus,
    Role,
    Task,
    TaskStatus,
    UserAccount,
    billing_period_bounds,
    generate_id,
    next_billing_date,
)

__all__ = [
    "generate_id",
    "Role",
    "Capability",
    "Platform",
    "OperationType",
    "BillingType",
    "BillingStatus",
    "AdjustmentReason",
    "MissingPricePolicy",
    "TaskStatus",
    "ProjectStatus",
    "UserAccount",
    "Company",
    "CompanyPricingPlan",
    "CompanyOperationPricing",
    "BillingRecord",
    "RECURRING_INTERVAL",
    "next_billing_date",
    "billing_period_bounds",
    "Project",
    "Task",
    "AuditLogEntry",
]
