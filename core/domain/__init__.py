from core.domain.audit import AuditLogEntry
from core.domain.auth import UserAccount
from core.domain.company import DEFAULT_MAX_EMPLOYEES, Company
from core.domain.billing import (
    RECURRING_INTERVAL,
    BillingRecord,
    billing_period_bounds,
    next_billing_date,
)
from core.domain.enums import (
    AdjustmentReason,
    BillingStatus,
    BillingType,
    Capability,
    MissingPricePolicy,
    OperationType,
    Platform,
    ProjectStatus,
    Role,
    TaskStatus,
)
from core.domain.identifiers import generate_id, normalize_user_id, same_user
from core.domain.pricing import CompanyOperationPricing, CompanyPricingPlan
from core.domain.task import Project, Task

__all__ = [
    "generate_id",
    "normalize_user_id",
    "same_user",
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
    "DEFAULT_MAX_EMPLOYEES",
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
