from .audit import AuditService
from .auth.service import UserService
from .billing import BillingExportService, BillingService, BillingSummary
from .company import CompanyService
from .pricing import PricingService
from .project.service import ProjectService
from .task.service import TaskService

__all__ = [
    "AuditService",
    "UserService",
    "CompanyService",
    "PricingService",
    "BillingService",
    "BillingSummary",
    "BillingExportService",
    "ProjectService",
    "TaskService",
]
