from core.services.billing.export import BillingExportService
from core.services.billing.models import BillingSummary
from core.services.billing.service import BillingService

__all__ = ["BillingService", "BillingSummary", "BillingExportService"]
