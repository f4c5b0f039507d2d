from core.services.company.service import CompanyService
from core.services.company.validation import require_registered_company, require_seat_available

__all__ = ["CompanyService", "require_registered_company", "require_seat_available"]
