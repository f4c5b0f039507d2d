from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class BillingSummary:
    user_id: str
    balance: Decimal
    total_spent: Decimal
    employee_count: int
    monthly_fee: Decimal


__all__ = ["BillingSummary"]
