from __future__ import annotations

from decimal import Decimal

from core.domain.billing import as_utc


def as_decimal(value: object, default: str = "0") -> Decimal:
    if value is None:
        return Decimal(default)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


__all__ = ["as_utc", "as_decimal"]
