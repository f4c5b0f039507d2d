from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.exceptions import ValidationError

FEE_PLACES = 2
OPERATION_PRICE_PLACES = 3

_QUANTS = {
    0: Decimal("1"),
    1: Decimal("0.1"),
    2: Decimal("0.01"),
    3: Decimal("0.001"),
}


def to_decimal(value: object) -> Decimal:
    """Exact Decimal for ints, strings and Decimals; floats go through their repr."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"Invalid monetary value: {value!r}", code="INVALID_AMOUNT")
    if isinstance(value, (int, str)):
        raw = value
    elif isinstance(value, float):
        raw = repr(value)
    else:
        raise ValidationError(f"Invalid monetary value: {value!r}", code="INVALID_AMOUNT")
    try:
        result = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid monetary value: {value!r}", code="INVALID_AMOUNT") from exc
    if not result.is_finite():
        raise ValidationError(f"Invalid monetary value: {value!r}", code="INVALID_AMOUNT")
    return result


def to_money(value: object, places: int = FEE_PLACES) -> Decimal:
    return to_decimal(value).quantize(_QUANTS[places], rounding=ROUND_HALF_UP)


def to_fee(value: object) -> Decimal:
    return to_money(value, FEE_PLACES)


def to_unit_price(value: object) -> Decimal:
    return to_money(value, OPERATION_PRICE_PLACES)


def to_display_amount(value: object) -> Decimal:
    return to_money(value, 2)


__all__ = [
    "FEE_PLACES",
    "OPERATION_PRICE_PLACES",
    "to_decimal",
    "to_money",
    "to_fee",
    "to_unit_price",
    "to_display_amount",
]
