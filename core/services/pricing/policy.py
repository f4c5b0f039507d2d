from __future__ import annotations

import logging
import os
from decimal import Decimal

from core.domain.enums import MissingPricePolicy
from core.domain.money import to_unit_price
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MISSING_PRICE_POLICY = MissingPricePolicy.ERROR
DEFAULT_OPERATION_PRICE = Decimal("0.050")


def resolve_missing_price_policy() -> MissingPricePolicy:
    raw = (os.getenv("TF_MISSING_PRICE_POLICY", "") or "").strip().lower()
    if not raw:
        return DEFAULT_MISSING_PRICE_POLICY
    try:
        return MissingPricePolicy(raw)
    except ValueError:
        logger.warning("Unknown TF_MISSING_PRICE_POLICY '%s'; using '%s'.", raw, DEFAULT_MISSING_PRICE_POLICY.value)
        return DEFAULT_MISSING_PRICE_POLICY


def resolve_default_operation_price() -> Decimal:
    raw = (os.getenv("TF_DEFAULT_OPERATION_PRICE", "") or "").strip()
    if not raw:
        return DEFAULT_OPERATION_PRICE
    try:
        price = to_unit_price(raw)
    except ValidationError:
        logger.warning("Invalid TF_DEFAULT_OPERATION_PRICE '%s'; using %s.", raw, DEFAULT_OPERATION_PRICE)
        return DEFAULT_OPERATION_PRICE
    if price < 0:
        logger.warning("Negative TF_DEFAULT_OPERATION_PRICE '%s'; using %s.", raw, DEFAULT_OPERATION_PRICE)
        return DEFAULT_OPERATION_PRICE
    return price


__all__ = [
    "DEFAULT_MISSING_PRICE_POLICY",
    "DEFAULT_OPERATION_PRICE",
    "resolve_missing_price_policy",
    "resolve_default_operation_price",
]
