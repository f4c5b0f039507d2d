from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from core.exceptions import ConcurrencyError, NotFoundError


def update_with_version_check(
    session: Session,
    orm_type: type[Any],
    row_id: str,
    expected_version: int,
    values: dict[str, Any],
    *,
    not_found_message: str,
    stale_message: str,
) -> int:
    next_version = int(expected_version) + 1
    stmt = (
        update(orm_type)
        .where(orm_type.id == row_id, orm_type.version == expected_version)
        .values(**values, version=next_version)
    )
    result = session.execute(stmt)
    if result.rowcount == 1:
        return next_version

    if session.get(orm_type, row_id) is None:
        raise NotFoundError(not_found_message)
    raise ConcurrencyError(stale_message, code="STALE_WRITE")



def conditional_debit(
    session: Session,
    orm_type: type[Any],
    row_id: str,
    amount: Decimal,
    *,
    column: str = "balance",
    not_found_message: str,
) -> bool:
    """Subtract ``amount`` only while the stored value still covers it.

    Returns False when the guard rejected the write; the row is left untouched.
    """
    target = getattr(orm_type, column)
    stmt = (
        update(orm_type)
        .where(orm_type.id == row_id, target >= amount)
        .values({column: target - amount, "version": orm_type.version + 1})
    )
    result = session.execute(stmt)
    if result.rowcount == 1:
        return True

    if session.get(orm_type, row_id) is None:
        raise NotFoundError(not_found_message)
    return False


__all__ = ["update_with_version_check", "conditional_debit"]
