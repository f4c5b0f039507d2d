from __future__ import annotations

from uuid import uuid4


def generate_id() -> str:
    return str(uuid4())


def normalize_user_id(value: object) -> str:
    """Compare user ids as trimmed strings so 42 and "42" refer to the same user."""
    if value is None:
        return ""
    return str(value).strip()


def same_user(lhs: object, rhs: object) -> bool:
    left = normalize_user_id(lhs)
    return bool(left) and left == normalize_user_id(rhs)


__all__ = ["generate_id", "normalize_user_id", "same_user"]
