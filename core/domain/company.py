from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.domain.identifiers import generate_id

DEFAULT_MAX_EMPLOYEES = 10


@dataclass
class Company:
    """A tenant. Users, pricing plans and projects refer to it by ``name``."""

    id: str
    name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    max_employees: int = DEFAULT_MAX_EMPLOYEES
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1

    @staticmethod
    def create(name: str, **extra) -> "Company":
        now = datetime.now(timezone.utc)
        return Company(
            id=generate_id(),
            name=name,
            created_at=now,
            updated_at=now,
            **extra,
        )


__all__ = ["Company", "DEFAULT_MAX_EMPLOYEES"]
