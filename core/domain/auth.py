from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from core.domain.enums import Role
from core.domain.identifiers import generate_id


@dataclass
class UserAccount:
    id: str
    username: str
    role: Role
    display_name: Optional[str] = None
    email: Optional[str] = None
    company_name: Optional[str] = None
    parent_id: Optional[str] = None
    balance: Decimal = field(default_factory=lambda: Decimal("0.00"))
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1

    @staticmethod
    def create(
        username: str,
        role: Role,
        display_name: str | None = None,
        email: str | None = None,
        company_name: str | None = None,
        parent_id: str | None = None,
        balance: Decimal | None = None,
        is_active: bool = True,
    ) -> "UserAccount":
        now = datetime.now(timezone.utc)
        return UserAccount(
            id=generate_id(),
            username=username,
            role=role,
            display_name=display_name,
            email=email,
            company_name=company_name,
            parent_id=parent_id,
            balance=balance if balance is not None else Decimal("0.00"),
            is_active=is_active,
            created_at=now,
            updated_at=now,
            version=1,
        )


__all__ = ["UserAccount"]
