from __future__ import annotations

from core.models import UserAccount
from infra.db.mappers import as_decimal, as_utc
from infra.db.models import UserORM


def user_to_orm(user: UserAccount) -> UserORM:
    return UserORM(
        id=user.id,
        username=user.username,
        role=user.role,
        display_name=user.display_name,
        email=user.email,
        company_name=user.company_name,
        parent_id=user.parent_id,
        balance=user.balance,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
        version=getattr(user, "version", 1),
    )


def user_from_orm(obj: UserORM) -> UserAccount:
    return UserAccount(
        id=obj.id,
        username=obj.username,
        role=obj.role,
        display_name=obj.display_name,
        email=obj.email,
        company_name=obj.company_name,
        parent_id=obj.parent_id,
        balance=as_decimal(obj.balance, "0.00"),
        is_active=obj.is_active,
        created_at=as_utc(obj.created_at),
        updated_at=as_utc(obj.updated_at),
        version=getattr(obj, "version", 1),
    )


__all__ = ["user_to_orm", "user_from_orm"]
