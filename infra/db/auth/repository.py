from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from core.interfaces import UserRepository
from core.models import Role, UserAccount
from infra.db.auth.mapper import user_from_orm, user_to_orm
from infra.db.models import UserORM
from infra.db.optimistic import conditional_debit, update_with_version_check


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, user: UserAccount) -> None:
        self.session.add(user_to_orm(user))

    def update(self, user: UserAccount) -> None:
        user.version = update_with_version_check(
            self.session,
            UserORM,
            user.id,
            getattr(user, "version", 1),
            {
                "username": user.username,
                "role": user.role,
                "display_name": user.display_name,
                "email": user.email,
                "company_name": user.company_name,
                "parent_id": user.parent_id,
                "is_active": user.is_active,
                "updated_at": user.updated_at,
            },
            not_found_message="User not found.",
            stale_message="User account was updated by another user.",
        )

    def delete(self, user_id: str) -> None:
        self.session.execute(delete(UserORM).where(UserORM.id == user_id))

    def get(self, user_id: str) -> Optional[UserAccount]:
        obj = self.session.get(UserORM, user_id, populate_existing=True)
        return user_from_orm(obj) if obj else None

    def get_by_username(self, username: str) -> Optional[UserAccount]:
        stmt = select(UserORM).where(UserORM.username == username)
        obj = self.session.execute(stmt).scalars().first()
        return user_from_orm(obj) if obj else None

    def list_all(self) -> List[UserAccount]:
        rows = self.session.execute(select(UserORM).order_by(UserORM.created_at)).scalars().all()
        return [user_from_orm(row) for row in rows]

    def list_by_parent(self, parent_id: str, role: Role | None = None) -> List[UserAccount]:
        stmt = select(UserORM).where(UserORM.parent_id == parent_id)
        if role is not None:
            stmt = stmt.where(UserORM.role == role)
        rows = self.session.execute(stmt.order_by(UserORM.created_at)).scalars().all()
        return [user_from_orm(row) for row in rows]

    def list_by_company(self, company_name: str) -> List[UserAccount]:
        stmt = select(UserORM).where(UserORM.company_name == company_name).order_by(UserORM.created_at)
        rows = self.session.execute(stmt).scalars().all()
        return [user_from_orm(row) for row in rows]

    def debit_balance(self, user_id: str, amount: Decimal) -> bool:
        return conditional_debit(
            self.session,
            UserORM,
            user_id,
            amount,
            not_found_message="User not found.",
        )

    def credit_balance(self, user_id: str, amount: Decimal) -> None:
        stmt = (
            update(UserORM)
            .where(UserORM.id == user_id)
            .values(balance=UserORM.balance + amount, version=UserORM.version + 1)
        )
        result = self.session.execute(stmt)
        if result.rowcount != 1:
            raise NotFoundError("User not found.")


__all__ = ["SqlAlchemyUserRepository"]
