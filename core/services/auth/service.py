from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.domain.enums import Capability, Role
from core.domain.identifiers import same_user
from core.domain.money import to_fee
from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, ConcurrencyError, NotFoundError, UnauthorizedError, ValidationError
from core.interfaces import CompanyRepository, UserRepository
from core.models import UserAccount
from core.services.audit.helpers import record_audit
from core.services.auth.authorization import require_capability
from core.services.auth.permissions import is_platform_admin, is_project_manager
from core.services.auth.roles import parse_role
from core.services.auth.session import UserSessionContext, UserSessionPrincipal
from core.services.company.validation import require_registered_company, require_seat_available

if TYPE_CHECKING:
    from core.services.audit.service import AuditService
    from core.services.billing.service import BillingService


_EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
logger = logging.getLogger(__name__)

# Which roles each administrator may create.
CREATABLE_ROLES: dict[Role, frozenset[Role]] = {
    Role.PLATFORM_ADMIN: frozenset({Role.PLATFORM_ADMIN, Role.PROJECT_MANAGER}),
    Role.PROJECT_MANAGER: frozenset({Role.TASK_EXECUTOR}),
}


class UserService:
    def __init__(
        self,
        session: Session,
        user_repo: UserRepository,
        company_repo: CompanyRepository,
        billing_service: "BillingService",
        user_session: UserSessionContext | None = None,
        audit_service: "AuditService | None" = None,
    ):
        self._session: Session = session
        self._user_repo: UserRepository = user_repo
        self._company_repo: CompanyRepository = company_repo
        self._billing_service: BillingService = billing_service
        self._user_session: UserSessionContext | None = user_session
        self._audit_service: AuditService | None = audit_service

    def bootstrap_admin(self) -> UserAccount:
        """Ensure the platform administrator named by TF_ADMIN_USERNAME exists."""
        admin_username = (os.getenv("TF_ADMIN_USERNAME", "admin").strip() or "admin").lower()
        admin = self._user_repo.get_by_username(admin_username)
        if admin is not None:
            return admin
        admin = UserAccount.create(
            username=admin_username,
            role=Role.PLATFORM_ADMIN,
            display_name="Administrator",
        )
        try:
            self._user_repo.add(admin)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        logger.info("Bootstrapped platform admin '%s'", admin_username)
        return admin

    def create_user(
        self,
        username: str,
        role: Role | str,
        *,
        display_name: str | None = None,
        email: str | None = None,
        company_name: str | None = None,
        initial_balance: Decimal | str | int | None = None,
    ) -> UserAccount:
        """Create an account on behalf of the signed-in administrator.

        Project managers create task executors in their own company; each one
        takes a seat under the company's employee limit and is charged the
        company's monthly seat fee. New project managers need a registered,
        active company. The balance is checked before anything is written, so
        an underfunded manager gets ``InsufficientBalanceError`` and no account.
        """
        principal = require_capability(self._user_session, Capability.CREATE_USER, operation_label="create user")
        target_role = role if isinstance(role, Role) else parse_role(role)
        if target_role not in CREATABLE_ROLES.get(principal.role, frozenset()):
            raise UnauthorizedError(
                f"Permission denied for create user. {principal.role.value} cannot create {target_role.value}."
            )

        normalized = (username or "").strip().lower()
        if not normalized:
            raise ValidationError("Username is required.", code="USERNAME_REQUIRED")
        normalized_email = self._normalize_email(email)
        self._validate_email(normalized_email)
        if self._user_repo.get_by_username(normalized):
            raise ValidationError("Username already exists.", code="USERNAME_EXISTS")

        balance = to_fee(initial_balance) if initial_balance is not None else Decimal("0.00")
        if balance < 0:
            raise ValidationError("Initial balance cannot be negative.", code="NEGATIVE_BALANCE")

        charged_admin: UserAccount | None = None
        if is_project_manager(principal):
            charged_admin = self._require_user(principal.user_id)
            registered = require_registered_company(
                self._company_repo,
                charged_admin.company_name or principal.company_name or "",
            )
            require_seat_available(self._user_repo, registered)
            company = registered.name
            parent_id = charged_admin.id
            self._billing_service.ensure_can_afford(
                charged_admin,
                self._billing_service.employee_fee_for(charged_admin),
            )
        else:
            company = (company_name or "").strip() or None
            parent_id = None
            if target_role == Role.PROJECT_MANAGER and not company:
                raise ValidationError("Project managers need a company.", code="COMPANY_REQUIRED")
            if company:
                company = require_registered_company(self._company_repo, company).name

        user = UserAccount.create(
            username=normalized,
            role=target_role,
            display_name=(display_name or "").strip() or None,
            email=normalized_email,
            company_name=company,
            parent_id=parent_id,
            balance=balance,
        )
        charge = None
        try:
            self._user_repo.add(user)
            if charged_admin is not None:
                charge = self._billing_service.create_employee_charge_record(
                    charged_admin.id,
                    user,
                    company_name=company,
                    commit=False,
                )
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            if "username" in str(exc).lower():
                raise ValidationError("Username already exists.", code="USERNAME_EXISTS") from exc
            raise ValidationError(
                "Failed to create user due to data conflict.",
                code="USER_CREATE_CONFLICT",
            ) from exc
        except Exception:
            self._session.rollback()
            raise

        record_audit(
            self,
            action="user.create",
            entity_type="user",
            entity_id=user.id,
            company_name=company,
            details={"username": user.username, "role": user.role.value, "parent_id": parent_id},
        )
        logger.info("Created user %s (%s) by %s", user.username, user.role.value, principal.username)
        if charge is not None:
            self._billing_service.publish_charge(charge)
        domain_events.users_changed.emit(user.id)
        return user

    def update_user(
        self,
        user_id: str,
        *,
        expected_version: int | None = None,
        display_name: str | None = None,
        email: str | None = None,
        company_name: str | None = None,
    ) -> UserAccount:
        principal = require_capability(self._user_session, Capability.EDIT_USER, operation_label="update user")
        user = self._require_user(user_id)
        self._require_managed(principal, user, operation_label="update user")
        self._check_version(user, expected_version)

        if display_name is not None:
            user.display_name = display_name.strip() or None
        if email is not None:
            normalized_email = self._normalize_email(email)
            self._validate_email(normalized_email)
            user.email = normalized_email
        if company_name is not None:
            if not is_platform_admin(principal):
                raise UnauthorizedError("Permission denied for update user. Only platform admins move companies.")
            company = company_name.strip()
            user.company_name = require_registered_company(self._company_repo, company).name if company else None
        return self._save(user, action="user.update", details={"display_name": user.display_name})

    def change_role(self, user_id: str, role: Role | str, *, expected_version: int | None = None) -> UserAccount:
        principal = require_capability(self._user_session, Capability.EDIT_USER, operation_label="change role")
        if not is_platform_admin(principal):
            raise UnauthorizedError("Permission denied for change role. Only platform admins change roles.")
        user = self._require_user(user_id)
        self._check_version(user, expected_version)
        new_role = role if isinstance(role, Role) else parse_role(role)
        if same_user(user.id, principal.user_id) and new_role != user.role:
            raise BusinessRuleError("You cannot change your own role.", code="SELF_ROLE_CHANGE")
        previous = user.role
        user.role = new_role
        return self._save(
            user,
            action="user.change_role",
            details={"from": previous.value, "to": new_role.value},
        )

    def set_active(self, user_id: str, is_active: bool) -> UserAccount:
        principal = require_capability(self._user_session, Capability.EDIT_USER, operation_label="set user active")
        user = self._require_user(user_id)
        self._require_managed(principal, user, operation_label="set user active")
        if same_user(user.id, principal.user_id) and not is_active:
            raise BusinessRuleError("You cannot deactivate your own account.", code="SELF_DEACTIVATE")
        user.is_active = bool(is_active)
        return self._save(user, action="user.set_active", details={"is_active": user.is_active})

    def delete_user(self, user_id: str) -> None:
        principal = require_capability(self._user_session, Capability.DELETE_USER, operation_label="delete user")
        user = self._require_user(user_id)
        if same_user(user.id, principal.user_id):
            raise BusinessRuleError("You cannot delete your own account.", code="SELF_DELETE")
        self._require_managed(principal, user, operation_label="delete user")
        try:
            self._user_repo.delete(user.id)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action="user.delete",
            entity_type="user",
            entity_id=user.id,
            company_name=user.company_name,
            details={"username": user.username},
        )
        domain_events.users_changed.emit(user.id)

    def top_up_balance(self, user_id: str, amount: Decimal | str | int) -> UserAccount:
        require_capability(self._user_session, Capability.ADJUST_BILLING, operation_label="top up balance")
        value = to_fee(amount)
        if value <= 0:
            raise ValidationError("Top-up amount must be positive.", code="INVALID_AMOUNT")
        user = self._require_user(user_id)
        try:
            self._user_repo.credit_balance(user.id, value)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        user = self._require_user(user_id)
        record_audit(
            self,
            action="user.top_up",
            entity_type="user",
            entity_id=user.id,
            company_name=user.company_name,
            details={"amount": str(value), "balance": str(user.balance)},
        )
        logger.info("Topped up %s by %s", user.username, value)
        domain_events.billing_changed.emit(user.id)
        return user

    def get_user(self, user_id: str) -> UserAccount:
        principal = require_capability(self._user_session, Capability.MANAGE_USERS, operation_label="view user")
        user = self._require_user(user_id)
        if not same_user(user.id, principal.user_id):
            self._require_managed(principal, user, operation_label="view user")
        return user

    def list_users(self, company_name: str | None = None) -> List[UserAccount]:
        principal = require_capability(self._user_session, Capability.MANAGE_USERS, operation_label="list users")
        if is_platform_admin(principal):
            if company_name:
                return self._user_repo.list_by_company(company_name.strip())
            return self._user_repo.list_all()
        return self._user_repo.list_by_parent(principal.user_id)

    def list_team_members(self) -> List[UserAccount]:
        principal = require_capability(
            self._user_session,
            Capability.VIEW_TEAM_MEMBERS,
            operation_label="view team members",
        )
        if is_project_manager(principal):
            return self._user_repo.list_by_parent(principal.user_id, Role.TASK_EXECUTOR)
        me = self._require_user(principal.user_id)
        if not me.parent_id:
            return [me]
        return self._user_repo.list_by_parent(me.parent_id, Role.TASK_EXECUTOR)

    # ---- helpers ------------------------------------------------------

    def _save(self, user: UserAccount, *, action: str, details: dict) -> UserAccount:
        user.updated_at = datetime.now(timezone.utc)
        try:
            self._user_repo.update(user)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action=action,
            entity_type="user",
            entity_id=user.id,
            company_name=user.company_name,
            details=details,
        )
        domain_events.users_changed.emit(user.id)
        return user

    def _require_user(self, user_id: str) -> UserAccount:
        user = self._user_repo.get(user_id)
        if not user:
            raise NotFoundError("User not found.", code="USER_NOT_FOUND")
        return user

    @staticmethod
    def _require_managed(principal: UserSessionPrincipal, user: UserAccount, *, operation_label: str) -> None:
        if is_platform_admin(principal):
            return
        if same_user(user.parent_id, principal.user_id):
            return
        raise UnauthorizedError(f"Permission denied for {operation_label}. User is not in your team.")

    @staticmethod
    def _check_version(user: UserAccount, expected_version: int | None) -> None:
        if expected_version is not None and user.version != expected_version:
            raise ConcurrencyError(
                "User changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )

    @staticmethod
    def _normalize_email(email: str | None) -> str | None:
        value = (email or "").strip()
        return value or None

    @staticmethod
    def _validate_email(email: str | None) -> None:
        if email is None:
            return
        if not _EMAIL_RE.fullmatch(email):
            raise ValidationError("Email address is invalid.", code="INVALID_EMAIL")


__all__ = ["UserService", "CREATABLE_ROLES"]
