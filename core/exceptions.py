# core/exceptions.py
from __future__ import annotations

from decimal import Decimal


class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., an illegal status change)."""


class ConcurrencyError(DomainError):
    """Raised when optimistic locking detects a stale update."""


class UnauthenticatedError(BusinessRuleError):
    """Raised when an operation needs a signed-in user and there is none."""
    def __init__(self, message: str = "Sign-in required.", *, code: str | None = None):
        super().__init__(message, code=code or "UNAUTHENTICATED")


class UnauthorizedError(BusinessRuleError):
    """Raised when the signed-in user's role does not grant a capability."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message, code=code or "PERMISSION_DENIED")


class PricingNotFoundError(NotFoundError):
    """Raised when no active pricing row matches a lookup."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message, code=code or "PRICING_NOT_FOUND")


class InsufficientBalanceError(BusinessRuleError):
    """Raised before a charge-triggering action when the balance cannot cover it."""
    def __init__(self, balance: Decimal, required: Decimal, *, code: str | None = None):
        self.balance = balance
        self.required = required
        super().__init__(
            f"Insufficient balance: current {balance:.2f}, required {required:.2f}. "
            "Please top up your account.",
            code=code or "INSUFFICIENT_BALANCE",
        )
