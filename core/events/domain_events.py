"""Change notifications for billing, pricing, companies, users and tasks."""
from __future__ import annotations

from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.billing_changed: Signal[str] = Signal()   # user_id charged or adjusted
        self.pricing_changed: Signal[str] = Signal()   # company_name
        self.companies_changed: Signal[str] = Signal()  # company_id
        self.users_changed: Signal[str] = Signal()     # user_id
        self.tasks_changed: Signal[str] = Signal()     # task_id or project_id


# SINGLE global instance
domain_events = DomainEvents()

__all__ = ["DomainEvents", "domain_events"]
