from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.services.audit import AuditService
from core.services.auth import UserSessionContext
from core.services.auth.service import UserService
from core.services.billing import BillingExportService, BillingService
from core.services.company import CompanyService
from core.services.pricing import PricingService
from core.services.project.service import ProjectService
from core.services.task.service import TaskService
from infra.db.audit import SqlAlchemyAuditLogRepository
from infra.db.auth import SqlAlchemyUserRepository
from infra.db.billing import SqlAlchemyBillingRecordRepository
from infra.db.company import SqlAlchemyCompanyRepository
from infra.db.pricing import SqlAlchemyOperationPricingRepository, SqlAlchemyPricingPlanRepository
from infra.db.task import SqlAlchemyProjectRepository, SqlAlchemyTaskRepository


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    user_session: UserSessionContext
    audit_service: AuditService
    company_service: CompanyService
    pricing_service: PricingService
    billing_service: BillingService
    billing_export_service: BillingExportService
    user_service: UserService
    project_service: ProjectService
    task_service: TaskService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "user_session": self.user_session,
            "audit_service": self.audit_service,
            "company_service": self.company_service,
            "pricing_service": self.pricing_service,
            "billing_service": self.billing_service,
            "billing_export_service": self.billing_export_service,
            "user_service": self.user_service,
            "project_service": self.project_service,
            "task_service": self.task_service,
        }


def build_service_graph(session: Session, *, bootstrap: bool = True) -> ServiceGraph:
    user_session = UserSessionContext()
    user_repo = SqlAlchemyUserRepository(session)
    company_repo = SqlAlchemyCompanyRepository(session)
    plan_repo = SqlAlchemyPricingPlanRepository(session)
    operation_repo = SqlAlchemyOperationPricingRepository(session)
    billing_repo = SqlAlchemyBillingRecordRepository(session)
    project_repo = SqlAlchemyProjectRepository(session)
    task_repo = SqlAlchemyTaskRepository(session)
    audit_repo = SqlAlchemyAuditLogRepository(session)

    audit_service = AuditService(
        session=session,
        audit_repo=audit_repo,
        user_session=user_session,
    )
    pricing_service = PricingService(
        session,
        plan_repo,
        operation_repo,
        company_repo,
        user_session=user_session,
        audit_service=audit_service,
    )
    company_service = CompanyService(
        session,
        company_repo,
        user_repo,
        plan_repo,
        operation_repo,
        user_session=user_session,
        audit_service=audit_service,
    )
    billing_service = BillingService(
        session,
        user_repo,
        billing_repo,
        pricing_service,
        user_session=user_session,
        audit_service=audit_service,
    )
    billing_export_service = BillingExportService(
        billing_service,
        user_session=user_session,
    )
    user_service = UserService(
        session,
        user_repo,
        company_repo,
        billing_service,
        user_session=user_session,
        audit_service=audit_service,
    )
    if bootstrap:
        user_service.bootstrap_admin()

    project_service = ProjectService(
        session,
        project_repo,
        task_repo,
        user_session=user_session,
        audit_service=audit_service,
    )
    task_service = TaskService(
        session,
        task_repo,
        project_repo,
        user_repo,
        user_session=user_session,
        audit_service=audit_service,
    )

    return ServiceGraph(
        session=session,
        user_session=user_session,
        audit_service=audit_service,
        company_service=company_service,
        pricing_service=pricing_service,
        billing_service=billing_service,
        billing_export_service=billing_export_service,
        user_service=user_service,
        project_service=project_service,
        task_service=task_service,
    )


def build_service_dict(session: Session) -> dict[str, Any]:
    return build_service_graph(session).as_dict()
