from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from core.domain.enums import Capability, ProjectStatus
from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, NotFoundError, UnauthorizedError
from core.interfaces import ProjectRepository, TaskRepository
from core.models import Project
from core.services.audit.helpers import record_audit
from core.services.auth.authorization import require_capability
from core.services.auth.session import UserSessionPrincipal
from core.services.project.validation import ProjectValidationMixin

logger = logging.getLogger(__name__)


class ProjectLifecycleMixin(ProjectValidationMixin):
    _session: Session
    _project_repo: ProjectRepository
    _task_repo: TaskRepository

    def create_project(
        self,
        name: str,
        description: str = "",
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Project:
        principal = require_capability(self._user_session, Capability.CREATE_PROJECT, operation_label="create project")
        name = self._validate_project_name(name)
        self._validate_project_dates(start_date, end_date)
        project = Project.create(
            name=name,
            description=(description or "").strip(),
            company_name=principal.company_name,
            manager_id=principal.user_id,
            start_date=start_date,
            end_date=end_date,
        )

        try:
            self._project_repo.add(project)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Error creating project: %s", e)
            raise
        record_audit(
            self,
            action="project.create",
            entity_type="project",
            entity_id=project.id,
            company_name=project.company_name,
            details={"name": project.name},
        )
        logger.info("Created project %s - %s", project.id, project.name)
        domain_events.tasks_changed.emit(project.id)
        return project

    def update_project(
        self,
        project_id: str,
        expected_version: int | None = None,
        name: str | None = None,
        description: str | None = None,
        status: ProjectStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Project:
        principal = require_capability(self._user_session, Capability.EDIT_PROJECT, operation_label="update project")
        project = self._require_project(project_id)
        self._require_same_company(principal, project, operation_label="update project")
        if expected_version is not None and project.version != expected_version:
            raise ConcurrencyError(
                "Project changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )

        if name is not None:
            project.name = self._validate_project_name(name)
        if description is not None:
            project.description = description.strip()
        if status is not None:
            project.status = status
        if start_date is not None:
            project.start_date = start_date
        if end_date is not None:
            project.end_date = end_date
        self._validate_project_dates(project.start_date, project.end_date)

        try:
            self._project_repo.update(project)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action="project.update",
            entity_type="project",
            entity_id=project.id,
            company_name=project.company_name,
            details={"name": project.name, "status": project.status.value},
        )
        domain_events.tasks_changed.emit(project.id)
        return project

    def set_status(self, project_id: str, status: ProjectStatus) -> Project:
        return self.update_project(project_id, status=status)

    def delete_project(self, project_id: str) -> None:
        principal = require_capability(self._user_session, Capability.DELETE_PROJECT, operation_label="delete project")
        project = self._require_project(project_id)
        self._require_same_company(principal, project, operation_label="delete project")
        try:
            self._task_repo.delete_by_project(project.id)
            self._project_repo.delete(project.id)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Error deleting project %s: %s", project_id, e)
            raise
        record_audit(
            self,
            action="project.delete",
            entity_type="project",
            entity_id=project.id,
            company_name=project.company_name,
            details={"name": project.name},
        )
        domain_events.tasks_changed.emit(project.id)

    def _require_project(self, project_id: str) -> Project:
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        return project

    @staticmethod
    def _require_same_company(principal: UserSessionPrincipal, project: Project, *, operation_label: str) -> None:
        if project.company_name and project.company_name != principal.company_name:
            raise UnauthorizedError(f"Permission denied for {operation_label}. Project belongs to another company.")
