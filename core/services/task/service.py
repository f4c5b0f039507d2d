from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import ProjectRepository, TaskRepository, UserRepository
from core.services.audit.service import AuditService
from core.services.auth.session import UserSessionContext
from core.services.task.lifecycle import TaskLifecycleMixin
from core.services.task.query import TaskQueryMixin


class TaskService(TaskLifecycleMixin, TaskQueryMixin):
    """Task service orchestrator: wiring repositories + composing mixins."""

    def __init__(
        self,
        session: Session,
        task_repo: TaskRepository,
        project_repo: ProjectRepository,
        user_repo: UserRepository,
        user_session: UserSessionContext | None = None,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._task_repo: TaskRepository = task_repo
        self._project_repo: ProjectRepository = project_repo
        self._user_repo: UserRepository = user_repo
        self._user_session: UserSessionContext | None = user_session
        self._audit_service: AuditService | None = audit_service


__all__ = ["TaskService"]
