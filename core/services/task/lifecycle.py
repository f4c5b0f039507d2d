from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from core.domain.enums import Capability, TaskStatus
from core.domain.identifiers import same_user
from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, NotFoundError, UnauthorizedError
from core.interfaces import ProjectRepository, TaskRepository, UserRepository
from core.models import Task
from core.services.audit.helpers import record_audit
from core.services.auth.authorization import require_capability, require_task_edit
from core.services.auth.permissions import is_task_executor
from core.services.task.validation import TaskValidationMixin

logger = logging.getLogger(__name__)


class TaskLifecycleMixin(TaskValidationMixin):
    _session: Session
    _task_repo: TaskRepository
    _project_repo: ProjectRepository
    _user_repo: UserRepository

    def create_task(
        self,
        title: str,
        project_id: Optional[str] = None,
        description: str = "",
        assignee_id: Optional[str] = None,
        priority: int = 0,
        due_date: Optional[date] = None,
    ) -> Task:
        principal = require_capability(self._user_session, Capability.CREATE_TASK, operation_label="create task")
        title = self._validate_task_title(title)
        priority = self._validate_priority(priority)
        if project_id is not None:
            self._require_company_project(principal, project_id, operation_label="create task")
        self._validate_due_date(project_id, due_date)

        if is_task_executor(principal):
            # executors file tasks for themselves only
            if assignee_id is not None and not same_user(assignee_id, principal.user_id):
                raise UnauthorizedError("Permission denied for create task. Executors cannot assign others.")
            assignee_id = principal.user_id
        elif assignee_id is not None:
            self._validate_assignee(assignee_id, principal)

        task = Task.create(
            title=title,
            project_id=project_id,
            description=(description or "").strip(),
            assignee_id=assignee_id,
            created_by=principal.user_id,
            priority=priority,
            due_date=due_date,
        )
        try:
            self._task_repo.add(task)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Error creating task: %s", e)
            raise
        record_audit(
            self,
            action="task.create",
            entity_type="task",
            entity_id=task.id,
            details={"title": task.title, "assignee_id": task.assignee_id},
        )
        logger.info("Created task %s - %s", task.id, task.title)
        domain_events.tasks_changed.emit(task.id)
        return task

    def update_task(
        self,
        task_id: str,
        expected_version: int | None = None,
        title: str | None = None,
        description: str | None = None,
        priority: int | None = None,
        due_date: date | None = None,
    ) -> Task:
        task = self._require_task(task_id)
        principal = require_task_edit(self._user_session, task, operation_label="update task")
        self._require_task_scope(principal, task, operation_label="update task")
        if expected_version is not None and task.version != expected_version:
            raise ConcurrencyError(
                "Task changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        if title is not None:
            task.title = self._validate_task_title(title)
        if description is not None:
            task.description = description.strip()
        if priority is not None:
            task.priority = self._validate_priority(priority)
        if due_date is not None:
            self._validate_due_date(task.project_id, due_date)
            task.due_date = due_date
        return self._save(task, action="task.update", details={"title": task.title})

    def assign_task(self, task_id: str, assignee_id: str) -> Task:
        principal = require_capability(self._user_session, Capability.ASSIGN_TASK, operation_label="assign task")
        task = self._require_task(task_id)
        self._require_task_scope(principal, task, operation_label="assign task")
        assignee = self._validate_assignee(assignee_id, principal)
        task.assignee_id = assignee.id
        return self._save(task, action="task.assign", details={"assignee_id": assignee.id})

    def start_task(self, task_id: str) -> Task:
        return self._move(task_id, TaskStatus.IN_PROGRESS, operation_label="start task")

    def complete_task(self, task_id: str) -> Task:
        return self._move(task_id, TaskStatus.COMPLETED, operation_label="complete task")

    def cancel_task(self, task_id: str) -> Task:
        return self._move(task_id, TaskStatus.CANCELLED, operation_label="cancel task")

    def delete_task(self, task_id: str) -> None:
        principal = require_capability(self._user_session, Capability.DELETE_TASK, operation_label="delete task")
        task = self._require_task(task_id)
        self._require_task_scope(principal, task, operation_label="delete task")
        try:
            self._task_repo.delete(task.id)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(
            self,
            action="task.delete",
            entity_type="task",
            entity_id=task.id,
            details={"title": task.title},
        )
        domain_events.tasks_changed.emit(task.id)

    def _move(self, task_id: str, target: TaskStatus, *, operation_label: str) -> Task:
        principal = require_capability(
            self._user_session,
            Capability.UPDATE_TASK_STATUS,
            operation_label=operation_label,
        )
        task = self._require_task(task_id)
        self._require_task_scope(principal, task, operation_label=operation_label)
        self._check_transition(task.status, target)

        now = datetime.now(timezone.utc)
        task.status = target
        if target == TaskStatus.IN_PROGRESS:
            task.started_at = now
        elif target == TaskStatus.COMPLETED:
            task.completed_at = now
        return self._save(task, action="task.set_status", details={"status": target.value})

    def _save(self, task: Task, *, action: str, details: dict) -> Task:
        try:
            self._task_repo.update(task)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        record_audit(self, action=action, entity_type="task", entity_id=task.id, details=details)
        domain_events.tasks_changed.emit(task.id)
        return task

    def _require_task(self, task_id: str) -> Task:
        task = self._task_repo.get(task_id)
        if task is None:
            raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")
        return task
