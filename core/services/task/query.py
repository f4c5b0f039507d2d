from __future__ import annotations

from typing import List

from core.domain.enums import Capability, Role
from core.domain.identifiers import same_user
from core.exceptions import UnauthorizedError
from core.interfaces import ProjectRepository, TaskRepository, UserRepository
from core.models import Task
from core.services.auth.authorization import require_capability
from core.services.auth.permissions import is_task_executor
from core.services.auth.session import UserSessionPrincipal


class TaskQueryMixin:
    _task_repo: TaskRepository
    _project_repo: ProjectRepository
    _user_repo: UserRepository

    def list_tasks(self, project_id: str | None = None) -> List[Task]:
        principal = require_capability(self._user_session, Capability.ACCESS_TASKS, operation_label="list tasks")
        if is_task_executor(principal):
            return self._task_repo.list_all(assignee_id=principal.user_id, project_id=project_id)
        team = self._team_ids(principal)
        projects = self._company_project_ids(principal)
        return [
            task
            for task in self._task_repo.list_all(project_id=project_id)
            if self._in_manager_scope(principal, task, team, projects)
        ]

    def get_task(self, task_id: str) -> Task:
        principal = require_capability(self._user_session, Capability.ACCESS_TASKS, operation_label="view task")
        task = self._require_task(task_id)
        self._require_task_scope(principal, task, operation_label="view task")
        return task

    def _require_task_scope(self, principal: UserSessionPrincipal, task: Task, *, operation_label: str) -> None:
        """Executors reach their own tasks; managers reach their team's and their company's."""
        if is_task_executor(principal):
            if same_user(task.assignee_id, principal.user_id):
                return
            raise UnauthorizedError(f"Permission denied for {operation_label}. Task is not assigned to you.")
        if self._in_manager_scope(
            principal,
            task,
            self._team_ids(principal),
            self._company_project_ids(principal),
        ):
            return
        raise UnauthorizedError(f"Permission denied for {operation_label}. Task belongs to another team.")

    @staticmethod
    def _in_manager_scope(
        principal: UserSessionPrincipal,
        task: Task,
        team: set[str],
        projects: set[str],
    ) -> bool:
        return (
            same_user(task.created_by, principal.user_id)
            or task.assignee_id in team
            or task.project_id in projects
        )

    def _team_ids(self, principal: UserSessionPrincipal) -> set[str]:
        return {member.id for member in self._user_repo.list_by_parent(principal.user_id, Role.TASK_EXECUTOR)}

    def _company_project_ids(self, principal: UserSessionPrincipal) -> set[str]:
        if not principal.company_name:
            return set()
        return {project.id for project in self._project_repo.list_all(company_name=principal.company_name)}
