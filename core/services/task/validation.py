from __future__ import annotations

from datetime import date

from core.domain.enums import Role, TaskStatus
from core.domain.identifiers import same_user
from core.exceptions import BusinessRuleError, NotFoundError, UnauthorizedError, ValidationError
from core.services.auth.session import UserSessionPrincipal

# Allowed status moves; anything else is rejected.
TASK_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.CANCELLED}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.CANCELLED: frozenset(),
}


class TaskValidationMixin:
    def _validate_task_title(self, title: str) -> str:
        value = (title or "").strip()
        if not value:
            raise ValidationError("Task title cannot be empty.", code="TASK_TITLE_EMPTY")
        return value

    def _validate_priority(self, priority: int) -> int:
        if isinstance(priority, bool) or not isinstance(priority, int) or priority < 0:
            raise ValidationError("Task priority must be a non-negative integer.", code="TASK_INVALID_PRIORITY")
        return priority

    def _validate_due_date(self, project_id: str | None, due_date: date | None) -> None:
        if project_id is None or due_date is None:
            return
        project = self._project_repo.get(project_id)
        if project is None:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        if project.start_date and due_date < project.start_date:
            raise ValidationError(
                f"Task due date ({due_date}) can not be before project start ({project.start_date})",
                code="TASK_INVALID_DATE",
            )

    def _validate_assignee(self, assignee_id: str, principal: UserSessionPrincipal):
        assignee = self._user_repo.get(assignee_id)
        if assignee is None:
            raise NotFoundError("Assignee not found.", code="USER_NOT_FOUND")
        if assignee.role != Role.TASK_EXECUTOR:
            raise ValidationError("Tasks can only be assigned to task executors.", code="INVALID_ASSIGNEE")
        if not same_user(assignee.parent_id, principal.user_id):
            raise UnauthorizedError(
                "Permission denied for assign task. Assignee is not on your team.",
                code="ASSIGNEE_NOT_IN_TEAM",
            )
        if not assignee.is_active:
            raise BusinessRuleError("Assignee account is inactive.", code="ASSIGNEE_INACTIVE")
        return assignee

    def _require_company_project(self, principal: UserSessionPrincipal, project_id: str, *, operation_label: str):
        project = self._project_repo.get(project_id)
        if project is None:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        if project.company_name and project.company_name != principal.company_name:
            raise UnauthorizedError(f"Permission denied for {operation_label}. Project belongs to another company.")
        return project

    @staticmethod
    def _check_transition(current: TaskStatus, target: TaskStatus) -> None:
        if target not in TASK_TRANSITIONS[current]:
            raise BusinessRuleError(
                f"Task cannot move from {current.value} to {target.value}.",
                code="INVALID_TASK_TRANSITION",
            )


__all__ = ["TASK_TRANSITIONS", "TaskValidationMixin"]
