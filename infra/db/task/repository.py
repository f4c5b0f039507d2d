from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from core.interfaces import ProjectRepository, TaskRepository
from core.models import Project, Task
from infra.db.models import ProjectORM, TaskORM
from infra.db.optimistic import update_with_version_check
from infra.db.task.mapper import project_from_orm, project_to_orm, task_from_orm, task_to_orm


class SqlAlchemyProjectRepository(ProjectRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, project: Project) -> None:
        self.session.add(project_to_orm(project))

    def update(self, project: Project) -> None:
        project.version = update_with_version_check(
            self.session,
            ProjectORM,
            project.id,
            getattr(project, "version", 1),
            {
                "name": project.name,
                "description": project.description,
                "manager_id": project.manager_id,
                "status": project.status,
                "start_date": project.start_date,
                "end_date": project.end_date,
            },
            not_found_message="Project not found.",
            stale_message="Project was updated by another user.",
        )

    def delete(self, project_id: str) -> None:
        self.session.execute(delete(ProjectORM).where(ProjectORM.id == project_id))

    def get(self, project_id: str) -> Optional[Project]:
        obj = self.session.get(ProjectORM, project_id)
        return project_from_orm(obj) if obj else None

    def list_all(self, company_name: str | None = None) -> List[Project]:
        stmt = select(ProjectORM)
        if company_name is not None:
            stmt = stmt.where(ProjectORM.company_name == company_name)
        rows = self.session.execute(stmt.order_by(ProjectORM.created_at)).scalars().all()
        return [project_from_orm(row) for row in rows]


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, task: Task) -> None:
        self.session.add(task_to_orm(task))

    def update(self, task: Task) -> None:
        task.version = update_with_version_check(
            self.session,
            TaskORM,
            task.id,
            getattr(task, "version", 1),
            {
                "project_id": task.project_id,
                "title": task.title,
                "description": task.description,
                "status": task.status,
                "assignee_id": task.assignee_id,
                "priority": task.priority,
                "due_date": task.due_date,
                "started_at": task.started_at,
                "completed_at": task.completed_at,
            },
            not_found_message="Task not found.",
            stale_message="Task was updated by another user.",
        )

    def delete(self, task_id: str) -> None:
        self.session.execute(delete(TaskORM).where(TaskORM.id == task_id))

    def get(self, task_id: str) -> Optional[Task]:
        obj = self.session.get(TaskORM, task_id)
        return task_from_orm(obj) if obj else None

    def list_all(self, *, assignee_id: str | None = None, project_id: str | None = None) -> List[Task]:
        stmt = select(TaskORM)
        if assignee_id is not None:
            stmt = stmt.where(TaskORM.assignee_id == assignee_id)
        if project_id is not None:
            stmt = stmt.where(TaskORM.project_id == project_id)
        stmt = stmt.order_by(TaskORM.priority.desc(), TaskORM.created_at)
        rows = self.session.execute(stmt).scalars().all()
        return [task_from_orm(row) for row in rows]

    def delete_by_project(self, project_id: str) -> None:
        self.session.execute(delete(TaskORM).where(TaskORM.project_id == project_id))


__all__ = ["SqlAlchemyProjectRepository", "SqlAlchemyTaskRepository"]
