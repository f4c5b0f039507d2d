from __future__ import annotations

from core.models import Project, Task
from infra.db.mappers import as_utc
from infra.db.models import ProjectORM, TaskORM


def project_to_orm(project: Project) -> ProjectORM:
    return ProjectORM(
        id=project.id,
        name=project.name,
        description=project.description,
        company_name=project.company_name,
        manager_id=project.manager_id,
        status=project.status,
        start_date=project.start_date,
        end_date=project.end_date,
        created_at=project.created_at,
        version=getattr(project, "version", 1),
    )


def project_from_orm(obj: ProjectORM) -> Project:
    return Project(
        id=obj.id,
        name=obj.name,
        description=obj.description or "",
        company_name=obj.company_name,
        manager_id=obj.manager_id,
        status=obj.status,
        start_date=obj.start_date,
        end_date=obj.end_date,
        created_at=as_utc(obj.created_at),
        version=getattr(obj, "version", 1),
    )


def task_to_orm(task: Task) -> TaskORM:
    return TaskORM(
        id=task.id,
        project_id=task.project_id,
        title=task.title,
        description=task.description,
        status=task.status,
        assignee_id=task.assignee_id,
        created_by=task.created_by,
        priority=task.priority,
        due_date=task.due_date,
        started_at=task.started_at,
        completed_at=task.completed_at,
        created_at=task.created_at,
        version=getattr(task, "version", 1),
    )


def task_from_orm(obj: TaskORM) -> Task:
    return Task(
        id=obj.id,
        project_id=obj.project_id,
        title=obj.title,
        description=obj.description or "",
        status=obj.status,
        assignee_id=obj.assignee_id,
        created_by=obj.created_by,
        priority=obj.priority or 0,
        due_date=obj.due_date,
        started_at=as_utc(obj.started_at),
        completed_at=as_utc(obj.completed_at),
        created_at=as_utc(obj.created_at),
        version=getattr(obj, "version", 1),
    )


__all__ = ["project_to_orm", "project_from_orm", "task_to_orm", "task_from_orm"]
