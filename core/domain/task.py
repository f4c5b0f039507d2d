from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import ProjectStatus, TaskStatus
from core.domain.identifiers import generate_id


@dataclass
class Project:
    id: str
    name: str
    description: str = ""
    company_name: Optional[str] = None
    manager_id: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime | None = None
    version: int = 1

    @staticmethod
    def create(name: str, description: str = "", **extra) -> "Project":
        return Project(
            id=generate_id(),
            name=name,
            description=description,
            created_at=datetime.now(timezone.utc),
            **extra,
        )


@dataclass
class Task:
    id: str
    project_id: Optional[str]
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    assignee_id: Optional[str] = None
    created_by: Optional[str] = None
    priority: int = 0
    due_date: Optional[date] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime | None = None
    version: int = 1

    @staticmethod
    def create(title: str, project_id: str | None = None, description: str = "", **extra) -> "Task":
        return Task(
            id=generate_id(),
            project_id=project_id,
            title=title,
            description=description,
            created_at=datetime.now(timezone.utc),
            **extra,
        )


__all__ = ["Project", "Task"]
