from infra.db.task.mapper import project_from_orm, project_to_orm, task_from_orm, task_to_orm
from infra.db.task.repository import SqlAlchemyProjectRepository, SqlAlchemyTaskRepository

__all__ = [
    "project_to_orm",
    "project_from_orm",
    "task_to_orm",
    "task_from_orm",
    "SqlAlchemyProjectRepository",
    "SqlAlchemyTaskRepository",
]
