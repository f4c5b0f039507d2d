from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    PLATFORM_ADMIN = "platform_admin"
    PROJECT_MANAGER = "project_manager"
    TASK_EXECUTOR = "task_executor"


class Capability(str, Enum):
    MANAGE_COMPANIES = "company.manage"
    MANAGE_USERS = "user.manage"
    ACCESS_TASKS = "task.access"
    ACCESS_PROJECTS = "project.access"
    VIEW_ANALYTICS = "analytics.view"
    CREATE_TASK = "task.create"
    EDIT_TASK = "task.edit"
    DELETE_TASK = "task.delete"
    ASSIGN_TASK = "task.assign"
    UPDATE_TASK_STATUS = "task.update_status"
    CREATE_PROJECT = "project.create"
    EDIT_PROJECT = "project.edit"
    DELETE_PROJECT = "project.delete"
    CREATE_USER = "user.create"
    EDIT_USER = "user.edit"
    DELETE_USER = "user.delete"
    VIEW_TEAM_MEMBERS = "team.view"
    EXPORT_DATA = "data.export"
    VIEW_BILLING = "billing.view"
    ADJUST_BILLING = "billing.adjust"
    MANAGE_PRICING = "pricing.manage"


class Platform(str, Enum):
    XIAOHONGSHU = "xiaohongshu"
    DOUYIN = "douyin"


class OperationType(str, Enum):
    FOLLOW = "follow"
    LIKE = "like"
    FAVORITE = "favorite"
    COMMENT = "comment"


class BillingType(str, Enum):
    EMPLOYEE_COUNT = "employee_count"
    FOLLOW_COUNT = "follow_count"


class BillingStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class AdjustmentReason(str, Enum):
    MANUAL_ADJUSTMENT = "manual_adjustment"
    ERROR_CORRECTION = "error_correction"
    REFUND = "refund"
    BONUS = "bonus"
    OTHER = "other"


class MissingPricePolicy(str, Enum):
    ERROR = "error"
    DEFAULT = "default"
    ZERO = "zero"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


__all__ = [
    "Role",
    "Capability",
    "Platform",
    "OperationType",
    "BillingType",
    "BillingStatus",
    "AdjustmentReason",
    "MissingPricePolicy",
    "TaskStatus",
    "ProjectStatus",
]
