from __future__ import annotations

from core.domain.enums import Capability, Role


CAPABILITY_DESCRIPTIONS: dict[Capability, str] = {
    Capability.MANAGE_COMPANIES: "Manage companies",
    Capability.MANAGE_USERS: "Manage users",
    Capability.ACCESS_TASKS: "Open the task workspace",
    Capability.ACCESS_PROJECTS: "Open the project workspace",
    Capability.VIEW_ANALYTICS: "View analytics",
    Capability.CREATE_TASK: "Create tasks",
    Capability.EDIT_TASK: "Edit tasks",
    Capability.DELETE_TASK: "Delete tasks",
    Capability.ASSIGN_TASK: "Assign tasks",
    Capability.UPDATE_TASK_STATUS: "Start and complete tasks",
    Capability.CREATE_PROJECT: "Create projects",
    Capability.EDIT_PROJECT: "Edit projects",
    Capability.DELETE_PROJECT: "Delete projects",
    Capability.CREATE_USER: "Create user accounts",
    Capability.EDIT_USER: "Edit user accounts",
    Capability.DELETE_USER: "Delete user accounts",
    Capability.VIEW_TEAM_MEMBERS: "View team members",
    Capability.EXPORT_DATA: "Export data",
    Capability.VIEW_BILLING: "View billing",
    Capability.ADJUST_BILLING: "Adjust billing",
    Capability.MANAGE_PRICING: "Manage company pricing",
}


# Platform admins run the platform; they do not work tasks or projects.
ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.PLATFORM_ADMIN: frozenset(
        {
            Capability.MANAGE_COMPANIES,
            Capability.MANAGE_USERS,
            Capability.VIEW_ANALYTICS,
            Capability.CREATE_USER,
            Capability.EDIT_USER,
            Capability.DELETE_USER,
            Capability.EXPORT_DATA,
            Capability.VIEW_BILLING,
            Capability.ADJUST_BILLING,
            Capability.MANAGE_PRICING,
        }
    ),
    Role.PROJECT_MANAGER: frozenset(
        {
            Capability.MANAGE_USERS,
            Capability.ACCESS_TASKS,
            Capability.ACCESS_PROJECTS,
            Capability.VIEW_ANALYTICS,
            Capability.CREATE_TASK,
            Capability.EDIT_TASK,
            Capability.DELETE_TASK,
            Capability.ASSIGN_TASK,
            Capability.UPDATE_TASK_STATUS,
            Capability.CREATE_PROJECT,
            Capability.EDIT_PROJECT,
            Capability.DELETE_PROJECT,
            Capability.CREATE_USER,
            Capability.EDIT_USER,
            Capability.DELETE_USER,
            Capability.VIEW_TEAM_MEMBERS,
            Capability.EXPORT_DATA,
            Capability.VIEW_BILLING,
        }
    ),
    Role.TASK_EXECUTOR: frozenset(
        {
            Capability.ACCESS_TASKS,
            Capability.ACCESS_PROJECTS,
            Capability.CREATE_TASK,
            Capability.EDIT_TASK,
            Capability.UPDATE_TASK_STATUS,
            Capability.VIEW_TEAM_MEMBERS,
        }
    ),
}

# Grants that hold only when the requesting user owns the resource.
OWNERSHIP_SCOPED: dict[Role, frozenset[Capability]] = {
    Role.TASK_EXECUTOR: frozenset({Capability.EDIT_TASK}),
}


DESKTOP_FEATURES: tuple[tuple[str, Capability | None], ...] = (
    ("view_tasks", Capability.ACCESS_TASKS),
    ("update_task_status", Capability.UPDATE_TASK_STATUS),
    ("view_profile", None),
    ("work_logs", None),
    ("create_task", Capability.CREATE_TASK),
    ("assign_task", Capability.ASSIGN_TASK),
    ("view_analytics", Capability.VIEW_ANALYTICS),
    ("manage_projects", Capability.CREATE_PROJECT),
    ("manage_companies", Capability.MANAGE_COMPANIES),
    ("manage_users", Capability.MANAGE_USERS),
)


def capabilities_for(role: Role) -> frozenset[Capability]:
    return ROLE_CAPABILITIES.get(role, frozenset())


def is_ownership_scoped(role: Role, capability: Capability) -> bool:
    return capability in OWNERSHIP_SCOPED.get(role, frozenset())


def desktop_features(role: Role) -> list[str]:
    granted = capabilities_for(role)
    return [name for name, capability in DESKTOP_FEATURES if capability is None or capability in granted]


__all__ = [
    "CAPABILITY_DESCRIPTIONS",
    "ROLE_CAPABILITIES",
    "OWNERSHIP_SCOPED",
    "DESKTOP_FEATURES",
    "capabilities_for",
    "is_ownership_scoped",
    "desktop_features",
]
