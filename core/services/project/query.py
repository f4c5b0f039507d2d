from __future__ import annotations

from typing import List

from core.domain.enums import Capability
from core.interfaces import ProjectRepository
from core.models import Project
from core.services.auth.authorization import require_capability


class ProjectQueryMixin:
    _project_repo: ProjectRepository

    def list_projects(self) -> List[Project]:
        principal = require_capability(self._user_session, Capability.ACCESS_PROJECTS, operation_label="list projects")
        return self._project_repo.list_all(company_name=principal.company_name)

    def get_project(self, project_id: str) -> Project:
        principal = require_capability(self._user_session, Capability.ACCESS_PROJECTS, operation_label="view project")
        project = self._require_project(project_id)
        self._require_same_company(principal, project, operation_label="view project")
        return project
