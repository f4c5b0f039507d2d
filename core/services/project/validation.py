from __future__ import annotations

from datetime import date

from core.exceptions import ValidationError


class ProjectValidationMixin:
    def _validate_project_name(self, name: str) -> str:
        value = (name or "").strip()
        if not value:
            raise ValidationError("Project name cannot be empty.", code="PROJECT_NAME_EMPTY")
        return value

    def _validate_project_dates(self, start_date: date | None, end_date: date | None) -> None:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("Project end date cannot be before start date.", code="PROJECT_INVALID_DATE")
