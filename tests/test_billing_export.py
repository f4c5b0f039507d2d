from __future__ import annotations

import pytest
from openpyxl import load_workbook

from core.domain.enums import Role
from core.exceptions import UnauthorizedError
from core.services.billing.export import RECORD_HEADERS


def test_manager_exports_own_records(services, login, manager, tmp_path):
    login(manager)
    services["user_service"].create_user("exec1", Role.TASK_EXECUTOR)
    services["user_service"].create_user("exec2", Role.TASK_EXECUTOR)

    path = services["billing_export_service"].export_billing_records(tmp_path / "out" / "billing.xlsx")

    assert path.exists()
    wb = load_workbook(path)
    assert wb.sheetnames == ["Overview", "Records"]

    overview = wb["Overview"]
    assert overview["B3"].value == 2
    assert float(overview["B4"].value) == 600.0

    records = wb["Records"]
    header = [cell.value for cell in records[1]]
    assert header == RECORD_HEADERS
    rows = list(records.iter_rows(min_row=2, values_only=True))
    assert len(rows) == 2
    assert {row[1] for row in rows} == {manager.id}
    assert {row[2] for row in rows} == {"employee_count"}
    assert {row[9] for row in rows} == {"paid"}


def test_admin_export_can_filter_by_user(services, login, admin, manager, tmp_path):
    login(manager)
    services["user_service"].create_user("exec1", Role.TASK_EXECUTOR)
    login(admin)

    path = services["billing_export_service"].export_billing_records(tmp_path / "admin.xlsx", user_id=admin.id)

    wb = load_workbook(path)
    assert wb["Overview"]["B3"].value == 0
    assert wb["Overview"]["B5"].value == admin.id
    assert wb["Records"].max_row == 1


def test_executor_cannot_export(services, login, manager, tmp_path):
    login(manager)
    executor = services["user_service"].create_user("exec1", Role.TASK_EXECUTOR)
    login(executor)

    with pytest.raises(UnauthorizedError):
        services["billing_export_service"].export_billing_records(tmp_path / "nope.xlsx")
