from __future__ import annotations

import logging

from sqlalchemy import create_engine, inspect

from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.path import default_db_path
from infra.tracing import bind_trace_id, current_trace_id


def test_trace_id_is_bound_only_inside_block():
    assert current_trace_id() is None
    with bind_trace_id("  trc-fixed  ") as trace_id:
        assert trace_id == "trc-fixed"
        assert current_trace_id() == "trc-fixed"
        with bind_trace_id() as nested:
            assert nested.startswith("trc-")
            assert current_trace_id() == nested
        assert current_trace_id() == "trc-fixed"
    assert current_trace_id() is None


def test_log_lines_carry_trace_id(tmp_path):
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level
    try:
        log_file = setup_logging(log_dir=tmp_path)
        with bind_trace_id("trc-log-check"):
            logging.getLogger("taskfleet.test").info("charged seat")
        for handler in root.handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)

    assert log_file.name == "taskfleet.log"
    assert "trace=trc-log-check taskfleet.test - charged seat" in text
    assert "trace=- " in text


def test_db_path_honours_environment(monkeypatch, tmp_path):
    target = tmp_path / "custom.db"
    monkeypatch.setenv("TF_DB_PATH", str(target))

    assert default_db_path() == target


def test_migrations_create_schema(tmp_path):
    db_url = f"sqlite:///{(tmp_path / 'taskfleet.db').as_posix()}"

    run_migrations(db_url)

    engine = create_engine(db_url, future=True)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {
        "users",
        "companies",
        "company_pricing_plans",
        "company_operation_pricing",
        "billing_records",
        "projects",
        "tasks",
        "audit_logs",
    } <= tables
