# main.py
import logging

from infra.db.base import build_engine, build_session_factory, default_db_url
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.services import ServiceGraph, build_service_graph
from infra.tracing import bind_trace_id

logger = logging.getLogger(__name__)


def build_services(db_url: str | None = None) -> ServiceGraph:
    db_url = db_url or default_db_url()
    run_migrations(db_url=db_url)
    session_factory = build_session_factory(build_engine(db_url))
    return build_service_graph(session_factory())


def main() -> None:
    setup_logging()
    with bind_trace_id() as trace_id:
        services = build_services()
        logger.info("TaskFleet core ready (trace %s, session %s)", trace_id, services.session.bind.url)


if __name__ == "__main__":
    main()
