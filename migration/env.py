from alembic import context
from sqlalchemy import create_engine, pool

from infra.db.base import Base, default_db_url
import infra.db.models  # noqa


config = context.config
target_metadata = Base.metadata

# Shared with every migration run; SQLite needs batch mode for ALTER TABLE.
CONFIGURE_OPTS = {
    "target_metadata": target_metadata,
    "render_as_batch": True,
    "compare_type": True,
}


def _db_url() -> str:
    # `alembic` invoked by hand has no sqlalchemy.url; fall back to the app DB
    return config.get_main_option("sqlalchemy.url") or default_db_url()


def run_offline() -> None:
    context.configure(
        url=_db_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **CONFIGURE_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    engine = create_engine(_db_url(), future=True, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, **CONFIGURE_OPTS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
