import os
from logging.config import fileConfig

from alembic import context
from backend_common.database import ensure_asyncpg_url, to_sync_url
from sqlalchemy import create_engine

from diary_service import models  # noqa: F401
from diary_service.database import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

DB_URL = os.getenv("DIARY_DATABASE_URL") or config.get_main_option("sqlalchemy.url")
if not DB_URL:
    raise RuntimeError("DIARY_DATABASE_URL environment variable is not set")

# Migrations run on the synchronous driver.
DB_URL = to_sync_url(ensure_asyncpg_url(DB_URL))
config.set_main_option("sqlalchemy.url", DB_URL)


def run_migrations_offline() -> None:
    context.configure(
        url=DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = create_engine(DB_URL)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
