"""
Alembic Environment Configuration

This file configures Alembic for the async SQLModel/SQLAlchemy setup.
It handles:
- Database connection from settings
- Model imports for autogenerate
- Sync engine creation for migrations (Alembic uses sync drivers)
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, event, pool
from sqlalchemy.engine import Connection, make_url
from sqlmodel import SQLModel

from shortener.core.setting import settings
from shortener.db import models  # noqa: F401  registers the tables on SQLModel.metadata
from shortener.db.sqlite_adapter import get_database_adapter

config = context.config

# Alembic runs on the sync sqlite driver; the app uses aiosqlite
database_url = make_url(settings.DATABASE_URL)
if database_url.drivername == "sqlite+aiosqlite":
    database_url = database_url.set(drivername="sqlite")

config.set_main_option("sqlalchemy.url", database_url.render_as_string(hide_password=False))

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Emits SQL to the script output instead of touching a database.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """Run migrations with a connection."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = create_engine(
        config.get_main_option("sqlalchemy.url"),
        poolclass=pool.NullPool,
    )

    adapter = get_database_adapter(settings.DATABASE_URL)
    event.listen(connectable, "connect", lambda connection, _: adapter.configure_connection(connection))

    with connectable.connect() as connection:
        do_run_migrations(connection)

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
