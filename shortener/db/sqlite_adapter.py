"""
SQLite Database Adapter

Key characteristics:
- File-based (single .db file, parent directory created on demand)
- Single writer at a time (file locking), which serializes click counter
  updates and unique-constraint checks
- Foreign keys are off by default in SQLite; they are switched on for every
  connection so ON DELETE CASCADE works
"""

from pathlib import Path
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.pool import NullPool

from shortener.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite (aiosqlite) backend.

    - NullPool: a fresh connection per session, nothing to pool for a file
    - check_same_thread=False: aiosqlite runs the connection in a worker thread
    - PRAGMA foreign_keys=ON on every connection
    """

    def prepare(self, database_url: str) -> None:
        database = make_url(database_url).database
        if database and database != ":memory:":
            Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)

    def configure_connection(self, dbapi_connection: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {"check_same_thread": False}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {"echo": False}

    def get_dialect_name(self) -> str:
        return "sqlite"


ADAPTERS: tuple[type[DatabaseAdapter], ...] = (SQLiteAdapter,)


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Pick the adapter whose dialect matches the connection string.

    Raises:
        ValueError: no adapter for the URL's backend
    """
    backend = make_url(database_url).get_backend_name()
    for adapter_class in ADAPTERS:
        adapter = adapter_class()
        if adapter.get_dialect_name() == backend:
            return adapter
    raise ValueError(f"Unsupported database backend: {backend}")
