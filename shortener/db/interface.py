"""
Database Abstraction Interface

A backend is described by a handful of hooks (pool class, driver arguments,
per-connection setup). DatabaseAdapter.create_engine() assembles the async
engine from them, so the rest of the code only ever sees an AsyncEngine.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Base class for database adapters.

    Subclasses fill in the hooks; create_engine() is shared.
    """

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create the async engine for ``database_url``.

        Args:
            database_url: Connection string for the database
            **kwargs: Engine options overriding get_engine_kwargs()

        Returns:
            Configured AsyncEngine instance
        """
        self.prepare(database_url)

        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        pool_class = self.get_pool_class()
        if pool_class is not None:
            engine_kwargs["poolclass"] = pool_class

        engine = create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )
        event.listen(engine.sync_engine, "connect", self._on_connect)
        return engine

    def _on_connect(self, dbapi_connection, connection_record) -> None:
        self.configure_connection(dbapi_connection)

    def prepare(self, database_url: str) -> None:
        """Run once before the engine is created (e.g. create a data directory)."""

    def configure_connection(self, dbapi_connection: Any) -> None:
        """Run on every new DBAPI connection."""

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """Pool class for this database type, or None for the SQLAlchemy default."""

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Driver-level connection arguments."""

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Additional engine configuration specific to this database type."""

    @abstractmethod
    def get_dialect_name(self) -> str:
        """SQLAlchemy dialect name (e.g. 'sqlite', 'postgresql')."""
