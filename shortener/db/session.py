"""
Database Session Management

- One async engine per process, built by the adapter matching DATABASE_URL
- get_session(): request-scoped session for FastAPI dependencies
- init_db(): creates missing tables on startup (migrations/ holds the same
  schema for Alembic)
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortener.core.setting import settings
from shortener.db import models  # noqa: F401  registers tables on SQLModel.metadata
from shortener.db.sqlite_adapter import get_database_adapter

db_adapter = get_database_adapter(settings.DATABASE_URL)

engine = db_adapter.create_engine(settings.DATABASE_URL)

async_session_maker = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,  # services keep using rows after they commit
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Services commit their own writes; whatever is still pending when the
    endpoint returns is committed here, and everything is rolled back if the
    endpoint raises.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
