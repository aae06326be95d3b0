"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter: SQLite-specific implementation (default)
- Session management: Database session creation and schema bootstrap

To add a new database backend:
1. Create a new adapter class inheriting from DatabaseAdapter
2. Implement all abstract methods
3. Return it from get_database_adapter() in sqlite_adapter.py for its backend name
"""

from shortener.db.interface import DatabaseAdapter
from shortener.db.session import async_session_maker, engine, get_session, init_db

__all__ = [
    "DatabaseAdapter",
    "get_session",
    "async_session_maker",
    "engine",
    "init_db",
]
