"""
Visit Count Service

This service handles incrementing click counts for short URLs.

Design Decisions:
- Uses database-level atomic increment (UPDATE ... SET clicks = clicks + 1)
  instead of read-modify-write, so concurrent redirects never lose a count
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.db.models import ShortURL


class VisitCountService:
    """Service for managing click counts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def increment_clicks(self, url_id: int) -> None:
        """
        Increment the click count for a short URL atomically.

        Note:
        - Commit is handled by the caller
        - Does nothing if the URL no longer exists
        """
        statement = (
            update(ShortURL)
            .where(ShortURL.id == url_id)
            .values(clicks=ShortURL.clicks + 1)
        )
        await self.session.execute(statement)

    async def get_clicks(self, url_id: int) -> int:
        """Current click count (0 if not found)."""
        statement = select(ShortURL.clicks).where(ShortURL.id == url_id)
        result = await self.session.execute(statement)
        count = result.scalar_one_or_none()
        return count if count is not None else 0
