"""
Statistics Service

Per-URL analytics for owners: total clicks plus a day-by-day series built
from the click log.

Design Decisions:
- totalClicks comes from the denormalized counter on ShortURL
- The daily series is a GROUP BY over the calendar date of clicked_at,
  newest day first, limited to the most recent 30 buckets
- Existence is checked before ownership, so a non-owner learns that the code
  exists (403) while an unknown code gives 404
"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.exceptions import ForbiddenError, NotFoundError
from shortener.db.models import ClickEvent
from shortener.services.url_service import URLShorteningService
from shortener.services.visit_count_service import VisitCountService

ANALYTICS_DAYS = 30


class StatsService:
    """Service for retrieving URL statistics."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.url_service = URLShorteningService(session)
        self.visit_count_service = VisitCountService(session)

    async def clicks_by_day(self, url_id: int, days: int = ANALYTICS_DAYS) -> list[dict[str, Any]]:
        """
        Click counts grouped by calendar day.

        Returns:
            ``[{"date": "YYYY-MM-DD", "clicks": n}, ...]`` newest first
        """
        day = func.date(ClickEvent.clicked_at).label("date")
        statement = (
            select(day, func.count(ClickEvent.id).label("clicks"))
            .where(ClickEvent.url_id == url_id)
            .group_by(day)
            .order_by(day.desc())
            .limit(days)
        )
        result = await self.session.execute(statement)
        return [{"date": str(row.date), "clicks": row.clicks} for row in result.all()]

    async def get_analytics(self, short_code: str, user_id: int) -> dict[str, Any]:
        """
        Analytics for a URL owned by ``user_id``.

        Raises:
            NotFoundError: unknown short code
            ForbiddenError: the URL belongs to someone else (or nobody)
        """
        short_url = await self.url_service.get_by_code(short_code)
        if not short_url:
            raise NotFoundError("URL not found")

        if short_url.user_id != user_id:
            raise ForbiddenError("Unauthorized")

        return {
            "short_code": short_url.short_code,
            "total_clicks": await self.visit_count_service.get_clicks(short_url.id),
            "clicks_by_day": await self.clicks_by_day(short_url.id),
        }
