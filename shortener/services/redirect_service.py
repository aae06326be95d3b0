"""
Redirect Service

This service handles URL redirection logic: resolve the code, refuse
expired links, record the click, hand back the destination.

Design Decisions:
- 404 for unknown codes, 410 for codes that existed but have lapsed
- The click event and the counter increment are committed together before
  the redirect is issued
- Click recording is analytics only: if the store fails there, the failure
  is logged and rolled back and the visitor is still redirected
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.exceptions import GoneError, NotFoundError
from shortener.db.models import ShortURL
from shortener.services.url_service import URLShorteningService
from shortener.services.visit_count_service import VisitCountService
from shortener.services.visit_logger import VisitLoggerService

logger = logging.getLogger(__name__)


class RedirectService:
    """Service for handling URL redirections."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.url_service = URLShorteningService(session)
        self.visit_logger = VisitLoggerService(session)
        self.visit_count_service = VisitCountService(session)

    async def resolve(self, short_code: str) -> ShortURL:
        """
        Look up a redirectable URL.

        Raises:
            NotFoundError: unknown code
            GoneError: code has expired
        """
        short_url = await self.url_service.get_by_code(short_code)
        if not short_url:
            raise NotFoundError("URL not found")

        if short_url.is_expired():
            raise GoneError("URL has expired")

        return short_url

    async def record_click(
        self,
        short_url: ShortURL,
        ip_address: str,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None,
    ) -> None:
        short_code = short_url.short_code
        try:
            await self.visit_logger.log_visit(
                url_id=short_url.id,
                ip_address=ip_address,
                user_agent=user_agent,
                referer=referer,
            )
            await self.visit_count_service.increment_clicks(short_url.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"Failed to record click for {short_code}: {str(e)}",
                exc_info=True
            )

    async def get_redirect_url(
        self,
        short_code: str,
        ip_address: str,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None,
    ) -> str:
        """Resolve ``short_code``, record the visit, return the original URL."""
        short_url = await self.resolve(short_code)
        # read before recording: a rollback there expires the instance
        destination = short_url.original_url
        await self.record_click(short_url, ip_address, user_agent, referer)
        return destination
