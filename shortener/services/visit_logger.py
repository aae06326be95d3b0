"""
Visit Logging Service

This service records one ClickEvent per successful redirect. It only adds
the row to the session; the caller commits together with the click counter
update so both land in one transaction.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.db.models import ClickEvent


class VisitLoggerService:
    """Service for logging URL visits."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def log_visit(
        self,
        url_id: int,
        ip_address: str,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None,
    ) -> ClickEvent:
        """
        Log a visit to a short URL.

        Args:
            url_id: id of the ShortURL that was accessed
            ip_address: IP address of the visitor ("unknown" if not known)
            user_agent: User-Agent header (optional)
            referer: Referer header (optional)
        """
        click = ClickEvent(
            url_id=url_id,
            ip_address=ip_address,
            user_agent=user_agent,
            referer=referer,
        )
        self.session.add(click)
        await self.session.flush()
        return click
