"""
URL Shortening Service

This service handles the core business logic for URL shortening:
- Validating destination URLs and caller-chosen codes
- Resolving a short code (custom, or generated with collision retries)
- Computing optional expiration
- Listing and deleting a user's URLs

Design Decisions:
- Custom codes are never altered or retried: taken means 409
- Generated codes are checked against the store up to a fixed number of times
- The unique constraint on short_code is the final guard; an IntegrityError
  on insert is reported as a conflict
- Deletion is a single conditional DELETE on (code, owner), so a caller can
  never remove someone else's URL
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core import validators
from shortener.core.exceptions import ConflictError, NotFoundError, ValidationError
from shortener.core.setting import Settings, settings
from shortener.db.models import ShortURL, utcnow
from shortener.services.short_code import find_unused_code

logger = logging.getLogger(__name__)

# single-segment paths served by other routes; a link with one of these codes
# could never be reached through the redirect route
RESERVED_CODES = frozenset({"api", "health", "docs", "redoc"})


def build_short_url(short_code: str, base_url: Optional[str] = None) -> str:
    """Full public URL for a short code."""
    return f"{(base_url or settings.BASE_URL).rstrip('/')}/{short_code}"


def compute_expiration(expires_in_days: Any, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Expiration timestamp for a link, or None if it should not expire.

    Raises:
        ValidationError: expires_in_days is present but not a number
    """
    if expires_in_days is None:
        return None

    if isinstance(expires_in_days, bool) or not isinstance(expires_in_days, (int, float)):
        raise ValidationError("expiresInDays must be a number")

    if expires_in_days <= 0:
        return None

    try:
        return (now or utcnow()) + timedelta(days=expires_in_days)
    except (OverflowError, ValueError):
        raise ValidationError("expiresInDays is out of range")


class URLShorteningService:
    """
    Core business logic for URL shortening.

    Separated from API layer for testability and maintainability.
    """

    def __init__(self, session: AsyncSession, app_settings: Optional[Settings] = None):
        """
        Initialize the URL shortening service.

        Args:
            session: Database session
            app_settings: code length and retry budget, defaults to the
                environment-loaded settings
        """
        self.session = session
        self.settings = app_settings or settings

    async def get_by_code(self, short_code: str) -> Optional[ShortURL]:
        statement = select(ShortURL).where(ShortURL.short_code == short_code)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def code_exists(self, short_code: str) -> bool:
        statement = select(ShortURL.id).where(ShortURL.short_code == short_code)
        result = await self.session.execute(statement)
        return result.first() is not None

    async def is_code_taken(self, short_code: str) -> bool:
        return short_code in RESERVED_CODES or await self.code_exists(short_code)

    async def resolve_short_code(self, custom_code: Any) -> str:
        """
        Pick the short code for a new URL.

        Raises:
            ValidationError: custom code has the wrong shape
            ConflictError: custom code already taken
            ShortCodeExhaustedError: no free generated code within the budget
        """
        if custom_code:
            if not validators.is_valid_custom_code(custom_code):
                raise ValidationError(
                    "Custom code must be 3-20 characters, alphanumeric, hyphens, and underscores only"
                )
            if custom_code in RESERVED_CODES:
                raise ConflictError("Custom code is reserved")
            if await self.code_exists(custom_code):
                raise ConflictError("Custom code already exists")
            return custom_code

        return await find_unused_code(
            self.is_code_taken,
            length=self.settings.SHORT_CODE_LENGTH,
            max_attempts=self.settings.SHORT_CODE_MAX_ATTEMPTS,
        )

    async def create_short_url(
        self,
        body: Optional[dict[str, Any]],
        owner_id: Optional[int] = None,
    ) -> ShortURL:
        """
        Create a new short URL.

        Args:
            body: request object with url, optional customCode and expiresInDays
            owner_id: authenticated caller, None for anonymous links

        Returns:
            The stored ShortURL

        Raises:
            ValidationError: missing/invalid URL, custom code or expiry
            ConflictError: short code taken
            ShortCodeExhaustedError: code generation ran out of attempts
        """
        body = body or {}
        original_url = body.get("url")

        if not original_url:
            raise ValidationError("URL is required")

        if not validators.is_valid_url(original_url):
            raise ValidationError("Invalid URL format")

        short_code = await self.resolve_short_code(body.get("customCode"))
        expires_at = compute_expiration(body.get("expiresInDays"))

        short_url = ShortURL(
            short_code=short_code,
            original_url=original_url,
            user_id=owner_id,
            expires_at=expires_at,
            clicks=0,
        )
        self.session.add(short_url)

        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("Short code already exists")

        await self.session.refresh(short_url)
        logger.info(
            f"Created short code {short_url.short_code} "
            f"(owner={owner_id if owner_id is not None else 'anonymous'})"
        )
        return short_url

    async def list_user_urls(self, user_id: int) -> list[ShortURL]:
        """Caller's URLs, newest first."""
        statement = (
            select(ShortURL)
            .where(ShortURL.user_id == user_id)
            .order_by(ShortURL.created_at.desc(), ShortURL.id.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete_user_url(self, short_code: str, user_id: int) -> None:
        """
        Delete a URL owned by ``user_id``.

        Raises:
            NotFoundError: no such code, or the caller does not own it
        """
        statement = delete(ShortURL).where(
            ShortURL.short_code == short_code,
            ShortURL.user_id == user_id,
        )
        result = await self.session.execute(statement)
        await self.session.commit()

        if result.rowcount == 0:
            raise NotFoundError("URL not found or unauthorized")

        logger.info(f"User {user_id} deleted short code {short_code}")
