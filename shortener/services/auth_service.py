"""
Authentication Service

Business rules for registration, login and profile lookup. Input arrives as
the raw JSON object of the request; validation happens here so the first
failing rule decides the error message.
"""

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from shortener.core import validators
from shortener.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from shortener.core.security import (
    TokenPayload,
    generate_token,
    hash_password,
    verify_password,
)
from shortener.core.setting import Settings, settings
from shortener.db.models import User
from shortener.services.user_service import UserService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Account registration and credential checks."""

    def __init__(self, session: AsyncSession, app_settings: Optional[Settings] = None):
        self.session = session
        self.settings = app_settings or settings
        self.users = UserService(session)

    async def register(self, body: Optional[dict[str, Any]]) -> tuple[User, str]:
        """
        Register a new account and issue a token for it.

        Returns:
            The stored user and a bearer token

        Raises:
            ValidationError: missing or malformed field
            ConflictError: username or email already taken
        """
        body = body or {}
        username = body.get("username")
        email = body.get("email")
        password = body.get("password")

        if not username or not email or not password:
            raise ValidationError("All fields are required")

        if not validators.is_valid_username(username):
            raise ValidationError(
                "Username must be 3-20 characters, alphanumeric and underscores only"
            )

        if not validators.is_valid_email(email):
            raise ValidationError("Invalid email format")

        if not validators.is_valid_password(password):
            raise ValidationError(
                "Password must be at least 8 characters with uppercase, lowercase, and number"
            )

        if not validators.fits_bcrypt_limit(password):
            raise ValidationError(
                f"Password must be at most {validators.MAX_PASSWORD_BYTES} bytes"
            )

        if await self.users.find_by_username(username):
            raise ConflictError("Username already exists")

        if await self.users.find_by_email(email):
            raise ConflictError("Email already exists")

        password_hash = await run_in_threadpool(hash_password, password, self.settings.BCRYPT_ROUNDS)
        user = await self.users.create_user(username, email, password_hash)
        logger.info(f"Registered user {user.id} ({user.username})")

        return user, self._issue_token(user)

    async def login(self, body: Optional[dict[str, Any]]) -> tuple[User, str]:
        """
        Check credentials and issue a token.

        Unknown usernames and wrong passwords produce the same error so the
        response does not reveal which accounts exist.
        """
        body = body or {}
        username = body.get("username")
        password = body.get("password")

        if not username or not password:
            raise ValidationError("Username and password are required")

        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthError(INVALID_CREDENTIALS)

        user = await self.users.find_by_username(username)
        if not user:
            raise AuthError(INVALID_CREDENTIALS)

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)

        return user, self._issue_token(user)

    async def get_profile(self, user_id: int) -> User:
        user = await self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _issue_token(self, user: User) -> str:
        return generate_token(
            TokenPayload(user_id=user.id, username=user.username),
            app_settings=self.settings,
        )
