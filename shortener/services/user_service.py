"""
User Service

Query surface for the users table. All lookups are parameterized SQLAlchemy
expressions; uniqueness is ultimately enforced by the table's constraints.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.exceptions import ConflictError
from shortener.db.models import User


class UserService:
    """Create and look up user accounts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_username(self, username: str) -> Optional[User]:
        statement = select(User).where(User.username == username)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> Optional[User]:
        statement = select(User).where(User.id == user_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def create_user(self, username: str, email: str, password_hash: str) -> User:
        """
        Insert a new user.

        Raises:
            ConflictError: username or email was taken concurrently
        """
        user = User(username=username, email=email, password_hash=password_hash)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("Username or email already exists")

        await self.session.refresh(user)
        return user
