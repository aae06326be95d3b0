"""
Database Models for URL Shortener Service

This module defines the SQLModel database schemas for:
- User: account owning short URLs
- ShortURL: mapping between short codes and original URLs
- ClickEvent: one row per successful redirect, for analytics

Design Decisions:
- clicks denormalized in ShortURL for quick totals without a COUNT
- Separate analytics table for per-day aggregation
- Cascading foreign keys: deleting a user removes its URLs, deleting a URL
  removes its click events
- Timestamps are stored as naive UTC (SQLite has no timezone support)
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Column, Field, SQLModel


def utcnow() -> datetime:
    """Current UTC time without tzinfo, the form timestamps are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(SQLModel, table=True):
    """
    Registered account.

    username and email are unique; only the bcrypt hash of the password is
    stored.
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(
        sa_column=Column(String(20), nullable=False, unique=True, index=True)
    )
    email: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True)
    )
    password_hash: str = Field(sa_column=Column(String(255), nullable=False))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class ShortURL(SQLModel, table=True):
    """
    Main table storing URL shortening mappings.

    Fields:
    - short_code: unique and immutable, 3-20 characters
    - user_id: owner, NULL for anonymous links
    - clicks: incremented once per successful redirect
    - expires_at: NULL means the link never expires
    """
    __tablename__ = "urls"

    id: Optional[int] = Field(default=None, primary_key=True)
    short_code: str = Field(
        sa_column=Column(String(20), nullable=False, unique=True, index=True)
    )
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    user_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        )
    )
    clicks: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0, server_default="0")
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at < (now or utcnow())


class ClickEvent(SQLModel, table=True):
    """
    Click log table for analytics.

    Rows are append-only and disappear together with their ShortURL.
    """
    __tablename__ = "analytics"

    id: Optional[int] = Field(default=None, primary_key=True)
    url_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("urls.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    user_agent: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    referer: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    ip_address: str = Field(sa_column=Column(String(45), nullable=False))  # IPv6 max length
    clicked_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
