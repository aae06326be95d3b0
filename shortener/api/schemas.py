"""
API Request and Response Schemas

This module defines the Pydantic models for API responses.

Design Principles:
- Every JSON endpoint (except /health) answers with the Envelope
  ``{success, message, data}``; failures use ErrorResponse
- Field names are snake_case in Python and camelCase on the wire
- Timestamps are emitted as UTC ISO 8601
- UserOut has no password field, so a hash can never be serialized
"""

from datetime import datetime, timezone
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(_as_utc)]

DataT = TypeVar("DataT")


class APIModel(BaseModel):
    """Base for response bodies: camelCase aliases, readable from ORM rows."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(BaseModel, Generic[DataT]):
    """Success envelope shared by all JSON endpoints."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class ErrorResponse(BaseModel):
    """Failure envelope."""
    success: bool = False
    error: str


class UserOut(APIModel):
    id: int
    username: str
    email: str
    created_at: Optional[UTCDateTime] = None


class AuthResult(APIModel):
    user: UserOut
    token: str = Field(..., description="Bearer token for the Authorization header")


class ShortenResponse(APIModel):
    """Response model for URL shortening endpoint."""
    short_code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")
    expires_at: Optional[UTCDateTime] = Field(None, description="When the link stops redirecting")


class URLSummary(APIModel):
    """One entry of the caller's URL listing."""
    id: int
    short_code: str
    short_url: str
    original_url: str
    clicks: int
    created_at: UTCDateTime
    expires_at: Optional[UTCDateTime] = None


class DailyClicks(APIModel):
    date: str
    clicks: int


class AnalyticsResponse(APIModel):
    """Response model for the analytics endpoint."""
    short_code: str
    total_clicks: int
    clicks_by_day: list[DailyClicks]


class HealthResponse(BaseModel):
    status: str
    timestamp: UTCDateTime
    uptime: float = Field(..., description="Seconds since the process started")
