"""
FastAPI Endpoints for URL Shortener Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Declaring route-level middleware (authentication, JSON body parsing)
- Shaping service results into response envelopes
- Delegating to the service layer

Errors are raised by the services as ShortenerError subclasses and rendered
by the exception handler registered in main.py.

Routing:
- Routes are matched in registration order and the first full match wins
- The catch-all redirect route GET /{code} MUST stay last, otherwise it
  would shadow single-segment API paths
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.api.dependencies import (
    get_current_user,
    get_optional_user,
    get_settings,
    parse_json_body,
)
from shortener.api.schemas import (
    AnalyticsResponse,
    AuthResult,
    Envelope,
    ErrorResponse,
    ShortenResponse,
    URLSummary,
    UserOut,
)
from shortener.core.network import get_client_ip
from shortener.core.security import TokenPayload
from shortener.core.setting import Settings
from shortener.db.models import ShortURL
from shortener.db.session import get_session
from shortener.services.auth_service import AuthService
from shortener.services.redirect_service import RedirectService
from shortener.services.stats_service import StatsService
from shortener.services.url_service import URLShorteningService, build_short_url

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
}


def to_summary(short_url: ShortURL, base_url: str) -> URLSummary:
    return URLSummary(
        id=short_url.id,
        short_code=short_url.short_code,
        short_url=build_short_url(short_url.short_code, base_url),
        original_url=short_url.original_url,
        clicks=short_url.clicks,
        created_at=short_url.created_at,
        expires_at=short_url.expires_at,
    )


# Auth routes

@router.post(
    "/api/auth/register",
    response_model=Envelope[AuthResult],
    status_code=status.HTTP_201_CREATED,
    responses={**ERROR_RESPONSES, status.HTTP_409_CONFLICT: {"model": ErrorResponse}},
    tags=["Auth"],
    summary="Register a new user",
)
async def register(
    body: Optional[dict[str, Any]] = Depends(parse_json_body),
    session: AsyncSession = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> Envelope[AuthResult]:
    user, token = await AuthService(session, app_settings).register(body)
    return Envelope[AuthResult](
        message="User registered successfully",
        data=AuthResult(user=UserOut.model_validate(user), token=token),
    )


@router.post(
    "/api/auth/login",
    response_model=Envelope[AuthResult],
    responses=ERROR_RESPONSES,
    tags=["Auth"],
    summary="Log in and receive a bearer token",
)
async def login(
    body: Optional[dict[str, Any]] = Depends(parse_json_body),
    session: AsyncSession = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> Envelope[AuthResult]:
    user, token = await AuthService(session, app_settings).login(body)
    return Envelope[AuthResult](
        message="Login successful",
        data=AuthResult(user=UserOut.model_validate(user), token=token),
    )


@router.get(
    "/api/auth/profile",
    response_model=Envelope[UserOut],
    responses={**ERROR_RESPONSES, status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
    tags=["Auth"],
    summary="Current user profile",
)
async def get_profile(
    current_user: TokenPayload = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Envelope[UserOut]:
    user = await AuthService(session).get_profile(current_user.user_id)
    return Envelope[UserOut](message="Success", data=UserOut.model_validate(user))


# URL routes

@router.post(
    "/api/urls",
    response_model=Envelope[ShortenResponse],
    status_code=status.HTTP_201_CREATED,
    responses={
        **ERROR_RESPONSES,
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    tags=["URLs"],
    summary="Create a short URL",
    description=(
        "Anonymous unless a bearer token is sent, in which case the caller owns the URL. "
        "expiresInDays must be a number when present (400 otherwise); zero or a negative "
        "value creates a link that never expires."
    ),
)
async def create_short_url(
    current_user: Optional[TokenPayload] = Depends(get_optional_user),
    body: Optional[dict[str, Any]] = Depends(parse_json_body),
    session: AsyncSession = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> Envelope[ShortenResponse]:
    owner_id = current_user.user_id if current_user else None
    short_url = await URLShorteningService(session, app_settings).create_short_url(body, owner_id=owner_id)

    return Envelope[ShortenResponse](
        message="URL shortened successfully",
        data=ShortenResponse(
            short_code=short_url.short_code,
            short_url=build_short_url(short_url.short_code, app_settings.BASE_URL),
            original_url=short_url.original_url,
            expires_at=short_url.expires_at,
        ),
    )


@router.get(
    "/api/urls",
    response_model=Envelope[list[URLSummary]],
    responses=ERROR_RESPONSES,
    tags=["URLs"],
    summary="List the caller's URLs, newest first",
)
async def get_user_urls(
    current_user: TokenPayload = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> Envelope[list[URLSummary]]:
    urls = await URLShorteningService(session).list_user_urls(current_user.user_id)
    return Envelope[list[URLSummary]](message="Success", data=[to_summary(url, app_settings.BASE_URL) for url in urls])


@router.get(
    "/api/urls/{code}/analytics",
    response_model=Envelope[AnalyticsResponse],
    responses={
        **ERROR_RESPONSES,
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
    tags=["URLs"],
    summary="Click analytics for one of the caller's URLs",
)
async def get_analytics(
    code: str,
    current_user: TokenPayload = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Envelope[AnalyticsResponse]:
    analytics = await StatsService(session).get_analytics(code, current_user.user_id)
    return Envelope[AnalyticsResponse](message="Success", data=AnalyticsResponse.model_validate(analytics))


@router.delete(
    "/api/urls/{code}",
    response_model=Envelope,
    responses={**ERROR_RESPONSES, status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
    tags=["URLs"],
    summary="Delete one of the caller's URLs",
)
async def delete_url(
    code: str,
    current_user: TokenPayload = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Envelope:
    await URLShorteningService(session).delete_user_url(code, current_user.user_id)
    return Envelope(message="URL deleted successfully", data=None)


# Redirect route (must be last to avoid shadowing the routes above)

@router.get(
    "/{code}",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_410_GONE: {"model": ErrorResponse},
    },
    tags=["Redirect"],
    summary="Redirect to original URL",
)
async def redirect_to_url(
    code: str,
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    Records a click event (User-Agent, Referer, client IP) and bumps the
    click counter before answering.

    Raises:
        NotFoundError: unknown short code (404)
        GoneError: short code has expired (410)
    """
    original_url = await RedirectService(session).get_redirect_url(
        code,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("User-Agent"),
        referer=request.headers.get("Referer"),
    )
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
