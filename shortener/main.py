"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- The global middleware chain (error boundary, logging, CORS, rate limiting)
- Exception handlers rendering errors as ``{"success": false, "error": ...}``
- API routes
- Schema bootstrap on startup

Design Decisions:
- create_app() builds a fresh app (and a fresh rate limiter) from settings,
  so tests can run isolated apps with their own limits
- Health endpoint is registered before the router so the catch-all redirect
  route cannot shadow it
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener.api import endpoints
from shortener.api.schemas import HealthResponse
from shortener.core.exceptions import ShortenerError
from shortener.core.logging import setup_logging
from shortener.core.rate_limit import RateLimiter
from shortener.core.setting import Settings, settings
from shortener.db.session import init_db
from shortener.middleware.chain import install_middleware_chain

logger = logging.getLogger(__name__)

PROCESS_STARTED = time.monotonic()


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    """Render an expected error raised by a service or dependency."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Render framework HTTP errors.

    The application itself never raises HTTPException, so 404 and 405 here
    come from the router: no route matches both method and path.
    """
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return error_response(status.HTTP_404_NOT_FOUND, "Route not found")
    return error_response(exc.status_code, str(exc.detail))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info(f"URL shortener ready ({app.state.settings.ENV_SETTING.value})")
    yield


def create_app(app_settings: Optional[Settings] = None, configure_logging: bool = True) -> FastAPI:
    """
    Build the application.

    Args:
        app_settings: configuration, defaults to the environment-loaded settings
        configure_logging: install the process-wide log handler

    Returns:
        Configured FastAPI instance
    """
    app_settings = app_settings or settings

    if configure_logging:
        setup_logging(app_settings.LOG_LEVEL, json_format=app_settings.LOG_JSON)

    app = FastAPI(
        title="URL Shortener API",
        description="URL shortener with user accounts and click analytics",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.limiter = RateLimiter(
        max_requests=app_settings.API_RATE_LIMIT,
        window_seconds=app_settings.RATE_LIMIT_WINDOW,
        storage_uri=app_settings.RATE_LIMIT_STORAGE_URI,
    )

    app.add_exception_handler(ShortenerError, shortener_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    install_middleware_chain(app, app_settings, app.state.limiter)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Liveness check with uptime in seconds."""
        return HealthResponse(
            status="ok",
            timestamp=datetime.now(timezone.utc),
            uptime=time.monotonic() - PROCESS_STARTED,
        )

    app.include_router(endpoints.router)

    return app


app = create_app(configure_logging=False)
