"""
Global middleware chain.

Order, outermost first:

1. ErrorBoundaryMiddleware - converts anything that escapes into a 500
2. LoggingMiddleware       - entry/completion log lines
3. CORSHeadersMiddleware   - answers preflights, stamps CORS headers
4. RateLimitMiddleware     - per-client request budget

Starlette wraps the app with the most recently added middleware outermost,
so the list is installed in reverse. Route-level concerns (authentication,
JSON body parsing) are FastAPI dependencies in shortener.api.dependencies and
run after this chain, right before the endpoint.
"""

from fastapi import FastAPI

from shortener.core.rate_limit import RateLimiter
from shortener.core.setting import Settings
from shortener.middleware.cors import CORSHeadersMiddleware
from shortener.middleware.errors import ErrorBoundaryMiddleware
from shortener.middleware.logging import LoggingMiddleware
from shortener.middleware.rate_limit import RateLimitMiddleware


def build_middleware_chain(settings: Settings, limiter: RateLimiter) -> list[tuple[type, dict]]:
    """Global middleware with their options, outermost first."""
    return [
        (ErrorBoundaryMiddleware, {}),
        (LoggingMiddleware, {}),
        (CORSHeadersMiddleware, {"allow_origin": settings.CORS_ORIGIN}),
        (RateLimitMiddleware, {"limiter": limiter}),
    ]


def install_middleware_chain(app: FastAPI, settings: Settings, limiter: RateLimiter) -> None:
    """
    Add the global middleware to the app.

    Args:
        app: FastAPI application instance
        settings: source of the CORS origin
        limiter: counter store shared by every request
    """
    for middleware_class, options in reversed(build_middleware_chain(settings, limiter)):
        app.add_middleware(middleware_class, **options)
