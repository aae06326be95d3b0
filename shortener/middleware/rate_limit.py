"""
Rate limit middleware.

Applies the per-client budget from shortener.core.rate_limit to every
request that reaches it. Clients are keyed by get_client_ip(), so all
callers without X-Forwarded-For share the "unknown" bucket.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shortener.core.exceptions import RateLimitError
from shortener.core.network import get_client_ip
from shortener.core.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: RateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        client_key = get_client_ip(request)
        result = self.limiter.check(client_key)

        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {client_key} on {request.url.path}")
            error = RateLimitError()
            return JSONResponse(
                status_code=error.status_code,
                content={"success": False, "error": error.message},
                headers={
                    "X-RateLimit-Limit": str(result.limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": result.reset_at.isoformat(),
                },
            )

        return await call_next(request)
