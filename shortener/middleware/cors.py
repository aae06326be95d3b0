"""
CORS middleware.

Preflight (OPTIONS) requests are answered here with 204 and never reach the
rate limiter or the router. Every other response leaving the chain gets the
same three CORS headers stamped on it, whatever its status.
"""

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization"
PREFLIGHT_MAX_AGE = "86400"


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, allow_origin: str = "*"):
        super().__init__(app)
        self.allow_origin = allow_origin

    def cors_headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allow_origin,
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        }

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            headers = self.cors_headers()
            headers["Access-Control-Max-Age"] = PREFLIGHT_MAX_AGE
            return Response(status_code=status.HTTP_204_NO_CONTENT, headers=headers)

        response = await call_next(request)
        response.headers.update(self.cors_headers())
        return response
