"""
Error boundary middleware.

Outermost layer of the chain. Any exception that escapes the layers inside
it (endpoint code, storage faults, other middleware) is logged with its
traceback and turned into a 500 JSON envelope carrying the exception's
message. Expected errors never get here; they are rendered by the exception
handlers registered in main.py.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Internal server error"


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled error on {request.method} {request.url.path}: {str(e)}",
                exc_info=True
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"success": False, "error": str(e) or FALLBACK_MESSAGE},
            )
