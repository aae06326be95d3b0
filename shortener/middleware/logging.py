"""
Logging Middleware for Request/Response Logging

This middleware logs all HTTP requests and responses for observability.
It captures:
- Request method and path (on entry)
- Response status code and processing time (on completion)
- Client IP address

Design Decisions:
- Uses Starlette's BaseHTTPMiddleware for compatibility
- Logs to standard Python logging; setup_logging() decides the format
- Sits inside the error boundary, so a request that raises is logged by the
  boundary rather than here
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shortener.core.network import get_client_ip

logger = logging.getLogger("shortener.requests")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    It wraps the request/response cycle to add logging without
    modifying endpoint code.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Process request and log details.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/endpoint in the chain

        Returns:
            Response object
        """
        client_ip = get_client_ip(request)
        start_time = time.perf_counter()

        logger.debug(f"→ {request.method} {request.url.path} IP:{client_ip}")

        response = await call_next(request)

        process_time = time.perf_counter() - start_time

        # Format: METHOD PATH STATUS_CODE (PROCESS_TIME_MS) CLIENT_IP
        logger.info(
            f"← {request.method} {request.url.path} "
            f"{response.status_code} ({process_time * 1000:.2f}ms) "
            f"IP:{client_ip}"
        )

        response.headers["X-Process-Time"] = str(process_time)

        return response
