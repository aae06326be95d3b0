"""
Custom Exceptions

This module defines the error taxonomy of the service. Every expected
failure is raised as one of these exceptions and rendered by a single
exception handler as ``{"success": false, "error": <message>}`` with the
status code the exception carries.

Anything that is not a ``ShortenerError`` is unexpected and ends up in the
error boundary middleware as a 500.
"""

from fastapi import status


class ShortenerError(Exception):
    """Base exception for URL shortener service."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ShortenerError):
    """Raised when input is missing or malformed."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(ShortenerError):
    """Raised when a credential is missing, invalid or expired."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(ShortenerError):
    """Raised when the caller is authenticated but may not touch the resource."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized"


class NotFoundError(ShortenerError):
    """Raised when a resource does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ShortenerError):
    """Raised when a uniqueness constraint would be violated."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class GoneError(ShortenerError):
    """Raised when a resource existed but has expired."""
    status_code = status.HTTP_410_GONE
    default_message = "Resource has expired"


class RateLimitError(ShortenerError):
    """Raised when a client exceeds its request budget."""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests. Please try again later."


class InternalError(ShortenerError):
    """Raised for failures the caller cannot correct."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ShortCodeExhaustedError(InternalError):
    """Raised when no unused short code was found within the attempt budget."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__("Failed to generate unique code")
