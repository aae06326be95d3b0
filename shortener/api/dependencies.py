"""
Route-level middleware, expressed as FastAPI dependencies.

These run after the global middleware chain and before the endpoint, only
on the routes that declare them:

- get_current_user: bearer token required
- get_optional_user: bearer token optional, but must be valid if sent
- parse_json_body: JSON object body for POST/PUT requests

get_settings hands endpoints the Settings the app was built with.
"""

from typing import Any, Optional

from fastapi import Request

from shortener.core.exceptions import AuthError, ValidationError
from shortener.core.security import TokenPayload, extract_token_from_header, verify_token
from shortener.core.setting import Settings

NO_TOKEN = "No token provided"
INVALID_TOKEN = "Invalid or expired token"

BODYLESS_METHODS = {"GET", "DELETE"}


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(request: Request) -> TokenPayload:
    """
    Authenticate the request from its Authorization header.

    Raises:
        AuthError: header missing/malformed, or token invalid/expired
    """
    token = extract_token_from_header(request.headers.get("Authorization"))
    if not token:
        raise AuthError(NO_TOKEN)

    payload = verify_token(token, get_settings(request))
    if not payload:
        raise AuthError(INVALID_TOKEN)

    return payload


async def get_optional_user(request: Request) -> Optional[TokenPayload]:
    """Like get_current_user, but a request without Authorization is anonymous."""
    if not request.headers.get("Authorization"):
        return None
    return await get_current_user(request)


async def parse_json_body(request: Request) -> Optional[dict[str, Any]]:
    """
    Parse a JSON object body.

    Returns:
        The decoded object, or None for GET/DELETE requests and for requests
        that do not declare a JSON content type

    Raises:
        ValidationError: body is not valid JSON or not a JSON object
    """
    if request.method in BODYLESS_METHODS:
        return None

    content_type = request.headers.get("Content-Type", "")
    if "application/json" not in content_type:
        return None

    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON body")

    if not isinstance(body, dict):
        raise ValidationError("Invalid JSON body")

    return body
