"""
Input Validators

This module provides validation functions for user inputs: account fields,
destination URLs and caller-chosen short codes.

Security Considerations:
- Only http/https destinations are accepted (no javascript:, data:, file:)
- Short codes are restricted to a URL-safe character set
- Password length is capped at the bcrypt input limit
"""

import re
from urllib.parse import urlparse

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,20}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CUSTOM_CODE_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,20}$")

MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def is_valid_username(username: str) -> bool:
    """3-20 characters, alphanumeric and underscores only."""
    return isinstance(username, str) and bool(USERNAME_PATTERN.match(username))


def is_valid_email(email: str) -> bool:
    return isinstance(email, str) and bool(EMAIL_PATTERN.match(email))


def is_valid_password(password: str) -> bool:
    """
    Check password strength.

    At least 8 characters with one uppercase letter, one lowercase letter
    and one digit.
    """
    if not isinstance(password, str):
        return False
    return (
        len(password) >= MIN_PASSWORD_LENGTH
        and re.search(r"[A-Z]", password) is not None
        and re.search(r"[a-z]", password) is not None
        and re.search(r"[0-9]", password) is not None
    )


def fits_bcrypt_limit(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


def is_valid_url(url: str) -> bool:
    """
    Validate a destination URL.

    Args:
        url: The URL string to validate

    Returns:
        True if the URL uses http/https and names a host, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    try:
        result = urlparse(url)
    except ValueError:
        return False

    if result.scheme.lower() not in {"http", "https"}:
        return False

    return bool(result.netloc)


def is_valid_custom_code(code: str) -> bool:
    """3-20 characters: letters, digits, hyphen and underscore."""
    return isinstance(code, str) and bool(CUSTOM_CODE_PATTERN.match(code))
