"""
Password hashing and bearer tokens.

Passwords are hashed with bcrypt (random salt per call). Tokens are HS256
JWTs carrying the user's id and username plus issue/expiry claims.

Every verification helper returns a falsy value instead of raising, so
callers can treat a bad credential as "unauthenticated".
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from shortener.core.setting import Settings, settings

BEARER_SCHEME = "Bearer"


@dataclass(frozen=True)
class TokenPayload:
    """Identity claims carried by a bearer token."""
    user_id: int
    username: str


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    if not password or not password_hash:
        return False

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash or input over the bcrypt length limit
        return False


def generate_token(
    payload: TokenPayload,
    expires_in: Optional[timedelta] = None,
    app_settings: Optional[Settings] = None,
) -> str:
    """
    Sign a bearer token for the given identity.

    Args:
        payload: user id and username to embed
        expires_in: token lifetime, defaults to ``JWT_EXPIRES_IN``
        app_settings: source of the secret, algorithm and lifetime, defaults to
            the environment-loaded settings

    Returns:
        Encoded JWT string
    """
    app_settings = app_settings or settings
    now = datetime.now(timezone.utc)
    claims = {
        "userId": payload.user_id,
        "username": payload.username,
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else app_settings.JWT_EXPIRES_IN),
    }
    return jwt.encode(claims, app_settings.JWT_SECRET, algorithm=app_settings.JWT_ALGORITHM)


def verify_token(token: str, app_settings: Optional[Settings] = None) -> Optional[TokenPayload]:
    """Decode a bearer token, returning None if it is expired, forged or malformed."""
    app_settings = app_settings or settings
    try:
        claims = jwt.decode(token, app_settings.JWT_SECRET, algorithms=[app_settings.JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None

    user_id = claims.get("userId")
    username = claims.get("username")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(username, str):
        return None

    return TokenPayload(user_id=user_id, username=username)


def extract_token_from_header(auth_header: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` value."""
    if not auth_header:
        return None

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME:
        return None

    return parts[1]
