"""
Short Code Generation

Random short codes drawn from a 62 character alphabet, plus the
uniqueness-seeking loop used when creating URLs.

Design Decisions:
- Random rather than counter-based: codes do not reveal how many URLs exist
- Not cryptographically secure; collisions are possible and handled by
  retrying against the store
- The retry budget is fixed; running out is a server fault, not a user error
"""

import logging
import random
import string
from typing import Awaitable, Callable

from shortener.core.exceptions import ShortCodeExhaustedError

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_letters + string.digits
DEFAULT_CODE_LENGTH = 6
DEFAULT_MAX_ATTEMPTS = 10


def generate_short_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """Draw ``length`` independent characters from ``ALPHABET``."""
    return "".join(random.choices(ALPHABET, k=length))


async def find_unused_code(
    exists: Callable[[str], Awaitable[bool]],
    length: int = DEFAULT_CODE_LENGTH,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> str:
    """
    Generate codes until one is not taken.

    Args:
        exists: coroutine reporting whether a code is already stored
        length: code length
        max_attempts: how many candidates to try

    Returns:
        A code that was free at the time of the check

    Raises:
        ShortCodeExhaustedError: every candidate was taken
    """
    for attempt in range(1, max_attempts + 1):
        code = generate_short_code(length)
        if not await exists(code):
            return code
        logger.debug(f"Short code collision on attempt {attempt}: {code}")

    logger.error(f"No unused short code found after {max_attempts} attempts")
    raise ShortCodeExhaustedError(max_attempts)
