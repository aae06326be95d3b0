"""
Rate Limiting Configuration

This module provides the per-client request budget used by the rate limit
middleware.

Design Decisions:
- Uses the ``limits`` library for counters (the engine slowapi is built on)
- Fixed window: the first request from a client opens a window, the window
  resets once its expiry passes
- Counter storage is selected by URI, in-memory by default; pointing
  RATE_LIMIT_STORAGE_URI at a shared store does not change the middleware
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from limits import RateLimitItemPerSecond
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter


@dataclass(frozen=True)
class RateLimitStatus:
    """Outcome of one rate limit check."""
    allowed: bool
    limit: int
    remaining: int
    reset_at: datetime


class RateLimiter:
    """
    Fixed-window request counter keyed by client.

    ``check`` tests and then records the hit without yielding to the event
    loop, so concurrent requests from one client cannot both slip through
    the last slot. Rejected requests are not counted.
    """

    def __init__(self, max_requests: int, window_seconds: int, storage_uri: str = "memory://"):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.storage = storage_from_string(storage_uri)
        self.strategy = FixedWindowRateLimiter(self.storage)
        self.item = RateLimitItemPerSecond(max_requests, window_seconds)

    def check(self, key: str) -> RateLimitStatus:
        allowed = self.strategy.test(self.item, key)
        if allowed:
            self.strategy.hit(self.item, key)

        reset_time, remaining = self.strategy.get_window_stats(self.item, key)
        return RateLimitStatus(
            allowed=allowed,
            limit=self.max_requests,
            remaining=remaining,
            reset_at=datetime.fromtimestamp(reset_time, tz=timezone.utc),
        )

    def reset(self) -> None:
        """Drop every counter (same effect as a process restart)."""
        self.storage.reset()
