"""
In-process fixed-window rate limiting.

Limiters are keyed by caller (user id, or client address plus login email)
and raise TooManyRequestsError once a window's budget is spent. State lives
in memory, so each worker process counts on its own.
"""
import asyncio
import logging
import time
from typing import Dict, List, Tuple

from relateai.config import settings
from relateai.core.exceptions import TooManyRequestsError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow ``limit`` hits per ``window`` seconds for each key."""

    def __init__(self, name: str, limit: int, window: int, message: str):
        self.name = name
        self.limit = limit
        self.window = window
        self.message = message
        # key -> (hits, window reset time)
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._lock = asyncio.Lock()

    def _current(self, key: str, now: float) -> Tuple[int, float]:
        hits, reset_at = self._windows.get(key, (0, now + self.window))
        if reset_at <= now:
            return 0, now + self.window
        return hits, reset_at

    def _prune(self, now: float) -> None:
        expired = [key for key, (_, reset_at) in self._windows.items() if reset_at <= now]
        for key in expired:
            del self._windows[key]

    async def check(self, key: str) -> None:
        """Raise if ``key`` has used up its window, without counting a hit."""
        if not settings.RATE_LIMIT_ENABLED:
            return
        async with self._lock:
            hits, _ = self._current(key, time.monotonic())
        if hits >= self.limit:
            logger.warning("Rate limit '%s' exceeded for %s", self.name, key)
            raise TooManyRequestsError(self.message)

    async def hit(self, key: str) -> int:
        """Count one hit for ``key``; raises once the limit is passed."""
        if not settings.RATE_LIMIT_ENABLED:
            return 0
        async with self._lock:
            now = time.monotonic()
            self._prune(now)
            hits, reset_at = self._current(key, now)
            hits += 1
            self._windows[key] = (hits, reset_at)
        if hits > self.limit:
            logger.warning("Rate limit '%s' exceeded for %s", self.name, key)
            raise TooManyRequestsError(self.message)
        return hits

    def reset(self) -> None:
        self._windows.clear()


email_limiter = RateLimiter(
    "email",
    limit=settings.EMAIL_RATE_LIMIT,
    window=settings.EMAIL_RATE_WINDOW_SECONDS,
    message="Too many emails sent. Please try again later.",
)

login_limiter = RateLimiter(
    "login",
    limit=settings.LOGIN_RATE_LIMIT,
    window=settings.LOGIN_RATE_WINDOW_SECONDS,
    message="Too many failed authentication attempts. Please try again later.",
)

LIMITERS: List[RateLimiter] = [email_limiter, login_limiter]
