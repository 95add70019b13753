"""Async sliding-window rate limiter for LLM provider calls."""

import asyncio
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow at most ``requests_per_minute`` acquisitions per rolling minute.

    Usage::

        limiter = RateLimiter(requests_per_minute=15, name="gemini")
        await limiter.acquire()
        await call_provider()
    """

    WINDOW_SECONDS = 60.0

    def __init__(
        self,
        requests_per_minute: int = 60,
        name: str = "default",
        clock: Optional[Callable[[], float]] = None,
    ):
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1")
        self._rpm = requests_per_minute
        self._name = name
        self._clock = clock or time.monotonic
        self._window: list[float] = []
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        self._window = [t for t in self._window if now - t < self.WINDOW_SECONDS]

    def wait_time(self) -> float:
        """Seconds until another request may start (0 if one may start now)."""
        now = self._clock()
        self._prune(now)
        if len(self._window) < self._rpm:
            return 0.0
        return max(0.0, self.WINDOW_SECONDS - (now - self._window[0]))

    async def acquire(self) -> None:
        async with self._lock:
            while True:
                wait = self.wait_time()
                if wait <= 0:
                    break
                logger.debug("RateLimiter(%s) sleeping %.2fs", self._name, wait)
                await asyncio.sleep(wait)
            self._window.append(self._clock())
