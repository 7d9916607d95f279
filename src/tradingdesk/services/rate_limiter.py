"""Minimum-interval rate limiter for upstream API calls."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Serializes callers so that consecutive upstream calls are at least
    min_interval seconds apart.

    One instance is shared by everything that talks to the same provider.
    The check-then-stamp sequence runs under a lock, so two concurrent
    callers can never observe the same last-call time and both proceed.
    """

    def __init__(
        self,
        min_interval: float = 12.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_call: Optional[float] = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def acquire(self) -> None:
        """Wait until the next upstream call is allowed, then claim the slot."""
        async with self._lock:
            if self._last_call is not None:
                elapsed = self._clock() - self._last_call
                if elapsed < self._min_interval:
                    wait = self._min_interval - elapsed
                    logger.info("Rate limiting: waiting %.2fs", wait)
                    await self._sleep(wait)
            self._last_call = self._clock()
