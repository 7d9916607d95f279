"""In-process cache store."""

import asyncio
import time
from typing import Callable, Optional


class MemoryCacheStore:
    """
    Dict-backed cache with per-key expiry.

    Reads check expiry passively and every set() sweeps out expired entries.
    When set() runs inside an event loop a timer is also scheduled to drop
    the entry once it expires.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self._drop(key)
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        now = self._clock()
        self._sweep(now)
        expires_at = now + ttl_seconds
        self._entries[key] = (value, expires_at)
        self._schedule_expiry(key, ttl_seconds, expires_at)
        return True

    async def delete(self, key: str) -> bool:
        return self._drop(key)

    async def close(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _schedule_expiry(self, key: str, ttl_seconds: int, expires_at: float) -> None:
        previous = self._timers.pop(key, None)
        if previous is not None:
            previous.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timers[key] = loop.call_later(ttl_seconds, self._expire, key, expires_at)

    def _expire(self, key: str, expires_at: float) -> None:
        self._timers.pop(key, None)
        entry = self._entries.get(key)
        # A later set() may have replaced the entry with a fresh expiry
        if entry is not None and entry[1] == expires_at:
            del self._entries[key]

    def _sweep(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            self._drop(key)

    def _drop(self, key: str) -> bool:
        handle = self._timers.pop(key, None)
        if handle is not None:
            handle.cancel()
        return self._entries.pop(key, None) is not None
