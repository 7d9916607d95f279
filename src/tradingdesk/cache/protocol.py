"""Key-value cache store protocol."""

from typing import Optional, Protocol


class CacheStore(Protocol):
    """
    Interface for the look-aside quote cache.

    Values are opaque strings; callers own serialization. Entries expire
    after ttl_seconds. Implementations must not raise on backend trouble:
    a failed read is a miss and a failed write returns False.
    """

    async def get(self, key: str) -> Optional[str]:
        """Return the cached value, or None if absent or expired."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Store value under key for ttl_seconds."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key; returns True if something was removed."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...
