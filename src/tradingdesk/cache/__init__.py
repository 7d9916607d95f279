"""Quote cache stores.

The backend is chosen once at startup from settings; callers depend on the
CacheStore protocol only.
"""

from tradingdesk.cache.protocol import CacheStore
from tradingdesk.cache.memory_store import MemoryCacheStore
from tradingdesk.cache.redis_store import RedisCacheStore
from tradingdesk.config.settings import Settings


def create_cache_store(settings: Settings) -> CacheStore:
    """Build the cache store selected by settings.cache_backend."""
    if settings.cache_backend == "redis":
        return RedisCacheStore.from_url(settings.redis_url)
    return MemoryCacheStore()


__all__ = [
    "CacheStore",
    "MemoryCacheStore",
    "RedisCacheStore",
    "create_cache_store",
]
