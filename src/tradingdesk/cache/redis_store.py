"""Redis-backed cache store."""

import logging
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisCacheStore:
    """
    Cache store on top of redis.asyncio.

    Redis problems are logged and reported as a miss from get() and as False
    from set() and delete().
    """

    def __init__(self, client: aioredis.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        return cls(aioredis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self._client.get(key)
        except RedisError as exc:
            logger.error("Redis GET %s failed: %s", key, exc)
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        try:
            await self._client.setex(key, ttl_seconds, value)
        except RedisError as exc:
            logger.error("Redis SETEX %s failed: %s", key, exc)
            return False
        return True

    async def delete(self, key: str) -> bool:
        try:
            removed = await self._client.delete(key)
        except RedisError as exc:
            logger.error("Redis DEL %s failed: %s", key, exc)
            return False
        return bool(removed)

    async def close(self) -> None:
        await self._client.aclose()
