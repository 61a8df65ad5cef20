"""Redis cache backend.

TTL is delegated to Redis (``SET ... EX``), so expired keys are never
returned. Namespace invalidation scans with an escaped glob prefix.
"""

import re

from loguru import logger
from redis.asyncio import ConnectionPool, Redis

from settings import REDIS_URL

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def escape_glob(text: str) -> str:
    """Escape Redis glob metacharacters so text matches literally."""
    return _GLOB_SPECIAL.sub(r"\\\1", text)


class RedisCacheBackend:
    """Async Redis backend with a shared connection pool."""

    def __init__(self, url: str = REDIS_URL, client: Redis | None = None, max_connections: int = 50):
        self._pool: ConnectionPool | None = None
        if client is None:
            self._pool = ConnectionPool.from_url(url, max_connections=max_connections, decode_responses=True)
            client = Redis(connection_pool=self._pool)
        self._redis = client
        logger.info("Redis cache backend: {}", url if self._pool else type(client).__name__)

    async def get(self, key: str) -> str | None:
        return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._redis.set(key, value, ex=ttl)

    async def delete(self, key: str) -> bool:
        return await self._redis.delete(key) > 0

    async def delete_prefix(self, prefix: str) -> int:
        keys = [k async for k in self._redis.scan_iter(match=escape_glob(prefix) + "*", count=100)]
        if not keys:
            return 0
        return await self._redis.delete(*keys)

    async def close(self) -> None:
        await self._redis.aclose()
        if self._pool:
            await self._pool.disconnect()
        logger.info("Redis cache closed")
