"""Read-through orchestration: key -> cache check -> fetch/assemble -> cache write.

The cache is an optimization only. Read and write faults are logged and
absorbed; the caller always gets a freshly computed result instead. Fetch
faults propagate unchanged.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from loguru import logger

from app.cache.domains import CacheDomain
from app.cache.keys import Part, domain_prefix, make_key
from app.cache.store import CacheStore
from app.errors import CacheError

T = TypeVar("T")


class ReadThrough:
    """Wraps any async compute function with a per-domain read-through cache."""

    def __init__(self, store: CacheStore):
        self._store = store
        self._pending: set[asyncio.Task] = set()

    @property
    def store(self) -> CacheStore:
        return self._store

    def key_for(self, domain: CacheDomain, parts: Sequence[Part]) -> str:
        return make_key(domain.name, domain.normalize(parts))

    async def get_or_compute(
        self,
        domain: CacheDomain,
        parts: Sequence[Part],
        compute: Callable[[], Awaitable[T]],
        ttl: int | None = None,
    ) -> T:
        """Return the cached value for (domain, parts) or compute, cache and return it."""
        ttl = domain.ttl if ttl is None else ttl
        if ttl <= 0:
            raise ValueError(f"TTL must be positive, got {ttl}")

        key = self.key_for(domain, parts)

        try:
            cached = await self._store.get(key)
        except CacheError as e:
            logger.warning("Cache read failed for {}, computing fresh: {}", key, e.__cause__ or e)
            cached = None

        if cached is not None:
            return cached

        result = await compute()
        if result is not None:
            self._schedule_write(key, result, ttl)
        return result

    def _schedule_write(self, key: str, value, ttl: int) -> None:
        task = asyncio.create_task(self._write(key, value, ttl))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, key: str, value, ttl: int) -> None:
        try:
            await self._store.set(key, value, ttl)
        except CacheError as e:
            logger.warning("Cache write failed for {}: {}", key, e.__cause__ or e)

    async def drain(self) -> None:
        """Wait for in-flight cache writes (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def invalidate(self, domain: CacheDomain, parts: Sequence[Part]) -> bool:
        key = self.key_for(domain, parts)
        try:
            return await self._store.invalidate(key)
        except CacheError as e:
            logger.warning("Cache invalidate failed for {}: {}", key, e.__cause__ or e)
            return False

    async def invalidate_domain(self, domain: CacheDomain) -> int:
        try:
            return await self._store.invalidate_namespace(domain_prefix(domain.name))
        except CacheError as e:
            logger.warning("Cache invalidate failed for domain {}: {}", domain.name, e.__cause__ or e)
            return 0
