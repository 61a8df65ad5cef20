"""Cache store - namespaced get/set/invalidate with TTL over a pluggable backend.

Backends deal in serialized strings; the store owns the namespace, JSON
serialization and fault translation. Every backend or serialization fault
surfaces as ``CacheError`` so callers can absorb it in one place.
"""

import json
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Protocol

from loguru import logger

from app.errors import CacheError
from app.models.common.cache import CacheEntry
from settings import CACHE_MAX_ENTRIES, CACHE_NAMESPACE


class CacheBackend(Protocol):
    """Key-value backend with per-key TTL."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl: int) -> None: ...

    async def delete(self, key: str) -> bool: ...

    async def delete_prefix(self, prefix: str) -> int: ...

    async def close(self) -> None: ...


class MemoryCacheBackend:
    """In-process backend with lazy expiry and a bounded entry count."""

    def __init__(self, max_entries: int = CACHE_MAX_ENTRIES, clock: Callable[[], float] = time.time):
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_entries = max_entries
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_live(self._clock()):
            self._entries.pop(key, None)
            return None
        return entry.value

    async def set(self, key: str, value: str, ttl: int) -> None:
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        if len(self._entries) > self._max_entries:
            self.sweep()
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache evicted: {}", evicted)

    def sweep(self) -> int:
        """Drop expired entries. Returns count removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if not e.is_live(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Cache sweep removed {} entries", len(expired))
        return len(expired)

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def delete_prefix(self, prefix: str) -> int:
        keys = [k for k in self._entries if k.startswith(prefix)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    async def close(self) -> None:
        self._entries.clear()


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return float(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def serialize_value(value: Any) -> str:
    return json.dumps(value, default=_json_default, ensure_ascii=False)


def deserialize_value(data: str | bytes) -> Any:
    return json.loads(data)


@dataclass
class CacheStats:
    """Cache operation counters."""

    hits: int = 0
    misses: int = 0
    writes: int = 0
    errors: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class CacheStore:
    """Namespaced cache over a backend. ``None`` means absent."""

    def __init__(self, backend: CacheBackend, namespace: str = CACHE_NAMESPACE):
        self._backend = backend
        self._namespace = namespace
        self._stats = CacheStats()
        logger.debug("CacheStore initialized: backend={}, namespace={}", type(backend).__name__, namespace)

    def _full_key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def get(self, key: str) -> Any | None:
        """Return the live value for key, or None on a miss."""
        try:
            data = await self._backend.get(self._full_key(key))
            if data is None:
                self._stats.misses += 1
                logger.debug("Cache miss: {}", key)
                return None
            value = deserialize_value(data)
        except Exception as e:
            self._stats.errors += 1
            raise CacheError(f"Cache get failed for {key}") from e

        self._stats.hits += 1
        logger.debug("Cache hit: {}", key)
        return value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store value under key for ttl seconds, replacing any prior entry."""
        if ttl <= 0:
            raise ValueError(f"TTL must be positive, got {ttl}")
        try:
            data = serialize_value(value)
            await self._backend.set(self._full_key(key), data, ttl)
        except Exception as e:
            self._stats.errors += 1
            raise CacheError(f"Cache set failed for {key}") from e

        self._stats.writes += 1
        logger.debug("Cache saved: {} (ttl={}s)", key, ttl)

    async def invalidate(self, key: str) -> bool:
        try:
            removed = await self._backend.delete(self._full_key(key))
        except Exception as e:
            self._stats.errors += 1
            raise CacheError(f"Cache invalidate failed for {key}") from e
        logger.debug("Cache invalidated: {} (removed={})", key, removed)
        return removed

    async def invalidate_namespace(self, prefix: str) -> int:
        """Remove every key starting with prefix (e.g. a domain prefix)."""
        try:
            count = await self._backend.delete_prefix(self._full_key(prefix))
        except Exception as e:
            self._stats.errors += 1
            raise CacheError(f"Cache invalidate failed for prefix {prefix}") from e
        logger.info("Cache cleared {} entries under {}", count, prefix)
        return count

    async def close(self) -> None:
        await self._backend.close()

    def stats(self) -> dict:
        return {
            "backend": type(self._backend).__name__,
            "hits": self._stats.hits,
            "misses": self._stats.misses,
            "writes": self._stats.writes,
            "errors": self._stats.errors,
            "hit_rate_percent": round(self._stats.hit_rate * 100, 2),
        }
