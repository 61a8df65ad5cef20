"""Tests for cache store and in-memory backend."""

from datetime import datetime
from decimal import Decimal

import pytest

from app.cache import CacheStore, MemoryCacheBackend
from app.errors import CacheError


class BrokenBackend:
    async def get(self, key):
        raise ConnectionError("down")

    async def set(self, key, value, ttl):
        raise ConnectionError("down")

    async def delete(self, key):
        raise ConnectionError("down")

    async def delete_prefix(self, prefix):
        raise ConnectionError("down")

    async def close(self):
        pass


class TestTTL:
    @pytest.mark.asyncio
    async def test_live_before_ttl(self, store, clock):
        await store.set("k", {"v": 1}, ttl=60)
        clock.advance(59.9)
        assert await store.get("k") == {"v": 1}

    @pytest.mark.asyncio
    async def test_absent_at_ttl(self, store, clock):
        await store.set("k", {"v": 1}, ttl=60)
        clock.advance(60)
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_miss_is_none(self, store):
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_overwrite_resets_expiry(self, store, clock):
        await store.set("k", 1, ttl=10)
        clock.advance(8)
        await store.set("k", 2, ttl=10)
        clock.advance(8)
        assert await store.get("k") == 2

    @pytest.mark.asyncio
    async def test_rejects_non_positive_ttl(self, store):
        with pytest.raises(ValueError):
            await store.set("k", 1, ttl=0)


class TestMemoryBackend:
    @pytest.mark.asyncio
    async def test_sweep_and_lazy_expiry_agree(self, clock):
        lazy = MemoryCacheBackend(clock=clock)
        swept = MemoryCacheBackend(clock=clock)
        for backend in (lazy, swept):
            await backend.set("short", "1", ttl=5)
            await backend.set("long", "2", ttl=50)

        clock.advance(10)
        assert swept.sweep() == 1
        for backend in (lazy, swept):
            assert await backend.get("short") is None
            assert await backend.get("long") == "2"

    @pytest.mark.asyncio
    async def test_bounded_size_prefers_expired(self, clock):
        backend = MemoryCacheBackend(max_entries=2, clock=clock)
        await backend.set("old", "1", ttl=1)
        await backend.set("keep", "2", ttl=100)
        clock.advance(5)
        await backend.set("new", "3", ttl=100)
        assert len(backend) == 2
        assert await backend.get("keep") == "2"
        assert await backend.get("new") == "3"

    @pytest.mark.asyncio
    async def test_evicts_oldest_when_full(self, clock):
        backend = MemoryCacheBackend(max_entries=2, clock=clock)
        for key in ("a", "b", "c"):
            await backend.set(key, key, ttl=100)
        assert await backend.get("a") is None
        assert await backend.get("c") == "c"


class TestInvalidate:
    @pytest.mark.asyncio
    async def test_invalidate_key(self, store):
        await store.set("compare:a", 1, ttl=60)
        assert await store.invalidate("compare:a") is True
        assert await store.get("compare:a") is None

    @pytest.mark.asyncio
    async def test_invalidate_namespace(self, store):
        await store.set("compare:a", 1, ttl=60)
        await store.set("compare:b", 2, ttl=60)
        await store.set("search:a", 3, ttl=60)
        assert await store.invalidate_namespace("compare:") == 2
        assert await store.get("search:a") == 3


class TestSerialization:
    @pytest.mark.asyncio
    async def test_dates_and_decimals(self, store):
        await store.set("k", {"when": datetime(2024, 1, 2, 3, 4), "pp": Decimal("1.5")}, ttl=60)
        assert await store.get("k") == {"when": "2024-01-02T03:04:00", "pp": 1.5}

    @pytest.mark.asyncio
    async def test_unserializable_is_cache_error(self, store):
        with pytest.raises(CacheError):
            await store.set("k", {"bad": object()}, ttl=60)


class TestFailures:
    @pytest.mark.asyncio
    async def test_get_wraps_backend_fault(self):
        store = CacheStore(BrokenBackend(), namespace="t")
        with pytest.raises(CacheError):
            await store.get("k")

    @pytest.mark.asyncio
    async def test_set_wraps_backend_fault(self):
        store = CacheStore(BrokenBackend(), namespace="t")
        with pytest.raises(CacheError):
            await store.set("k", 1, ttl=10)
        assert store.stats()["errors"] == 1


class TestStats:
    @pytest.mark.asyncio
    async def test_hit_rate(self, store):
        await store.set("k", 1, ttl=60)
        await store.get("k")
        await store.get("missing")
        stats = store.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate_percent"] == 50.0
