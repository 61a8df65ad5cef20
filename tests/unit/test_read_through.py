"""Tests for read-through orchestration."""

import asyncio

import pytest

from app.cache import CacheStore, ReadThrough
from app.cache.domains import CacheDomain
from app.errors import CacheError, StorageError

DOMAIN = CacheDomain(name="compare", ttl=600)


class FlakyStore(CacheStore):
    """Store whose reads and/or writes fail."""

    def __init__(self, fail_get: bool = False, fail_set: bool = False):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.writes = []

    async def get(self, key):
        if self.fail_get:
            raise CacheError("get down")
        return None

    async def set(self, key, value, ttl):
        if self.fail_set:
            raise CacheError("set down")
        self.writes.append((key, value, ttl))


class Counter:
    def __init__(self, result=None):
        self.calls = 0
        self.result = {"value": 42} if result is None else result

    async def __call__(self):
        self.calls += 1
        return self.result


class TestReadThrough:
    @pytest.mark.asyncio
    async def test_miss_then_hit(self, read_through):
        compute = Counter()
        first = await read_through.get_or_compute(DOMAIN, ["a", "b"], compute)
        await read_through.drain()
        second = await read_through.get_or_compute(DOMAIN, ["a", "b"], compute)
        assert first == second == {"value": 42}
        assert compute.calls == 1

    @pytest.mark.asyncio
    async def test_expired_recomputes(self, read_through, clock):
        compute = Counter()
        await read_through.get_or_compute(DOMAIN, ["a"], compute)
        await read_through.drain()
        clock.advance(600)
        await read_through.get_or_compute(DOMAIN, ["a"], compute)
        assert compute.calls == 2

    @pytest.mark.asyncio
    async def test_ttl_override(self):
        store = FlakyStore()
        rt = ReadThrough(store)
        await rt.get_or_compute(DOMAIN, ["a"], Counter(), ttl=5)
        await rt.drain()
        assert store.writes[0][2] == 5

    @pytest.mark.asyncio
    async def test_none_not_cached(self, read_through):
        calls = 0

        async def compute():
            nonlocal calls
            calls += 1
            return None

        await read_through.get_or_compute(DOMAIN, ["a"], compute)
        await read_through.drain()
        await read_through.get_or_compute(DOMAIN, ["a"], compute)
        assert calls == 2


class TestDegradation:
    @pytest.mark.asyncio
    async def test_read_failure_computes_fresh(self):
        rt = ReadThrough(FlakyStore(fail_get=True))
        assert await rt.get_or_compute(DOMAIN, ["a"], Counter()) == {"value": 42}

    @pytest.mark.asyncio
    async def test_write_failure_absorbed(self):
        rt = ReadThrough(FlakyStore(fail_set=True))
        assert await rt.get_or_compute(DOMAIN, ["a"], Counter()) == {"value": 42}
        await rt.drain()

    @pytest.mark.asyncio
    async def test_write_does_not_delay_response(self):
        release = asyncio.Event()

        class SlowStore(FlakyStore):
            async def set(self, key, value, ttl):
                await release.wait()
                await super().set(key, value, ttl)

        store = SlowStore()
        rt = ReadThrough(store)
        result = await asyncio.wait_for(rt.get_or_compute(DOMAIN, ["a"], Counter()), timeout=1)
        assert result == {"value": 42}
        assert store.writes == []
        release.set()
        await rt.drain()
        assert len(store.writes) == 1

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self, read_through):
        async def compute():
            raise StorageError()

        with pytest.raises(StorageError):
            await read_through.get_or_compute(DOMAIN, ["a"], compute)

    @pytest.mark.asyncio
    async def test_invalid_ttl(self, read_through):
        with pytest.raises(ValueError):
            await read_through.get_or_compute(DOMAIN, ["a"], Counter(), ttl=0)


class TestInvalidation:
    @pytest.mark.asyncio
    async def test_invalidate_domain(self, read_through):
        compute = Counter()
        await read_through.get_or_compute(DOMAIN, ["a"], compute)
        await read_through.get_or_compute(DOMAIN, ["b"], compute)
        await read_through.drain()
        assert await read_through.invalidate_domain(DOMAIN) == 2
        await read_through.get_or_compute(DOMAIN, ["a"], compute)
        assert compute.calls == 3

    @pytest.mark.asyncio
    async def test_invalidate_key(self, read_through):
        await read_through.get_or_compute(DOMAIN, ["a"], Counter())
        await read_through.drain()
        assert await read_through.invalidate(DOMAIN, ["a"]) is True
        assert await read_through.invalidate(DOMAIN, ["a"]) is False
