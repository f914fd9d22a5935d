"""
TTL cache tests with a controllable clock.
"""

import pytest

from backoffice.core.cache import MemoryCache


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryCache(clock=clock)


@pytest.mark.asyncio
async def test_fresh_entry_is_served_without_fetching(cache):
    calls = []

    async def fetcher():
        calls.append(1)
        return {"hours": len(calls)}

    first = await cache.get_or_fetch("key", fetcher, ttl_seconds=60)
    second = await cache.get_or_fetch("key", fetcher, ttl_seconds=60)

    assert first.data == {"hours": 1}
    assert second.data == {"hours": 1}
    assert second.is_stale is False
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_expired_entry_is_refetched(cache, clock):
    values = iter(["old", "new"])

    async def fetcher():
        return next(values)

    await cache.get_or_fetch("key", fetcher, ttl_seconds=60)
    clock.advance(61)
    result = await cache.get_or_fetch("key", fetcher, ttl_seconds=60)

    assert result.data == "new"
    assert result.is_stale is False


@pytest.mark.asyncio
async def test_failed_refresh_returns_stale_data(cache, clock):
    async def ok():
        return "original"

    async def failing():
        raise RuntimeError("upstream down")

    first = await cache.get_or_fetch("key", ok, ttl_seconds=60)
    clock.advance(120)
    result = await cache.get_or_fetch("key", failing, ttl_seconds=60)

    assert result.data == "original"
    assert result.is_stale is True
    assert result.cached_at == first.cached_at


@pytest.mark.asyncio
async def test_failed_fetch_without_entry_propagates(cache):
    async def failing():
        raise RuntimeError("upstream down")

    with pytest.raises(RuntimeError):
        await cache.get_or_fetch("key", failing, ttl_seconds=60)


def test_get_flags_expired_entries(cache, clock):
    cache.set("key", 1, ttl_seconds=10)
    assert cache.get("key").is_stale is False

    clock.advance(10)
    assert cache.get("key").is_stale is True
    assert cache.get("missing") is None


def test_delete_and_clear(cache):
    cache.set("a", 1, ttl_seconds=10)
    cache.set("b", 2, ttl_seconds=10)

    assert cache.delete("a") is True
    assert cache.delete("a") is False

    cache.clear()
    assert cache.get("b") is None
