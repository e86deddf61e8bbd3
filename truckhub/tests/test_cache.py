"""
Resource cache tests - read-through loading, invalidation and TTL.
"""
from truckhub.services.cache import ResourceCache


class Loader:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.value


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


async def test_loads_once_until_invalidated():
    cache = ResourceCache(ttl_seconds=None)
    loader = Loader(["row"])

    assert await cache.get_or_load("orders", 1, loader) == ["row"]
    assert await cache.get_or_load("orders", 1, loader) == ["row"]
    assert loader.calls == 1

    cache.invalidate("orders", 1)
    await cache.get_or_load("orders", 1, loader)
    assert loader.calls == 2


async def test_keys_are_scoped_by_truck_and_resource():
    cache = ResourceCache(ttl_seconds=None)
    await cache.get_or_load("orders", 1, Loader("t1"))
    await cache.get_or_load("orders", 2, Loader("t2"))
    await cache.get_or_load("reviews", 1, Loader("r1"))

    cache.invalidate("orders", 1)
    assert ("orders", 1) not in cache
    assert ("orders", 2) in cache
    assert ("reviews", 1) in cache


async def test_source_change_drops_dashboard():
    cache = ResourceCache(ttl_seconds=None)
    await cache.get_or_load("dashboard", 1, Loader({}))
    await cache.get_or_load("dashboard", 2, Loader({}))

    cache.invalidate("reviews", 1)
    assert ("dashboard", 1) not in cache
    assert ("dashboard", 2) in cache


async def test_invalidate_truck():
    cache = ResourceCache(ttl_seconds=None)
    for resource in ("orders", "reviews", "dashboard"):
        await cache.get_or_load(resource, 7, Loader(resource))
    await cache.get_or_load("orders", 8, Loader("other"))

    cache.invalidate_truck(7)
    assert len(cache) == 1
    assert ("orders", 8) in cache


async def test_ttl_expiry():
    clock = FakeClock()
    cache = ResourceCache(ttl_seconds=60, clock=clock)
    loader = Loader("v")

    await cache.get_or_load("locations", 1, loader)
    clock.now = 59
    await cache.get_or_load("locations", 1, loader)
    assert loader.calls == 1

    clock.now = 61
    await cache.get_or_load("locations", 1, loader)
    assert loader.calls == 2


async def test_clear():
    cache = ResourceCache()
    await cache.get_or_load("orders", 1, Loader("x"))
    cache.clear()
    assert len(cache) == 0
