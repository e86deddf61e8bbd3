"""
Read-through cache for per-truck resource listings.

Entries are keyed by ``(resource_type, truck_id)``. Routes that mutate a
resource must call ``invalidate`` for it (and for the truck's dashboard);
nothing expires implicitly except through the TTL.
"""
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from fastapi import Request

logger = logging.getLogger(__name__)

CacheKey = tuple[str, int]

# Resources whose changes feed the dashboard numbers
DASHBOARD_SOURCES = {"orders", "reviews", "locations", "inventory", "protein_inventory"}


class ResourceCache:
    def __init__(self, ttl_seconds: Optional[float] = 300, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, Any]] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return self._fresh(key)

    def __len__(self) -> int:
        return len(self._entries)

    def _fresh(self, key: CacheKey) -> bool:
        entry = self._entries.get(key)
        if entry is None:
            return False
        if self.ttl_seconds is None:
            return True
        return self._clock() - entry[0] < self.ttl_seconds

    async def get_or_load(
        self,
        resource_type: str,
        truck_id: int,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        key = (resource_type, truck_id)
        if self._fresh(key):
            return self._entries[key][1]

        value = await loader()
        self._entries[key] = (self._clock(), value)
        return value

    def invalidate(self, resource_type: str, truck_id: int) -> None:
        """Drop one entry; a change to a dashboard source also drops the dashboard."""
        self._entries.pop((resource_type, truck_id), None)
        if resource_type in DASHBOARD_SOURCES:
            self._entries.pop(("dashboard", truck_id), None)
        logger.debug(f"Cache invalidated: {resource_type} for truck {truck_id}")

    def invalidate_truck(self, truck_id: int) -> None:
        for key in [k for k in self._entries if k[1] == truck_id]:
            del self._entries[key]
        logger.debug(f"Cache invalidated: all resources for truck {truck_id}")

    def clear(self) -> None:
        self._entries.clear()


def get_cache(request: Request) -> ResourceCache:
    """Dependency returning the app-scoped cache"""
    return request.app.state.cache
