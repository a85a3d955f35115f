"""
Time-boxed query cache for polled views (dashboard stats, kitchen display)

Concurrent requests for the same key share one computed result until it
expires or a mutation invalidates it.
"""
import logging
import threading
from typing import Any, Callable, Hashable

from cachetools import TTLCache

from innsync.config import settings

logger = logging.getLogger(__name__)


class QueryCache:
    """
    TTL cache keyed by tuples such as ("stats", property_id, day)

    Attributes:
        name: Label used in log lines
        hits: Number of cache hits
        misses: Number of loader calls
    """

    def __init__(self, name: str, ttl: float, max_size: int = 256):
        self.name = name
        self._cache: TTLCache = TTLCache(maxsize=max_size, ttl=ttl)
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def get_or_set(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._cache:
                self.hits += 1
                logger.debug(f"{self.name} cache HIT: {key}")
                return self._cache[key]

            self.misses += 1
            logger.debug(f"{self.name} cache MISS: {key}")
            value = loader()
            self._cache[key] = value
            return value

    def invalidate(self, prefix: Any = None) -> None:
        """Drop entries whose key starts with `prefix`, or everything"""
        with self._lock:
            if prefix is None:
                self._cache.clear()
                return
            for key in [k for k in self._cache.keys() if isinstance(k, tuple) and k[:1] == (prefix,)]:
                self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._cache)


dashboard_cache = QueryCache("dashboard", ttl=settings.DASHBOARD_CACHE_TTL)
kitchen_cache = QueryCache("kitchen", ttl=settings.KITCHEN_CACHE_TTL)


def invalidate_dashboard() -> None:
    dashboard_cache.invalidate()


def invalidate_kitchen() -> None:
    kitchen_cache.invalidate()
