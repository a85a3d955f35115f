"""
Query cache tests
"""
import time

from innsync.services.query_cache import QueryCache


class TestQueryCache:
    """get_or_set, invalidate and clear"""

    def test_loader_called_once(self):
        cache = QueryCache("test", ttl=60)
        calls = []

        def loader():
            calls.append(1)
            return {"total_rooms": 10}

        first = cache.get_or_set(("stats", 1), loader)
        second = cache.get_or_set(("stats", 1), loader)

        assert first is second
        assert len(calls) == 1
        assert (cache.hits, cache.misses) == (1, 1)

    def test_entries_expire(self):
        cache = QueryCache("test", ttl=0.01)
        cache.get_or_set("key", lambda: 1)

        time.sleep(0.02)

        assert cache.get_or_set("key", lambda: 2) == 2
        assert cache.misses == 2

    def test_invalidate_by_prefix(self):
        cache = QueryCache("test", ttl=60)
        cache.get_or_set(("stats", 1), lambda: "a")
        cache.get_or_set(("stats", 2), lambda: "b")
        cache.get_or_set(("kitchen", 1), lambda: "c")

        cache.invalidate("stats")

        assert len(cache) == 1
        assert cache.get_or_set(("kitchen", 1), lambda: "x") == "c"

    def test_invalidate_everything(self):
        cache = QueryCache("test", ttl=60)
        cache.get_or_set(("stats", 1), lambda: "a")
        cache.get_or_set("plain", lambda: "b")

        cache.invalidate()

        assert len(cache) == 0

    def test_clear_resets_counters(self):
        cache = QueryCache("test", ttl=60)
        cache.get_or_set("key", lambda: 1)
        cache.get_or_set("key", lambda: 1)

        cache.clear()

        assert (cache.hits, cache.misses, len(cache)) == (0, 0, 0)
