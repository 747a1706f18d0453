"""Brutal tests for the fallback LRU cache."""

from __future__ import annotations

from healthnlu.fallback.cache import FallbackCache, normalize_key


class TestNormalizeKey:
    def test_case_and_whitespace(self):
        assert normalize_key("  Had   The USUAL ") == "had the usual"


class TestFallbackCache:
    def test_put_get(self, clock):
        cache = FallbackCache(clock=clock)
        cache.put("Tea", 1)
        assert cache.get("tea") == 1
        assert len(cache) == 1

    def test_miss(self, clock):
        assert FallbackCache(clock=clock).get("nope") is None

    def test_expiry(self, clock):
        cache = FallbackCache(ttl_seconds=10, clock=clock)
        cache.put("tea", 1)
        clock.advance(9)
        assert cache.get("tea") == 1
        clock.advance(1)
        assert cache.get("tea") is None
        assert len(cache) == 0

    def test_evicts_least_recently_used(self, clock):
        cache = FallbackCache(max_size=2, clock=clock)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)
        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3

    def test_put_refreshes_ttl(self, clock):
        cache = FallbackCache(ttl_seconds=10, clock=clock)
        cache.put("a", 1)
        clock.advance(8)
        cache.put("a", 2)
        clock.advance(8)
        assert cache.get("a") == 2

    def test_clear(self, clock):
        cache = FallbackCache(clock=clock)
        cache.put("a", 1)
        cache.clear()
        assert len(cache) == 0
