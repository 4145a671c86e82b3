import pytest

from quishguard.core.cache import ResultCache
from quishguard.models import CompositeReport, SafetyLevel


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def report(url):
    return CompositeReport(url=url, checks={}, risk_score=0, overall_safety=SafetyLevel.SAFE)


@pytest.fixture
def clock():
    return FakeClock()


def test_get_returns_stored_report(clock):
    cache = ResultCache(max_size=10, ttl=60, clock=clock)
    value = report("https://example.com")
    cache.put("https://example.com", value)

    assert cache.get("https://example.com") is value
    assert cache.get("https://other.example") is None


def test_entry_expires_after_ttl(clock):
    cache = ResultCache(max_size=10, ttl=60, clock=clock)
    cache.put("https://example.com", report("https://example.com"))

    clock.now += 59
    assert cache.get("https://example.com") is not None

    clock.now += 1
    assert cache.get("https://example.com") is None
    assert len(cache) == 0


def test_expired_entries_are_removed_lazily(clock):
    cache = ResultCache(max_size=10, ttl=60, clock=clock)
    cache.put("https://a.example", report("a"))
    cache.put("https://b.example", report("b"))
    clock.now += 120

    # nothing is swept until looked up
    assert len(cache) == 2
    cache.get("https://a.example")
    assert len(cache) == 1


def test_eviction_removes_oldest_inserted_entry(clock):
    cache = ResultCache(max_size=2, ttl=60, clock=clock)
    cache.put("https://a.example", report("a"))
    cache.put("https://b.example", report("b"))

    # a read does not protect the oldest entry
    assert cache.get("https://a.example") is not None

    cache.put("https://c.example", report("c"))

    assert cache.get("https://a.example") is None
    assert cache.get("https://b.example") is not None
    assert cache.get("https://c.example") is not None
    assert len(cache) == 2


def test_reinserting_key_moves_it_to_newest(clock):
    cache = ResultCache(max_size=2, ttl=60, clock=clock)
    cache.put("https://a.example", report("a"))
    cache.put("https://b.example", report("b"))
    cache.put("https://a.example", report("a2"))
    cache.put("https://c.example", report("c"))

    assert cache.get("https://b.example") is None
    assert cache.get("https://a.example").url == "a2"


def test_key_includes_path_and_query(clock):
    cache = ResultCache(max_size=10, ttl=60, clock=clock)
    cache.put("https://example.com/a?x=1", report("x1"))

    assert cache.get("https://example.com/a?x=2") is None
    assert cache.get("https://example.com/b?x=1") is None
    assert ResultCache.make_key("https://example.com/a?x=1") != ResultCache.make_key("https://example.com/a?x=2")


def test_stats_and_clear(clock):
    cache = ResultCache(max_size=5, ttl=60, clock=clock)
    cache.put("https://example.com", report("x"))
    cache.get("https://example.com")
    cache.get("https://missing.example")

    stats = cache.stats()
    assert stats["size"] == 1
    assert stats["max_size"] == 5
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 50.0

    cache.clear()
    assert len(cache) == 0
    assert cache.stats()["hits"] == 0


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        ResultCache(max_size=0)
