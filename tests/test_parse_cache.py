"""
Tests for the web layer's parse-result cache.
"""
import threading

from ddl_to_er.web_app import parse_cache as parse_cache_module
from ddl_to_er.web_app.parse_cache import ParseCache


def test_hit_returns_same_schema():
    cache = ParseCache(max_size=2, ttl=60)
    first = cache.parse("CREATE TABLE A (x int);")
    second = cache.parse("CREATE TABLE A (x int);")

    assert first is second
    assert (cache.hits, cache.misses) == (1, 1)
    assert len(cache) == 1


def test_least_recently_used_entry_is_evicted():
    cache = ParseCache(max_size=2, ttl=60)
    a = cache.parse("CREATE TABLE A (x int);")
    cache.parse("CREATE TABLE B (x int);")
    cache.parse("CREATE TABLE A (x int);")  # A 变为最近使用
    cache.parse("CREATE TABLE C (x int);")

    assert len(cache) == 2
    assert cache.get("CREATE TABLE A (x int);") is a
    assert cache.get("CREATE TABLE B (x int);") is None


def test_expired_entry_is_reparsed(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(parse_cache_module.time, "monotonic", lambda: now[0])

    cache = ParseCache(max_size=5, ttl=10)
    first = cache.parse("CREATE TABLE A (x int);")
    now[0] += 11
    second = cache.parse("CREATE TABLE A (x int);")

    assert first is not second
    assert cache.misses == 2


def test_zero_size_disables_caching():
    cache = ParseCache(max_size=0, ttl=60)
    cache.parse("CREATE TABLE A (x int);")
    assert len(cache) == 0


def test_clear():
    cache = ParseCache()
    cache.parse("CREATE TABLE A (x int);")
    cache.clear()
    assert len(cache) == 0


def test_concurrent_parses():
    """Parallel callers get correct, independent results."""
    cache = ParseCache(max_size=50, ttl=60)
    results = {}

    def worker(i):
        results[i] = cache.parse(f"CREATE TABLE T{i} (id int PRIMARY KEY);")

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert all(list(results[i].tables) == [f"T{i}"] for i in range(20))
    assert len(cache) == 20
