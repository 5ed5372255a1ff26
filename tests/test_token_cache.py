"""Unit tests for the in-memory TokenCache."""

import threading

import pytest

from ratewindow.utils.token_cache import TokenCache


def test_set_and_get_updates_hit_miss_counters(clock) -> None:
    cache: TokenCache[list[float]] = TokenCache(ttl=10, clock=clock)

    assert cache.get("missing") is None

    cache.set("key", [1.0])
    assert cache.get("key") == [1.0]

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["entries"] == 1


def test_expired_entry_is_evicted(clock) -> None:
    cache: TokenCache[dict] = TokenCache(ttl=5_000, clock=clock)
    cache.set("key", {"data": True})

    clock.advance(5_000)

    assert cache.get("key") is None
    assert "key" not in cache
    assert cache.stats()["evictions"] == 1


def test_get_does_not_refresh_expiry(clock) -> None:
    cache: TokenCache[int] = TokenCache(ttl=1_000, clock=clock)
    cache.set("key", 1)

    clock.advance(900)
    assert cache.get("key") == 1
    clock.advance(100)

    assert cache.get("key") is None


def test_set_refreshes_expiry(clock) -> None:
    cache: TokenCache[int] = TokenCache(ttl=1_000, clock=clock)
    cache.set("key", 1)

    clock.advance(900)
    cache.set("key", 2)
    clock.advance(900)

    assert cache.get("key") == 2


def test_lru_eviction_removes_least_recently_used(clock) -> None:
    cache: TokenCache[dict] = TokenCache(ttl=100, max_entries=2, clock=clock)
    cache.set("a", {"v": 1})
    cache.set("b", {"v": 2})

    # Access "a" so that "b" becomes least recently used
    assert cache.get("a") == {"v": 1}

    cache.set("c", {"v": 3})

    assert cache.get("a") == {"v": 1}
    assert cache.get("c") == {"v": 3}
    assert cache.get("b") is None
    assert len(cache) == 2


def test_delete_and_clear(clock) -> None:
    cache: TokenCache[int] = TokenCache(ttl=10, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")

    assert cache.delete("a") is True
    assert cache.delete("a") is False

    cache.clear()

    stats = cache.stats()
    assert stats["entries"] == 0
    assert stats["hits"] == 0
    assert stats["misses"] == 0
    assert stats["evictions"] == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"ttl": 0},
        {"ttl": -1},
        {"ttl": 10, "max_entries": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        TokenCache(**kwargs)


def test_thread_safety_under_concurrent_sets() -> None:
    cache: TokenCache[dict] = TokenCache(ttl=30_000, max_entries=None)
    total_keys = 50

    def _writer(idx: int) -> None:
        cache.set(f"k-{idx}", {"v": idx})

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(total_keys)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.stats()["entries"] == total_keys
    assert cache.get("k-0") == {"v": 0}
    assert cache.get("k-49") == {"v": 49}
