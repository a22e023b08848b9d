"""Interleavings of lazy purge, late timers and re-insertion of the same key."""

from __future__ import annotations

from unittest.mock import MagicMock

from memory_cache_pro.application.services.ttl_cache import TTLCache
from memory_cache_pro.infrastructure.scheduling.virtual_timer import VirtualClock, VirtualTimer


def test_late_timer_after_lazy_purge_does_not_decrement_twice(
    cache: TTLCache, virtual_clock: VirtualClock, virtual_timer: VirtualTimer
) -> None:
    callback = MagicMock()
    cache.put("key", "value", 1000, callback)
    cache.put("other", "value")

    virtual_clock.advance(1000)
    assert cache.get("key") is None
    assert cache.size() == 1

    virtual_timer.advance(0)

    assert cache.size() == 1
    assert cache.keys() == ["other"]
    # Natural expiry still notifies exactly once.
    callback.assert_called_once_with("key", "value")


def test_late_timer_does_not_remove_newer_entry(
    cache: TTLCache, virtual_clock: VirtualClock, virtual_timer: VirtualTimer
) -> None:
    first = MagicMock()
    second = MagicMock()
    cache.put("key", "v1", 1000, first)

    virtual_clock.advance(1000)
    assert cache.get("key") is None  # lazily purged, old timer still pending

    cache.put("key", "v2", 5000, second)
    virtual_timer.advance(0)  # old timer fires now

    assert cache.get("key") == "v2"
    assert cache.size() == 1
    first.assert_called_once_with("key", "v1")
    second.assert_not_called()

    virtual_timer.advance(5000)
    second.assert_called_once_with("key", "v2")
    assert cache.size() == 0


def test_size_matches_memsize_through_mixed_operations(
    cache: TTLCache, virtual_clock: VirtualClock, virtual_timer: VirtualTimer
) -> None:
    cache.put("a", 1, 100)
    cache.put("b", 2, 200)
    cache.put("c", 3)
    cache.put("a", 10, 300)
    virtual_clock.advance(250)
    cache.get("b")
    cache.try_to_delete("a")
    cache.delete("c")
    virtual_timer.advance(100)
    cache.put("d", 4, 50)
    virtual_timer.run_all()

    assert cache.size() == cache.memsize() == 0


def test_only_one_timer_per_key(cache: TTLCache, virtual_timer: VirtualTimer) -> None:
    for i in range(10):
        cache.put("key", i, 1000 + i)
    assert virtual_timer.pending() == 1
