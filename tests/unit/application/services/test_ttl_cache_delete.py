from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from memory_cache_pro.application.services.ttl_cache import TTLCache
from memory_cache_pro.infrastructure.scheduling.virtual_timer import VirtualClock, VirtualTimer


@pytest.fixture(params=["delete", "try_to_delete"])
def remove(request: pytest.FixtureRequest, cache: TTLCache):
    """Both removal operations share their behaviour on live entries."""
    return getattr(cache, request.param)


def test_remove_returns_false_for_empty_cache(remove) -> None:
    assert remove("miss") is False


def test_remove_returns_false_for_unknown_key(cache: TTLCache, remove) -> None:
    cache.put("key", "value")
    assert remove("miss") is False
    assert cache.size() == 1


def test_remove_deletes_only_the_given_key(cache: TTLCache, remove) -> None:
    cache.put("key1", "value1")
    cache.put("key2", "value2")
    cache.put("key3", "value3")

    assert remove("key1") is True

    assert cache.get("key1") is None
    assert cache.get("key2") == "value2"
    assert cache.get("key3") == "value3"
    assert cache.size() == 2


def test_remove_is_idempotent(cache: TTLCache, remove) -> None:
    cache.put("key1", "value1")
    cache.put("key2", "value2")

    assert remove("key1") is True
    assert remove("key1") is False
    assert remove("key1") is False
    assert cache.size() == 1


def test_remove_then_reinsert(cache: TTLCache, remove) -> None:
    cache.put("key", "value")
    remove("key")
    assert cache.get("key") is None

    cache.put("key", "value")
    assert cache.get("key") == "value"
    remove("key")
    assert cache.get("key") is None


def test_remove_live_ttl_entry_cancels_callback(
    cache: TTLCache, virtual_timer: VirtualTimer, remove
) -> None:
    callback = MagicMock()
    cache.put("key", "value", 1000, callback)
    virtual_timer.advance(999)

    assert remove("key") is True
    virtual_timer.advance(1000)

    callback.assert_not_called()
    assert cache.size() == 0


# --------------------------------------------------------------------------- #
# delete(): unconditional
# --------------------------------------------------------------------------- #


def test_delete_removes_stale_entry_and_cancels_callback(
    cache: TTLCache, virtual_clock: VirtualClock, virtual_timer: VirtualTimer
) -> None:
    callback = MagicMock()
    cache.put("key", "value", 1000, callback)
    virtual_clock.advance(1000)  # stale, timer not yet run

    assert cache.delete("key") is True
    assert cache.size() == 0

    virtual_timer.advance(0)
    callback.assert_not_called()


def test_delete_after_timer_fired_is_false(cache: TTLCache, virtual_timer: VirtualTimer) -> None:
    cache.put("key", "value", 1000)
    virtual_timer.advance(1000)

    assert cache.delete("key") is False
    assert cache.size() == 0


# --------------------------------------------------------------------------- #
# try_to_delete(): only live entries
# --------------------------------------------------------------------------- #


def test_try_to_delete_stale_entry_returns_false_and_leaves_it(
    cache: TTLCache, virtual_clock: VirtualClock, virtual_timer: VirtualTimer
) -> None:
    callback = MagicMock()
    cache.put("key", "value", 1000, callback)
    virtual_clock.advance(1000)

    assert cache.try_to_delete("key") is False
    assert cache.keys() == ["key"]
    assert cache.size() == 1

    # The pending callback still fires on schedule and settles the entry.
    virtual_timer.advance(0)
    callback.assert_called_once_with("key", "value")
    assert cache.size() == 0
    assert cache.keys() == []


def test_try_to_delete_does_not_touch_counters(cache: TTLCache) -> None:
    cache.debug(True)
    cache.put("key", "value")

    cache.try_to_delete("key")
    cache.try_to_delete("miss")

    assert cache.hits() == 0
    assert cache.misses() == 0


def test_timer_expiry_of_many_items(cache: TTLCache, virtual_timer: VirtualTimer) -> None:
    for i in range(1000):
        cache.put(f"key-{i}", i, 1000)
    assert cache.size() == 1000

    virtual_timer.advance(1000)

    assert cache.size() == 0
    assert cache.memsize() == 0
