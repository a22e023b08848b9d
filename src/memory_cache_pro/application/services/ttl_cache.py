# src/memory_cache_pro/application/services/ttl_cache.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""TTL Cache (Application Service).

Synopsis:
    In-process key/value cache with optional per-entry TTL, expiry callbacks,
    instrumentation-gated hit/miss counters, and JSON snapshot export/import.

Design:
    * Active expiration: each expiring entry owns one timer (``TimerPort``).
      On fire, the entry is removed first and ``on_expire(key, value)`` is
      called second, so the callback observes a consistent cache.
    * Lazy expiration: ``get`` treats a stale entry as absent and purges it
      without touching its timer.
    * Overwrite, ``delete``, ``try_to_delete`` and ``clear`` cancel the owned
      timer synchronously before any new state is installed.
    * A firing timer only removes the entry that owns it, so a timer that
      lost the race to a lazy purge never decrements ``size`` twice nor
      removes a newer entry for the same key.
    * Single-threaded by contract: operations run to completion on one event
      loop; no locks are taken.

Layer:
    application/services
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from pydantic import ValidationError

from memory_cache_pro.application.interfaces.cache_metrics_port import CacheMetricsPort
from memory_cache_pro.application.interfaces.clock_port import ClockPort
from memory_cache_pro.application.interfaces.snapshot_codec_port import SnapshotCodecPort
from memory_cache_pro.application.interfaces.timer_port import TimerPort
from memory_cache_pro.application.schemas.dto.snapshot import ImportOptions, SnapshotRecordDTO
from memory_cache_pro.domain.entities.cache_entry import CacheEntry, ExpiresAt
from memory_cache_pro.domain.exceptions.cache import (
    InvalidArgument,
    InvalidExpiryCallback,
    InvalidTTL,
)

__all__ = ["ExpiryCallback", "TTLCache"]

logger = logging.getLogger(__name__)

ExpiryCallback: TypeAlias = Callable[[str, Any], Any]


def _validate_ttl(ttl_ms: Any) -> float:
    """Return ``ttl_ms`` as a float, or raise if it is not finite and positive."""
    if isinstance(ttl_ms, bool) or not isinstance(ttl_ms, int | float):
        raise InvalidTTL(
            "Cache timeout must be a positive number",
            details={"ttl_ms": repr(ttl_ms)},
        )
    if not math.isfinite(ttl_ms) or ttl_ms <= 0:
        raise InvalidTTL(
            "Cache timeout must be a positive number",
            details={"ttl_ms": repr(ttl_ms)},
        )
    return float(ttl_ms)


class TTLCache:
    """Keyed store with lazy and active TTL expiration.

    Every instance is independent; there is no shared default instance.

    Args:
        clock: Wall clock in epoch ms. Defaults to :class:`SystemClock`.
        timer: Timer facility. Defaults to :class:`AsyncioTimer`, which needs a
            running event loop whenever an entry with a TTL is stored.
        codec: Snapshot codec. Defaults to :class:`JsonSnapshotCodec`.
        metrics: Optional metrics sink.
        debug: Initial instrumentation state.
        skip_duplicates: Default for :meth:`import_from_json`.
    """

    def __init__(
        self,
        *,
        clock: ClockPort | None = None,
        timer: TimerPort | None = None,
        codec: SnapshotCodecPort | None = None,
        metrics: CacheMetricsPort | None = None,
        debug: bool = False,
        skip_duplicates: bool = False,
    ) -> None:
        if clock is None:
            from memory_cache_pro.infrastructure.clock.system_clock import SystemClock

            clock = SystemClock()
        if timer is None:
            from memory_cache_pro.infrastructure.scheduling.asyncio_timer import AsyncioTimer

            timer = AsyncioTimer()
        if codec is None:
            from memory_cache_pro.infrastructure.serialization.json_snapshot_codec import (
                JsonSnapshotCodec,
            )

            codec = JsonSnapshotCodec()

        self._clock = clock
        self._timer = timer
        self._codec = codec
        self._metrics = metrics
        self._skip_duplicates_default = skip_duplicates

        self._store: dict[str, CacheEntry] = {}
        self._size = 0
        self._hit_count = 0
        self._miss_count = 0
        self._debug = debug

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #
    def put(
        self,
        key: str,
        value: Any,
        ttl_ms: float | None = None,
        on_expire: ExpiryCallback | None = None,
    ) -> Any:
        """Store ``value`` under ``key``, replacing any previous entry.

        Args:
            key: Cache key.
            value: Payload, stored as-is.
            ttl_ms: Optional time-to-live in milliseconds (finite, > 0).
            on_expire: Optional ``(key, value)`` callback fired once when the
                TTL elapses. Never fired on explicit removal or overwrite.

        Returns:
            ``value``, unchanged.

        Raises:
            InvalidTTL: If ``ttl_ms`` is given and not a finite positive number.
            InvalidExpiryCallback: If ``on_expire`` is given and not callable.
        """
        if self._debug:
            logger.debug("cache.put", extra={"key": key, "ttl_ms": ttl_ms})

        delay_ms = _validate_ttl(ttl_ms) if ttl_ms is not None else None
        if on_expire is not None and not callable(on_expire):
            raise InvalidExpiryCallback(
                "Cache timeout callback must be a function",
                details={"on_expire": type(on_expire).__name__},
            )

        # Schedule before touching state; a failing timer leaves the cache as it was.
        if delay_ms is None:
            entry = CacheEntry(value=value)
        else:
            expiry = ExpiresAt(self._clock.now_ms() + delay_ms)

            def _expire() -> None:
                # Late-bound: `entry` is assigned below, before the loop can run this.
                self._on_timer(key, entry, on_expire)

            handle = self._timer.schedule(delay_ms, _expire)
            entry = CacheEntry(value=value, expiry=expiry, timer=handle)

        previous = self._store.get(key)
        if previous is not None:
            previous.cancel_timer()
        else:
            self._size += 1
        self._store[key] = entry
        self._record("put", "ok")
        return value

    def try_to_delete(self, key: str) -> bool:
        """Delete ``key`` only if it is present and still live.

        A present but stale entry is left untouched, timer included, for the
        timer or a later :meth:`get`/:meth:`delete` to settle.

        Returns:
            True if the entry was removed.
        """
        entry = self._store.get(key)
        if entry is None or not entry.is_live(self._clock.now_ms()):
            self._record("try_to_delete", "skipped")
            return False
        entry.cancel_timer()
        self._remove(key)
        self._record("try_to_delete", "deleted")
        return True

    def delete(self, key: str) -> bool:
        """Delete ``key`` regardless of expiry state.

        Returns:
            False if the key was absent, True if it was removed.
        """
        entry = self._store.get(key)
        if entry is None:
            self._record("delete", "absent")
            return False
        entry.cancel_timer()
        self._remove(key)
        self._record("delete", "deleted")
        return True

    def clear(self) -> None:
        """Cancel every timer and empty the cache.

        Hit/miss counters are reset only while instrumentation is enabled.
        """
        for entry in self._store.values():
            entry.cancel_timer()
        self._store = {}
        self._size = 0
        if self._debug:
            self._hit_count = 0
            self._miss_count = 0
        self._record("clear", "ok")

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for ``key``, or ``default``.

        A stale entry is purged on the spot (lazy expiration); its timer is
        left as is.
        """
        entry = self._store.get(key)
        if entry is None:
            self._count_miss()
            self._record("get", "miss")
            return default

        if entry.is_live(self._clock.now_ms()):
            if self._debug:
                self._hit_count += 1
            self._record("get", "hit")
            return entry.value

        self._count_miss()
        self._remove(key)
        self._record("get", "miss")
        if self._metrics is not None:
            self._metrics.record_expiration("lazy")
        return default

    def size(self) -> int:
        """Return the authoritative number of entries."""
        return self._size

    def __len__(self) -> int:
        return self._size

    def memsize(self) -> int:
        """Return the number of entries physically held."""
        return len(self._store)

    def keys(self) -> list[str]:
        """Return every key physically held, stale ones included."""
        return list(self._store)

    # ------------------------------------------------------------------ #
    # Instrumentation
    # ------------------------------------------------------------------ #
    def debug(self, enabled: bool) -> None:
        """Turn instrumentation on or off. Counters are left as they are."""
        self._debug = bool(enabled)

    def hits(self) -> int:
        """Number of hits recorded while instrumentation was enabled."""
        return self._hit_count

    def misses(self) -> int:
        """Number of misses recorded while instrumentation was enabled."""
        return self._miss_count

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #
    def export_to_json(self) -> str:
        """Serialize every held entry to snapshot JSON.

        Stale entries not yet purged are exported with their past ``expire``.

        Raises:
            SnapshotFormatError: If a value is not JSON-serializable.
        """
        records = {key: SnapshotRecordDTO.from_entry(entry) for key, entry in self._store.items()}
        payload = self._codec.encode(records)
        self._record("export", "ok")
        return payload

    def import_from_json(
        self,
        payload: str | bytes,
        options: ImportOptions | Mapping[str, Any] | None = None,
        *,
        skip_duplicates: bool | None = None,
    ) -> int:
        """Merge a snapshot into the cache, re-basing TTLs on the current clock.

        Records whose expiry has passed are not installed, and any existing
        entry under the same key is removed. Expiry callbacks are never
        restored.

        Args:
            payload: Snapshot text produced by :meth:`export_to_json`.
            options: ``ImportOptions`` or a mapping with ``skip_duplicates``
                (``skipDuplicates`` accepted).
            skip_duplicates: Overrides ``options`` when given.

        Returns:
            The cache size after the import.

        Raises:
            SnapshotFormatError: If the payload is malformed.
            InvalidArgument: If ``options`` carries an unusable value.
        """
        skip = self._resolve_skip_duplicates(options, skip_duplicates)
        records = self._codec.decode(payload)
        now_ms = self._clock.now_ms()

        imported = skipped = expired = 0
        for key, record in records.items():
            if skip and key in self._store:
                if self._debug:
                    logger.debug("cache.import.skip_duplicate", extra={"key": key})
                skipped += 1
                continue

            remaining_ms = record.to_expiry().remaining_ms(now_ms)
            if remaining_ms is not None and remaining_ms <= 0:
                if self._debug:
                    logger.debug("cache.import.expired", extra={"key": key})
                self._purge_expired_import(key)
                expired += 1
                continue

            self.put(key, record.value, remaining_ms)
            imported += 1

        if self._debug:
            logger.debug(
                "cache.import.completed",
                extra={
                    "imported": imported,
                    "skipped": skipped,
                    "expired": expired,
                    "size": self._size,
                },
            )
        self._record("import", "ok")
        return self.size()

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _remove(self, key: str) -> None:
        """Drop ``key`` and decrement ``size``. No-op if already absent."""
        if self._store.pop(key, None) is not None:
            self._size -= 1

    def _on_timer(self, key: str, entry: CacheEntry, on_expire: ExpiryCallback | None) -> None:
        if self._store.get(key) is entry:
            self._remove(key)
            if self._metrics is not None:
                self._metrics.record_expiration("timer")
        if self._debug:
            logger.debug("cache.expired", extra={"key": key})
        if on_expire is not None:
            on_expire(key, entry.value)

    def _purge_expired_import(self, key: str) -> None:
        entry = self._store.get(key)
        if entry is None:
            return
        entry.cancel_timer()
        self._remove(key)
        if self._metrics is not None:
            self._metrics.record_expiration("import")

    def _resolve_skip_duplicates(
        self,
        options: ImportOptions | Mapping[str, Any] | None,
        override: bool | None,
    ) -> bool:
        if override is not None:
            return bool(override)
        if options is None:
            return self._skip_duplicates_default
        if isinstance(options, ImportOptions):
            return options.skip_duplicates
        try:
            return ImportOptions.model_validate(dict(options)).skip_duplicates
        except ValidationError as exc:
            raise InvalidArgument(
                "Import options are invalid",
                details={"errors": exc.errors(include_url=False)},
            ) from exc

    def _count_miss(self) -> None:
        if self._debug:
            self._miss_count += 1

    def _record(self, operation: str, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_operation(operation, outcome)

