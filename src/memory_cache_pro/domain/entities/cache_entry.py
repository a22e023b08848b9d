# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Cache Entry Entity

Purpose:
    Immutable record stored under one cache key: the opaque value, its expiry
    and the timer handle that owns its active expiration.

Design:
    * Expiry is an explicit tagged union, ``Never | ExpiresAt``. The snapshot
      marker ``"NaN"`` is decoded into ``Never`` at the boundary and never
      reaches this layer.
    * An entry is replaced wholesale on overwrite; it is never mutated.
    * ``timer`` is present iff the expiry is ``ExpiresAt``.

Layer: domain/entities
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, TypeAlias

from memory_cache_pro.domain.interfaces.timer_handle import TimerHandle


@dataclass(frozen=True, slots=True)
class Never:
    """Expiry variant for entries that live until removed explicitly."""

    def remaining_ms(self, now_ms: float) -> float | None:
        """Return ``None``; a permanent entry has no remaining time."""
        return None

    def is_live(self, now_ms: float) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class ExpiresAt:
    """Expiry variant holding an absolute instant in epoch milliseconds.

    Raises:
        ValueError: If ``at_ms`` is not finite.
    """

    at_ms: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.at_ms):
            raise ValueError("at_ms must be finite")

    def remaining_ms(self, now_ms: float) -> float:
        """Milliseconds left until expiry; zero or negative once stale."""
        return self.at_ms - now_ms

    def is_live(self, now_ms: float) -> bool:
        return self.at_ms > now_ms


Expiry: TypeAlias = Never | ExpiresAt

#: Shared instance; ``Never`` carries no state.
NEVER = Never()


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One cached record.

    Args:
        value: Opaque payload, returned as stored.
        expiry: ``NEVER`` or ``ExpiresAt``.
        timer: Handle of the scheduled expiration, owned by this entry.

    Raises:
        ValueError: If a timer is attached to a permanent entry or missing from
            an expiring one.
    """

    value: Any
    expiry: Expiry = NEVER
    timer: TimerHandle | None = None

    def __post_init__(self) -> None:
        if isinstance(self.expiry, Never) and self.timer is not None:
            raise ValueError("permanent entries must not own a timer")
        if isinstance(self.expiry, ExpiresAt) and self.timer is None:
            raise ValueError("expiring entries must own a timer")

    def is_live(self, now_ms: float) -> bool:
        """Return True if the entry has no expiry or it is still in the future."""
        return self.expiry.is_live(now_ms)

    def cancel_timer(self) -> None:
        """Cancel the owned timer, if any. Safe after the timer has fired."""
        if self.timer is not None:
            self.timer.cancel()
