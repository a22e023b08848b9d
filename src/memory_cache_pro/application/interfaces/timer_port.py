# src/memory_cache_pro/application/interfaces/timer_port.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: Timer Port.

Synopsis:
    Host timer facility used for active expiration. Enables swapping the
    asyncio event loop for deterministic virtual time.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from memory_cache_pro.domain.interfaces.timer_handle import TimerHandle


class TimerPort(Protocol):
    """Schedules deferred actions on the cache's execution context.

    Implementations must run actions on the same logical thread as the cache
    operations (no true parallelism), at or after the requested delay.
    """

    def schedule(self, delay_ms: float, action: Callable[[], None]) -> TimerHandle:
        """Schedule ``action`` to run once after ``delay_ms`` milliseconds.

        Args:
            delay_ms: Positive delay in milliseconds.
            action: Zero-argument callable.

        Returns:
            A cancellable handle owned by the caller.
        """
        ...
