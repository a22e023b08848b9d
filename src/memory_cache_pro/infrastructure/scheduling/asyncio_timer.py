# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Asyncio timer facility.

Schedules expirations with ``loop.call_later`` so they run on the same event
loop as the code using the cache. The returned ``asyncio.TimerHandle`` is the
entry's cancellable handle.

If no loop is injected, the running loop is resolved at schedule time; storing
an entry with a TTL outside a running loop therefore raises ``RuntimeError``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from memory_cache_pro.application.interfaces.timer_port import TimerPort


class AsyncioTimer(TimerPort):
    """Timer port on top of an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, delay_ms: float, action: Callable[[], None]) -> asyncio.TimerHandle:
        """Run ``action`` on the loop after ``delay_ms`` milliseconds.

        Raises:
            RuntimeError: If no loop was injected and none is running.
        """
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000.0, action)
