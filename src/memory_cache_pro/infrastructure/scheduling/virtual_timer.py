# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Deterministic virtual time (clock + timer facility).

Synopsis:
    A manual clock and a timer facility that only fire when time is advanced
    explicitly. Used for simulations and for tests that must not sleep.

Design:
    * ``VirtualTimer.advance(ms)`` fires every due timer in order of
      (due instant, scheduling order). Before each action runs, the clock is
      moved to that timer's due instant, so actions observe the same "now"
      they would under a real loop.
    * Actions scheduled while advancing are honoured within the same call if
      they fall due before the target instant.
    * ``VirtualClock.advance`` moves time *without* firing timers, which models
      a late timer (the lazy-expiration race).

Layer:
    infrastructure/scheduling
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field

from memory_cache_pro.application.interfaces.clock_port import ClockPort
from memory_cache_pro.application.interfaces.timer_port import TimerPort

__all__ = ["VirtualClock", "VirtualTimer", "VirtualTimerHandle"]


class VirtualClock(ClockPort):
    """Manually driven clock in epoch milliseconds."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now_ms = float(start_ms)

    def now_ms(self) -> float:
        return self._now_ms

    def advance(self, ms: float) -> None:
        """Move time forward by ``ms`` without running any timer.

        Raises:
            ValueError: If ``ms`` is negative.
        """
        if ms < 0:
            raise ValueError("cannot move a virtual clock backwards")
        self._now_ms += ms

    def set(self, now_ms: float) -> None:
        """Jump to an absolute instant (forwards or backwards)."""
        self._now_ms = float(now_ms)


@dataclass(eq=False)
class VirtualTimerHandle:
    """Handle returned by :meth:`VirtualTimer.schedule`."""

    due_ms: float
    action: Callable[[], None] = field(repr=False)
    _cancelled: bool = False
    _fired: bool = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def fired(self) -> bool:
        return self._fired


class VirtualTimer(TimerPort):
    """Timer facility driven by :meth:`advance`.

    Args:
        clock: The virtual clock this facility moves while advancing.
    """

    def __init__(self, clock: VirtualClock) -> None:
        self._clock = clock
        self._seq = itertools.count()
        self._heap: list[tuple[float, int, VirtualTimerHandle]] = []

    @property
    def clock(self) -> VirtualClock:
        return self._clock

    def schedule(self, delay_ms: float, action: Callable[[], None]) -> VirtualTimerHandle:
        handle = VirtualTimerHandle(due_ms=self._clock.now_ms() + delay_ms, action=action)
        heapq.heappush(self._heap, (handle.due_ms, next(self._seq), handle))
        return handle

    def pending(self) -> int:
        """Number of scheduled, uncancelled timers that have not fired."""
        return sum(1 for _, _, h in self._heap if not h.cancelled())

    def advance(self, ms: float) -> int:
        """Move time forward by ``ms``, firing timers that fall due.

        Exceptions raised by an action propagate; the clock stays at that
        action's due instant and later timers remain pending.

        Returns:
            Number of actions run.

        Raises:
            ValueError: If ``ms`` is negative.
        """
        if ms < 0:
            raise ValueError("cannot advance virtual time backwards")
        target_ms = self._clock.now_ms() + ms
        fired = 0
        while self._heap and self._heap[0][0] <= target_ms:
            due_ms, _, handle = heapq.heappop(self._heap)
            if handle.cancelled():
                continue
            if due_ms > self._clock.now_ms():
                self._clock.set(due_ms)
            handle._fired = True
            fired += 1
            handle.action()
        self._clock.set(target_ms)
        return fired

    def run_all(self) -> int:
        """Advance until no timer is pending. Returns the number of actions run."""
        fired = 0
        while self._heap:
            due_ms = self._heap[0][0]
            fired += self.advance(max(0.0, due_ms - self._clock.now_ms()))
        return fired
