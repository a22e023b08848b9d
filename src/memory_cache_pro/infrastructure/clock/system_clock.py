# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""System wall clock (epoch milliseconds)."""

from __future__ import annotations

import time

from memory_cache_pro.application.interfaces.clock_port import ClockPort


class SystemClock(ClockPort):
    """Wall clock backed by :func:`time.time_ns`, truncated to whole milliseconds."""

    def now_ms(self) -> float:
        return float(time.time_ns() // 1_000_000)
