# src/memory_cache_pro/application/interfaces/clock_port.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: Clock Port.

Synopsis:
    Source of the current wall-clock instant, used for liveness checks and for
    re-basing TTLs when a snapshot is imported.

Layer:
    application/interfaces
"""

from __future__ import annotations

from typing import Protocol


class ClockPort(Protocol):
    """Wall clock in epoch milliseconds."""

    def now_ms(self) -> float:
        """Return the current instant as milliseconds since the Unix epoch."""
        ...
