# src/memory_cache_pro/application/interfaces/cache_metrics_port.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: Cache Metrics Port.

Synopsis:
    Optional operational metrics sink for the cache. Independent of the
    instrumentation flag that gates hit/miss counters.

Layer:
    application/interfaces
"""

from __future__ import annotations

from typing import Protocol


class CacheMetricsPort(Protocol):
    """Records cache operations and expirations."""

    def record_operation(self, operation: str, outcome: str) -> None:
        """Count one operation.

        Args:
            operation: Operation name, e.g. ``get`` or ``put``.
            outcome: Result label, e.g. ``hit``, ``miss``, ``ok``.
        """
        ...

    def record_expiration(self, cause: str) -> None:
        """Count one expired entry removal.

        Args:
            cause: ``timer``, ``lazy`` or ``import``.
        """
        ...
