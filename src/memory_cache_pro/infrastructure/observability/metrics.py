# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Prometheus counters for cache operations and expirations.

:class:`PrometheusCacheMetrics` implements ``CacheMetricsPort``; recording
never raises into cache operations. Collectors follow the active
``prometheus_client.REGISTRY``, so tests may swap it freely.

Example:
    metrics = PrometheusCacheMetrics(namespace="sessions")
    cache = TTLCache(metrics=metrics)
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress

import prometheus_client as prom
from prometheus_client import Counter

from memory_cache_pro.application.interfaces.cache_metrics_port import CacheMetricsPort

__all__ = [
    "PrometheusCacheMetrics",
    "get_cache_expirations_total",
    "get_cache_operations_total",
]

_log = logging.getLogger(__name__)

# Per-name collectors for _registry.
_registry: prom.CollectorRegistry | None = None
_counter_cache: dict[str, Counter] = {}
_lock = threading.RLock()


def _counter(name: str, help_text: str, labelnames: tuple[str, ...]) -> Counter:
    """Return the ``name`` counter bound to the active ``prom.REGISTRY``.

    The per-name cache is dropped whenever the default registry is swapped.
    A counter already registered under ``name`` (e.g. after a module reload)
    is reused instead of raising a duplicate-registration error.
    """
    global _registry
    with _lock:
        if _registry is not prom.REGISTRY:
            _counter_cache.clear()
            _registry = prom.REGISTRY

        cached = _counter_cache.get(name)
        if cached is not None:
            return cached

        try:
            counter = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
        except ValueError:
            existing = getattr(prom.REGISTRY, "_names_to_collectors", {}).get(name)
            if not isinstance(existing, Counter):
                _log.exception("Failed to register Prometheus counter %s", name)
                raise
            counter = existing
        _counter_cache[name] = counter
        return counter


def get_cache_operations_total() -> Counter:
    """Return counter for cache operations.

    Labels:
        operation: ``put|get|delete|try_to_delete|clear|export|import``.
        namespace: Logical cache name.
        outcome: ``ok|hit|miss|deleted|absent|skipped``.

    Returns:
        Counter: Labelled collector.
    """
    return _counter(
        "memory_cache_operations_total",
        "In-process cache operations by outcome",
        ("operation", "namespace", "outcome"),
    )


def get_cache_expirations_total() -> Counter:
    """Return counter for entries removed because their TTL elapsed.

    Labels:
        namespace: Logical cache name.
        cause: ``timer|lazy|import``.

    Returns:
        Counter: Labelled collector.
    """
    return _counter(
        "memory_cache_expirations_total",
        "In-process cache entries removed on expiry",
        ("namespace", "cause"),
    )


class PrometheusCacheMetrics(CacheMetricsPort):
    """``CacheMetricsPort`` backed by Prometheus counters.

    Args:
        namespace: Value of the ``namespace`` label for this cache.
    """

    def __init__(self, namespace: str = "default") -> None:
        self._ns = namespace

    @property
    def namespace(self) -> str:
        return self._ns

    def record_operation(self, operation: str, outcome: str) -> None:
        with suppress(Exception):
            get_cache_operations_total().labels(
                operation=operation,
                namespace=self._ns,
                outcome=outcome,
            ).inc()

    def record_expiration(self, cause: str) -> None:
        with suppress(Exception):
            get_cache_expirations_total().labels(namespace=self._ns, cause=cause).inc()
