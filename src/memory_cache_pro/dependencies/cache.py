# src/memory_cache_pro/dependencies/cache.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Dependency wiring for caches.

Overview:
    Builds :class:`TTLCache` instances from :class:`Settings`. Each call
    returns a new, independent cache; no shared default instance is kept.

Layer:
    dependencies

Design:
    * Clock and timer default to the system clock and the running asyncio
      loop; callers may inject virtual time for simulations and tests.
    * Prometheus metrics are attached only when ``CACHE_METRICS_ENABLED``.
    * Instrumentation and import defaults come from settings.
"""

from __future__ import annotations

from typing import Any

from memory_cache_pro.application.interfaces.cache_metrics_port import CacheMetricsPort
from memory_cache_pro.application.interfaces.clock_port import ClockPort
from memory_cache_pro.application.interfaces.timer_port import TimerPort
from memory_cache_pro.application.services.ttl_cache import TTLCache
from memory_cache_pro.config.settings import Settings
from memory_cache_pro.infrastructure.clock.system_clock import SystemClock
from memory_cache_pro.infrastructure.logging.logger import get_json_logger
from memory_cache_pro.infrastructure.observability.metrics import PrometheusCacheMetrics
from memory_cache_pro.infrastructure.scheduling.asyncio_timer import AsyncioTimer
from memory_cache_pro.infrastructure.serialization.json_snapshot_codec import JsonSnapshotCodec

logger = get_json_logger(__name__)


def get_settings() -> Any:
    """Shim for tests to patch settings resolution in this module.

    By default, dynamically imports the canonical ``get_settings()`` from the
    config module. Tests monkeypatch ``dependencies.cache.get_settings`` to
    inject fake settings without touching the global Settings cache.
    """
    from memory_cache_pro.config.settings import get_settings as core_get_settings

    return core_get_settings()


def build_cache_metrics(settings: Settings) -> CacheMetricsPort | None:
    """Return a Prometheus metrics sink if enabled in ``settings``."""
    if not settings.cache_metrics_enabled:
        return None
    return PrometheusCacheMetrics(namespace=settings.cache_metrics_namespace)


def build_ttl_cache(
    settings: Settings | None = None,
    *,
    clock: ClockPort | None = None,
    timer: TimerPort | None = None,
) -> TTLCache:
    """Build a configured cache.

    Args:
        settings: Explicit settings; resolved via :func:`get_settings` if omitted.
        clock: Clock override (defaults to :class:`SystemClock`).
        timer: Timer override (defaults to :class:`AsyncioTimer`).

    Returns:
        TTLCache: A new, independent cache instance.
    """
    resolved = settings if settings is not None else get_settings()
    metrics = build_cache_metrics(resolved)

    cache = TTLCache(
        clock=clock if clock is not None else SystemClock(),
        timer=timer if timer is not None else AsyncioTimer(),
        codec=JsonSnapshotCodec(),
        metrics=metrics,
        debug=resolved.cache_debug,
        skip_duplicates=resolved.cache_import_skip_duplicates,
    )
    logger.debug(
        "cache.built",
        extra={
            "debug": resolved.cache_debug,
            "metrics_enabled": metrics is not None,
            "skip_duplicates": resolved.cache_import_skip_duplicates,
        },
    )
    return cache
