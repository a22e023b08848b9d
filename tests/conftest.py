# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator

import prometheus_client as prom
import pytest

from memory_cache_pro.application.services.ttl_cache import TTLCache
from memory_cache_pro.config.settings import get_settings
from memory_cache_pro.infrastructure.scheduling.virtual_timer import VirtualClock, VirtualTimer

#: Arbitrary wall-clock start (2023-11-14T22:13:20Z) so epoch math is realistic.
START_MS = 1_700_000_000_000.0


@pytest.fixture
def virtual_clock() -> VirtualClock:
    """Manual clock starting at :data:`START_MS`."""
    return VirtualClock(start_ms=START_MS)


@pytest.fixture
def virtual_timer(virtual_clock: VirtualClock) -> VirtualTimer:
    """Timer facility that only fires when advanced."""
    return VirtualTimer(virtual_clock)


@pytest.fixture
def cache(virtual_clock: VirtualClock, virtual_timer: VirtualTimer) -> TTLCache:
    """Fresh cache on virtual time."""
    return TTLCache(clock=virtual_clock, timer=virtual_timer)


@pytest.fixture
def fresh_registry(monkeypatch: pytest.MonkeyPatch) -> Generator[prom.CollectorRegistry, None, None]:
    """Swap the default Prometheus registry for an empty one."""
    registry = prom.CollectorRegistry()
    monkeypatch.setattr(prom, "REGISTRY", registry)
    yield registry


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    """Ensure get_settings() re-reads the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
