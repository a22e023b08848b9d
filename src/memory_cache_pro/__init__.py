"""memory-cache-pro: in-process key/value cache with TTL expiration.

Public surface:
    from memory_cache_pro import TTLCache

    cache = TTLCache()
    cache.put("session", {"user": 1}, ttl_ms=5_000, on_expire=notify)
    cache.get("session")
"""

from __future__ import annotations

from memory_cache_pro.application.schemas.dto.snapshot import NEVER_MARKER, ImportOptions
from memory_cache_pro.application.services.ttl_cache import ExpiryCallback, TTLCache
from memory_cache_pro.dependencies.cache import build_ttl_cache
from memory_cache_pro.domain.exceptions.base import DomainError
from memory_cache_pro.domain.exceptions.cache import (
    InvalidArgument,
    InvalidExpiryCallback,
    InvalidTTL,
    SnapshotFormatError,
)
from memory_cache_pro.infrastructure.scheduling.virtual_timer import VirtualClock, VirtualTimer

__all__ = [
    "NEVER_MARKER",
    "DomainError",
    "ExpiryCallback",
    "ImportOptions",
    "InvalidArgument",
    "InvalidExpiryCallback",
    "InvalidTTL",
    "SnapshotFormatError",
    "TTLCache",
    "VirtualClock",
    "VirtualTimer",
    "build_ttl_cache",
]

__version__ = "0.1.0"
