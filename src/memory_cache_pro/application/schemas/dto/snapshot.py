# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Snapshot DTOs (Application Layer).

Purpose:
    Wire-level shapes for cache snapshots and import options.

Wire format:
    ``{"<key>": {"value": <any JSON>, "expire": <epoch ms> | "NaN"}, ...}``

    ``"NaN"`` is a string literal meaning "never expires"; it is decoded
    explicitly into :data:`NEVER`. Decoding is permissive: ``null``, bools,
    non-finite numbers and unparseable strings also decode to ``NEVER``.

Layer: application/schemas/dto
"""

from __future__ import annotations

import math
from typing import Any, Final

from pydantic import ConfigDict, Field, field_serializer, field_validator

from memory_cache_pro.application.schemas.dto.base import BaseDTO
from memory_cache_pro.domain.entities.cache_entry import NEVER, CacheEntry, ExpiresAt, Expiry

__all__ = ["NEVER_MARKER", "ImportOptions", "SnapshotRecordDTO"]

#: Wire marker for entries without expiry.
NEVER_MARKER: Final[str] = "NaN"


def _coerce_instant(raw: Any) -> float | None:
    """Return a finite epoch-ms instant, or ``None`` for "never"."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int | float):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


class SnapshotRecordDTO(BaseDTO):
    """One exported cache record.

    Attributes:
        value: Cached payload. Must be JSON-serializable to be exported.
        expire: Absolute expiry in epoch ms, or ``None`` when the entry never
            expires (``"NaN"`` on the wire).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    value: Any = None
    expire: float | None = Field(default=None)

    @field_validator("expire", mode="before")
    @classmethod
    def _decode_expire(cls, raw: Any) -> float | None:
        return _coerce_instant(raw)

    @field_serializer("expire")
    def _encode_expire(self, expire: float | None) -> int | float | str:
        if expire is None:
            return NEVER_MARKER
        if expire.is_integer():
            return int(expire)
        return expire

    @classmethod
    def from_entry(cls, entry: CacheEntry) -> SnapshotRecordDTO:
        """Build a record from a live cache entry (the timer is dropped)."""
        expire = entry.expiry.at_ms if isinstance(entry.expiry, ExpiresAt) else None
        return cls(value=entry.value, expire=expire)

    def to_expiry(self) -> Expiry:
        """Return the explicit expiry variant for this record."""
        if self.expire is None:
            return NEVER
        return ExpiresAt(self.expire)


class ImportOptions(BaseDTO):
    """Options for ``TTLCache.import_from_json``.

    Attributes:
        skip_duplicates: Keep existing entries instead of overwriting them.
            Accepts ``skipDuplicates`` as an alias for snapshots produced by
            other runtimes. Unknown option keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    skip_duplicates: bool = Field(default=False, alias="skipDuplicates")
