# src/memory_cache_pro/application/interfaces/snapshot_codec_port.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: Snapshot Codec Port.

Synopsis:
    Serialize/deserialize primitive for cache snapshots. Operates on a mapping
    from key to :class:`SnapshotRecordDTO`; the text encoding is the codec's
    concern.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from memory_cache_pro.application.schemas.dto.snapshot import SnapshotRecordDTO


class SnapshotCodecPort(Protocol):
    """Text codec for ``{key: {"value": ..., "expire": ...}}`` snapshots."""

    def encode(self, records: Mapping[str, SnapshotRecordDTO]) -> str:
        """Encode records into snapshot text.

        Raises:
            SnapshotFormatError: If a value cannot be represented.
        """
        ...

    def decode(self, payload: str | bytes) -> dict[str, SnapshotRecordDTO]:
        """Decode snapshot text into records, preserving key order.

        Raises:
            SnapshotFormatError: If the payload is malformed.
        """
        ...
