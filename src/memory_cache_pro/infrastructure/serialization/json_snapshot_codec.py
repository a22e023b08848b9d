# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""JSON Snapshot Codec.

Synopsis:
    Implements :class:`SnapshotCodecPort` with the standard library ``json``
    module and validates records through :class:`SnapshotRecordDTO`.

Design:
    * Pure JSON (utf-8); no pickle.
    * Compact separators, key order preserved.
    * ``NaN``/``Infinity`` are never emitted; "never expires" travels as the
      string ``"NaN"``.
    * Every failure surfaces as :class:`SnapshotFormatError` with the original
      exception chained.

Layer:
    infrastructure/serialization
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from memory_cache_pro.application.interfaces.snapshot_codec_port import SnapshotCodecPort
from memory_cache_pro.application.schemas.dto.snapshot import SnapshotRecordDTO
from memory_cache_pro.domain.exceptions.cache import SnapshotFormatError

__all__ = ["JsonSnapshotCodec"]


class JsonSnapshotCodec(SnapshotCodecPort):
    """Snapshot codec for the ``{key: {"value", "expire"}}`` JSON format."""

    def encode(self, records: Mapping[str, SnapshotRecordDTO]) -> str:
        """Encode records as a JSON object.

        Raises:
            SnapshotFormatError: If a value is not JSON-serializable.
        """
        plain: dict[str, Any] = {key: record.model_dump() for key, record in records.items()}
        try:
            return json.dumps(plain, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise SnapshotFormatError(
                "Cache snapshot contains a value that cannot be encoded as JSON",
                details={"reason": str(exc)},
            ) from exc

    def decode(self, payload: str | bytes) -> dict[str, SnapshotRecordDTO]:
        """Decode a JSON snapshot into records.

        Raises:
            SnapshotFormatError: If the payload is not JSON, is not an object,
                or contains a record that is not an object.
        """
        try:
            raw = json.loads(payload)
        except (TypeError, ValueError) as exc:
            raise SnapshotFormatError(
                "Cache snapshot is not valid JSON",
                details={"reason": str(exc)},
            ) from exc

        if not isinstance(raw, dict):
            raise SnapshotFormatError(
                "Cache snapshot must be a JSON object",
                details={"type": type(raw).__name__},
            )

        records: dict[str, SnapshotRecordDTO] = {}
        for key, item in raw.items():
            if not isinstance(item, dict):
                raise SnapshotFormatError(
                    "Cache snapshot record must be a JSON object",
                    details={"key": key, "type": type(item).__name__},
                )
            try:
                records[key] = SnapshotRecordDTO.model_validate(item)
            except ValidationError as exc:  # pragma: no cover - fields are permissive
                raise SnapshotFormatError(
                    "Cache snapshot record is invalid",
                    details={"key": key, "errors": exc.errors()},
                ) from exc
        return records
