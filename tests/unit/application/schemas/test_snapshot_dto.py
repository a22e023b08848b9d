from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from memory_cache_pro.application.schemas.dto.snapshot import (
    NEVER_MARKER,
    ImportOptions,
    SnapshotRecordDTO,
)
from memory_cache_pro.domain.entities.cache_entry import NEVER, CacheEntry, ExpiresAt
from memory_cache_pro.infrastructure.scheduling.virtual_timer import VirtualTimerHandle


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("NaN", None),
        (None, None),
        (True, None),
        ("soon", None),
        (math.nan, None),
        (math.inf, None),
        ({"at": 1}, None),
        (1500, 1500.0),
        (1500.5, 1500.5),
        ("1500", 1500.0),
    ],
)
def test_expire_is_decoded_permissively(raw: object, expected: float | None) -> None:
    record = SnapshotRecordDTO.model_validate({"value": 1, "expire": raw})
    assert record.expire == expected


def test_missing_fields_default_to_permanent_none_value() -> None:
    record = SnapshotRecordDTO.model_validate({})
    assert record.value is None
    assert record.expire is None


def test_unknown_record_fields_are_ignored() -> None:
    record = SnapshotRecordDTO.model_validate({"value": 1, "expire": "NaN", "timeout": 42})
    assert record.model_dump() == {"value": 1, "expire": NEVER_MARKER}


def test_expire_serialization() -> None:
    assert SnapshotRecordDTO(value=1, expire=None).model_dump()["expire"] == "NaN"
    assert SnapshotRecordDTO(value=1, expire=2000.0).model_dump()["expire"] == 2000
    assert SnapshotRecordDTO(value=1, expire=2000.25).model_dump()["expire"] == 2000.25


def test_to_expiry_is_a_tagged_union() -> None:
    assert SnapshotRecordDTO(value=1).to_expiry() is NEVER
    assert SnapshotRecordDTO(value=1, expire=5.0).to_expiry() == ExpiresAt(5.0)


def test_from_entry_drops_the_timer() -> None:
    handle = VirtualTimerHandle(due_ms=10.0, action=lambda: None)
    entry = CacheEntry(value={"a": 1}, expiry=ExpiresAt(10.0), timer=handle)

    record = SnapshotRecordDTO.from_entry(entry)

    assert record.model_dump() == {"value": {"a": 1}, "expire": 10}
    assert SnapshotRecordDTO.from_entry(CacheEntry(value="p")).model_dump() == {
        "value": "p",
        "expire": "NaN",
    }


def test_import_options_accepts_alias_and_name() -> None:
    assert ImportOptions.model_validate({"skipDuplicates": True}).skip_duplicates is True
    assert ImportOptions.model_validate({"skip_duplicates": True}).skip_duplicates is True
    assert ImportOptions().skip_duplicates is False


def test_import_options_ignores_unknown_fields() -> None:
    options = ImportOptions.model_validate({"skipDuplicates": True, "overwrite": True})
    assert options.skip_duplicates is True
    assert "overwrite" not in options.model_dump()


def test_import_options_rejects_non_boolean_flag() -> None:
    with pytest.raises(ValidationError):
        ImportOptions.model_validate({"skipDuplicates": "sometimes"})
