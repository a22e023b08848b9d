# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Cache Domain Exceptions

Purpose:
    Validation failures raised synchronously by cache operations, and format
    failures raised while encoding or decoding snapshots.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class InvalidArgument(DomainError, ValueError):
    """A cache operation was called with an argument outside its domain."""

    code = "INVALID_ARGUMENT"


class InvalidTTL(InvalidArgument):
    """TTL is not a finite positive number of milliseconds."""

    code = "INVALID_TTL"


class InvalidExpiryCallback(InvalidArgument):
    """Expiry callback is not callable."""

    code = "INVALID_EXPIRY_CALLBACK"


class SnapshotFormatError(DomainError, ValueError):
    """Snapshot payload could not be encoded to, or decoded from, JSON."""

    code = "SNAPSHOT_FORMAT_ERROR"
