# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Base DTO (Application Layer).

Purpose:
    Canonical Pydantic base for application-layer DTOs. Transport-agnostic.

Layer: application/schemas/dto
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseDTO(BaseModel):
    """Base class for application-layer DTOs.

    Notes:
        - Strict fields (``extra='forbid'``) unless a DTO documents otherwise.
        - Fields may be populated by name or by alias.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
    )
