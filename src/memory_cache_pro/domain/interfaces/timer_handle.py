# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Timer Handle Protocol.

Synopsis:
    Domain-level Protocol (PEP 544) for a cancellable scheduled action. A cache
    entry owns exactly one handle when it expires, and must cancel it before
    it is replaced or removed.

Design:
    * ``asyncio.TimerHandle`` satisfies this contract structurally.
    * ``cancel()`` must be idempotent and a no-op once the action has run.

Layer:
    domain/interfaces
"""

from __future__ import annotations

from typing import Protocol


class TimerHandle(Protocol):
    """Handle for a pending scheduled action."""

    def cancel(self) -> None:
        """Prevent the action from running. Idempotent."""

    def cancelled(self) -> bool:
        """Return True if :meth:`cancel` was called."""
