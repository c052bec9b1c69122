"""Inventory domain exceptions.

``StockAdjustmentFailed`` and ``NotificationDispatchFailed`` are degraded
side effects: the order workflow logs them and carries on.
"""

from __future__ import annotations

from shared.domain.exceptions import DegradedSideEffect


class StockNotFound(Exception):
    """No ledger entry exists for the requested product name."""


class InvalidStockQuantity(Exception):
    """Populate was called with a blank name or a non-positive quantity."""


class StockAdjustmentFailed(DegradedSideEffect):
    """The ledger could not be updated for an order's lines."""


class NotificationDispatchFailed(DegradedSideEffect):
    """A low-stock alert could not be handed to its delivery channel."""
