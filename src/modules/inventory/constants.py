"""Inventory domain constants."""

import enum

DEFAULT_LOW_STOCK_THRESHOLD = 50

STOCK_UNIT = "kg"


class AppliedResult(str, enum.Enum):
    """Outcome of applying one signed delta to the ledger."""

    APPLIED = "applied"
    UNCHANGED = "unchanged"
    NOT_MATCHED = "not_matched"


class AdjustmentDirection(str, enum.Enum):
    DEDUCT = "deduct"
    REFUND = "refund"


class NotificationOutcome(str, enum.Enum):
    DISPATCHED = "dispatched"
    ABOVE_THRESHOLD = "above_threshold"
    NO_RECIPIENT = "no_recipient"
    FAILED = "failed"
