"""Order domain constants.

Status values and the allowed transitions of the order state machine.
``Completed`` and ``Canceled`` are terminal; asking for the status an
order already has is a no-op handled by the service, not a transition.
"""

from typing import Optional

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    PLACED = "Placed", "Placed"
    SHIPPED = "Shipped", "Shipped"
    COMPLETED = "Completed", "Completed"
    CANCELED = "Canceled", "Canceled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {
        OrderStatus.PLACED,
        OrderStatus.SHIPPED,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELED,
    },
    OrderStatus.PLACED: {
        OrderStatus.SHIPPED,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELED,
    },
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED, OrderStatus.CANCELED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.COMPLETED, OrderStatus.CANCELED}

ORDER_NUMBER_MAX_RETRIES = 5

_STATUS_LOOKUP = {choice.value.lower(): choice for choice in OrderStatus}


def resolve_status(value: object) -> Optional[OrderStatus]:
    """Map a client-supplied status string to ``OrderStatus`` (case-insensitive)."""
    if not isinstance(value, str):
        return None
    return _STATUS_LOOKUP.get(value.strip().lower())
