"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderEvent(DomainEvent):
    topic = "orders"


@dataclass(frozen=True)
class OrderPlaced(OrderEvent):
    """Raised once the order row exists and stock deduction has been attempted."""

    purchaser_email: str = ""
    stock_deducted: bool = False


@dataclass(frozen=True)
class OrderStatusChanged(OrderEvent):
    old_status: str = ""
    new_status: str = ""
    changed_by: str = ""


@dataclass(frozen=True)
class OrderCanceled(OrderEvent):
    """Raised on the transition into ``Canceled``."""

    stock_refunded: bool = False
    changed_by: str = ""
