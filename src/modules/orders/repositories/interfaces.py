"""Order repository interface.

Extends ``IRepository[Order]`` with what the Order aggregate needs:
atomic creation with line items, row-locked reads for status changes,
status history, and idempotency-key look-up.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order and its items atomically.

        ``data`` holds the ``Order`` column values plus ``items``: a list of
        dicts with ``product_name``, ``unit_price`` and ``quantity``.
        """

    @abstractmethod
    def save(self, entity: Order) -> Order:
        """Persist the order and flush its pending domain events to the outbox."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Like ``get_by_id`` but holds a row lock until the transaction ends."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Orders newest first, optionally filtered by field lookups."""

    @abstractmethod
    def add_history(
        self,
        order_id: Any,
        new_status: str,
        old_status: str = "",
        changed_by: str = "",
        notes: str = "",
    ) -> OrderStatusHistory:
        """Append one record to the order's audit trail."""

    @abstractmethod
    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        """Retrieve an order by its idempotency key."""

    @abstractmethod
    def sold_quantities(self) -> Dict[str, int]:
        """Units sold per product name, canceled orders excluded."""
