"""Django ORM implementation of the Order repository.

Concurrency control on status updates uses ``select_for_update()`` so two
requests cannot move (or refund) the same order at the same time.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet, Sum

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def _base_queryset(self) -> QuerySet:
        return Order.objects.prefetch_related("items", "status_history")

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        fields = dict(data)
        items = fields.pop("items", [])

        # Savepoint: a duplicate idempotency key leaves the outer transaction usable.
        with transaction.atomic():
            order = Order(**fields)
            order.save()

            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=order,
                        product_name=item["product_name"],
                        quantity=item["quantity"],
                        unit_price=item["unit_price"],
                        subtotal=item["quantity"] * item["unit_price"],
                    )
                    for item in items
                ]
            )

        logger.info("order.persisted", order_id=str(order.id), item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return self._base_queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        return self._base_queryset().filter(idempotency_key=key).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = self._base_queryset().order_by("-created_at", "-id")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def sold_quantities(self) -> Dict[str, int]:
        totals: Dict[str, int] = defaultdict(int)

        cart_rows = (
            OrderItem.objects.exclude(order__status=OrderStatus.CANCELED)
            .values("product_name")
            .annotate(sold=Sum("quantity"))
        )
        for row in cart_rows:
            totals[row["product_name"]] += row["sold"] or 0

        single_rows = (
            Order.objects.exclude(status=OrderStatus.CANCELED)
            .filter(items__isnull=True)
            .exclude(product_name="")
            .values("product_name")
            .annotate(sold=Sum("quantity"))
        )
        for row in single_rows:
            totals[row["product_name"]] += row["sold"] or 0

        return dict(sorted(totals.items()))

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()

        events = entity.domain_events
        OutboxEvent.objects.bulk_create(
            [
                OutboxEvent(
                    event_type=event.event_name,
                    aggregate_id=str(event.aggregate_id),
                    payload=event.to_payload(),
                    topic=event.topic,
                )
                for event in events
            ]
        )
        entity.clear_domain_events()

        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    def add_history(
        self,
        order_id: Any,
        new_status: str,
        old_status: str = "",
        changed_by: str = "",
        notes: str = "",
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=new_status,
            changed_by=changed_by,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=new_status,
        )
        return history
