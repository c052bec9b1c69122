"""Order, OrderItem, and OrderStatusHistory models.

An order is either a cart (one ``OrderItem`` per line) or a legacy single
product order carried directly on the row (``product_name``, ``quantity``,
``total_price`` and an optional ``description``).  Both shapes feed the
stock ledger through ``Order.stock_lines``.

``stock_deducted`` / ``stock_refunded`` record what the ledger has already
seen for this order, so a cancellation refunds exactly what was deducted and
never refunds twice.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any, List

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.inventory.dtos import StockLineDTO
from modules.orders.constants import (
    ORDER_NUMBER_MAX_RETRIES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    ``order_number`` is a human-readable identifier auto-generated on first
    save (format: ``ORD-YYYYMMDD-XXXXXX``).  The UUIDv7 ``id`` is used for
    all internal references and API lookups.

    Purchaser email and uid come from the verified identity, never from the
    request body.
    """

    order_number: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )

    purchaser_email: models.EmailField = models.EmailField(max_length=254)
    purchaser_uid: models.CharField = models.CharField(
        max_length=128, blank=True, default=""
    )
    purchaser_name: models.CharField = models.CharField(max_length=200)
    purchaser_phone: models.CharField = models.CharField(max_length=32)
    purchaser_address: models.TextField = models.TextField()

    # Legacy single-product shape
    product_name: models.CharField = models.CharField(
        max_length=200, blank=True, default=""
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        null=True, blank=True
    )
    description: models.TextField = models.TextField(blank=True, default="")

    total_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    idempotency_key: models.CharField = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
    )
    stock_deducted: models.BooleanField = models.BooleanField(default=False)
    stock_refunded: models.BooleanField = models.BooleanField(default=False)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(
                fields=["purchaser_email", "-created_at"],
                name="orders_purchaser_created_idx",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    # ------------------------------------------------------------------
    # Ledger view of the order
    # ------------------------------------------------------------------

    def stock_lines(self) -> List[StockLineDTO]:
        """(product name, quantity) pairs this order takes out of stock.

        Cart lines win; the legacy single product is used only for orders
        without items.
        """
        items = list(self.items.all())
        if items:
            return [
                StockLineDTO(product_name=item.product_name, quantity=item.quantity)
                for item in items
            ]
        if self.product_name and self.quantity:
            return [
                StockLineDTO(product_name=self.product_name, quantity=self.quantity)
            ]
        return []

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        now = timezone.now()
        suffix = secrets.token_hex(3).upper()
        return f"ORD-{now:%Y%m%d}-{suffix}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            for _ in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number()
                if not Order.objects.filter(order_number=candidate).exists():
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """One cart line.

    ``product_name`` and ``unit_price`` are snapshots taken at checkout; the
    name is also the key into the stock ledger.  ``subtotal`` is always
    ``quantity * unit_price``, recalculated on every save.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product_name: models.CharField = models.CharField(max_length=200)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.subtotal = self.quantity * Decimal(self.unit_price)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity} ({self.subtotal})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    ``changed_by`` is the verified email of whoever asked for the change;
    ``old_status`` is empty for the record written at creation.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        blank=True,
        default="",
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    changed_by: models.CharField = models.CharField(
        max_length=254, blank=True, default=""
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status or '-'} -> {self.new_status}"
