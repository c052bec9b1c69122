"""Order service layer (Use Cases).

Couples the order state machine with the stock ledger:

* creating an order takes its lines out of stock and may raise low-stock
  alerts;
* cancelling an order puts exactly those lines back, once.

The order itself is the primary result.  Stock adjustment and alerting are
secondary: when they fail the failure is logged and the order operation
still succeeds (``DegradedSideEffect``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import DatabaseError, IntegrityError, transaction

from modules.inventory.adjustments import StockAdjustmentEngine
from modules.inventory.notifications import LowStockNotifier, build_low_stock_notifier
from modules.inventory.repositories.django_repository import StockDjangoRepository
from modules.inventory.services import StockService
from modules.orders.constants import OrderStatus, resolve_status
from modules.orders.events import OrderCanceled, OrderPlaced, OrderStatusChanged
from modules.orders.exceptions import (
    InvalidOrderInput,
    InvalidOrderStatus,
    OrderAccessForbidden,
    OrderNotFound,
    Unauthenticated,
)
from shared.domain.exceptions import DegradedSideEffect

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Collaborators are injected so tests can replace the ledger, the
    adjustment engine or the notifier with failing doubles.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        stock_service: StockService,
        adjustment_engine: StockAdjustmentEngine,
        notifier: LowStockNotifier,
    ) -> None:
        self._order_repo = order_repository
        self._stock = stock_service
        self._engine = adjustment_engine
        self._notifier = notifier

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Place an order and take its lines out of stock.

        Steps:
        1. Require a verified purchaser email.
        2. Require name, phone and address.
        3. Require a non-empty cart or a complete single product.
        4. Return the existing order on an idempotency-key hit, including
           a concurrent request that inserted the same key first.
        5. Persist the order as ``Pending``.
        6. Deduct stock (failure is logged, the order stands).
        7. Check every touched product against the low-stock threshold.
        8. Record history and the ``OrderPlaced`` event.

        Raises:
            Unauthenticated: no verified email.
            InvalidOrderInput: missing contact details or order contents.
        """
        if not dto.purchaser_email:
            logger.warning("order.rejected_unauthenticated")
            raise Unauthenticated(
                "User authentication error: Email not found in token."
            )

        log = logger.bind(purchaser_email=dto.purchaser_email)

        if not dto.contact.is_complete:
            log.warning("order.rejected_missing_contact")
            raise InvalidOrderInput(
                "User details from form (name, phone, address) are required."
            )
        if not dto.cart_items and not dto.has_single_product:
            log.warning("order.rejected_no_contents")
            raise InvalidOrderInput("Please provide product details or cart items.")

        if dto.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
            if existing:
                log.info(
                    "order.idempotency_hit",
                    order_id=str(existing.id),
                    key=dto.idempotency_key,
                )
                return existing

        try:
            order = self._order_repo.create(self._order_fields(dto))
        except IntegrityError:
            existing = (
                self._order_repo.get_by_idempotency_key(dto.idempotency_key)
                if dto.idempotency_key
                else None
            )
            if existing is None:
                raise
            log.info(
                "order.idempotency_race_lost",
                order_id=str(existing.id),
                key=dto.idempotency_key,
            )
            return existing

        log = log.bind(order_id=str(order.id))
        log.info("order.created", total_price=str(order.total_price))

        self._deduct_stock(order, log)

        order.add_domain_event(
            OrderPlaced(
                aggregate_id=order.id,
                purchaser_email=order.purchaser_email,
                stock_deducted=order.stock_deducted,
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            new_status=order.status,
            changed_by=dto.purchaser_email,
            notes="Order created",
        )

        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_status(
        self,
        order_id: Any,
        new_status: Any,
        requester_email: str,
        notes: str = "",
        override: bool = False,
    ) -> Order:
        """Move an order to ``new_status``.

        The order row stays locked until the transaction commits, so two
        concurrent cancellations cannot both refund.  Requesting the status
        the order already has changes nothing.  Entering ``Canceled``
        returns the deducted stock to the ledger.

        ``override`` lets the caller skip the ownership check; the API sets
        it for the store administrator.

        Raises:
            InvalidOrderStatus: unknown status, or forbidden transition.
            OrderNotFound: order does not exist.
            OrderAccessForbidden: requester does not own the order.
        """
        target = resolve_status(new_status)
        if target is None:
            logger.warning("order.unknown_status", order_id=str(order_id), value=new_status)
            raise InvalidOrderStatus(f"Invalid status value: {new_status!r}.")

        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        self._check_access(order, requester_email, override)

        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status,
            new_status=target.value,
            changed_by=requester_email,
        )

        if order.status == target:
            log.info("order.status_unchanged")
            return self._order_repo.get_by_id(str(order.id)) or order

        if not order.can_transition_to(target):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {target.value}."
            )

        old_status = order.status
        if target == OrderStatus.CANCELED:
            self._refund_stock(order, log)

        order.status = target
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=old_status,
                new_status=target.value,
                changed_by=requester_email,
            )
        )
        if target == OrderStatus.CANCELED:
            order.add_domain_event(
                OrderCanceled(
                    aggregate_id=order.id,
                    stock_refunded=order.stock_refunded,
                    changed_by=requester_email,
                )
            )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            new_status=target.value,
            old_status=old_status,
            changed_by=requester_email,
            notes=notes,
        )

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id)) or order

    def cancel_order(
        self,
        order_id: Any,
        requester_email: str,
        notes: str = "",
        override: bool = False,
    ) -> Order:
        """Shorthand for ``update_status(order_id, "Canceled", ...)``."""
        return self.update_status(
            order_id,
            OrderStatus.CANCELED,
            requester_email,
            notes=notes or "Order canceled",
            override=override,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(
        self, order_id: Any, requester_email: str, override: bool = False
    ) -> Order:
        """Raises:
        OrderNotFound: order does not exist.
        OrderAccessForbidden: requester does not own the order.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        self._check_access(order, requester_email, override)
        return order

    def list_orders_for(self, email: str) -> QuerySet:
        """Every order placed by ``email``, newest first, whatever its status."""
        return self._order_repo.list({"purchaser_email": email})

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        return self._order_repo.list(filters)

    def sales_summary(self) -> Dict[str, int]:
        """Units sold per product name over all orders that were not canceled."""
        return self._order_repo.sold_quantities()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _order_fields(dto: CreateOrderDTO) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "purchaser_email": dto.purchaser_email,
            "purchaser_uid": dto.purchaser_uid,
            "purchaser_name": dto.contact.name,
            "purchaser_phone": dto.contact.phone,
            "purchaser_address": dto.contact.address,
            "total_price": dto.resolved_total,
            "description": dto.description,
            "idempotency_key": dto.idempotency_key,
            "status": OrderStatus.PENDING,
            "items": [
                {
                    "product_name": item.name,
                    "unit_price": item.price,
                    "quantity": item.quantity,
                }
                for item in dto.cart_items
            ],
        }
        if not dto.cart_items:
            fields["product_name"] = dto.product_name
            fields["quantity"] = dto.quantity
        return fields

    @staticmethod
    def _check_access(order: Order, requester_email: str, override: bool) -> None:
        if override:
            return
        if not requester_email or order.purchaser_email != requester_email:
            logger.warning(
                "order.access_denied",
                order_id=str(order.id),
                requester_email=requester_email,
            )
            raise OrderAccessForbidden("You are not allowed to access this order.")

    def _deduct_stock(self, order: Order, log: Any) -> None:
        lines = order.stock_lines()
        try:
            summary = self._engine.deduct(lines)
        except DegradedSideEffect as exc:
            log.error("order.stock_deduction_failed", error=str(exc))
            return

        order.stock_deducted = True
        log.info(
            "order.stock_deducted",
            matched_count=summary.matched_count,
            unmatched=list(summary.unmatched),
        )
        self._check_low_stock([line.product_name for line in lines], log)

    def _refund_stock(self, order: Order, log: Any) -> None:
        if not order.stock_deducted or order.stock_refunded:
            log.info(
                "order.stock_refund_skipped",
                stock_deducted=order.stock_deducted,
                stock_refunded=order.stock_refunded,
            )
            return

        try:
            summary = self._engine.refund(order.stock_lines())
        except DegradedSideEffect as exc:
            log.error("order.stock_refund_failed", error=str(exc))
            return

        order.stock_refunded = True
        log.info(
            "order.stock_refunded",
            matched_count=summary.matched_count,
            unmatched=list(summary.unmatched),
        )

    def _check_low_stock(self, product_names: List[str], log: Any) -> None:
        try:
            stocks = self._stock.list_by_names(product_names)
            for stock in stocks:
                self._notifier.maybe_notify(stock.name, stock.available)
        except (DatabaseError, DegradedSideEffect) as exc:
            log.error("order.low_stock_check_failed", error=str(exc))


def build_order_service(order_repository: IOrderRepository) -> OrderService:
    """Wire ``OrderService`` with the Django ledger and the configured notifier."""
    stock_service = StockService(repository=StockDjangoRepository())
    return OrderService(
        order_repository=order_repository,
        stock_service=stock_service,
        adjustment_engine=StockAdjustmentEngine(stock_service),
        notifier=build_low_stock_notifier(),
    )
