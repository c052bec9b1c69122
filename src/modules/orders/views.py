"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.

Customers see and change only their own orders.  The store administrator
(``IsStoreAdmin``) may act on any order and list them all.
"""

from __future__ import annotations

from typing import Any, Callable

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.permissions import IsStoreAdmin
from modules.orders.dtos import CartItemDTO, ContactDetailsDTO, CreateOrderDTO
from modules.orders.exceptions import (
    InvalidOrderInput,
    OrderAccessForbidden,
    OrderNotFound,
    Unauthenticated,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer, OrderStatusUpdateSerializer
from modules.orders.services import build_order_service


def _first(data: Any, *keys: str, default: Any = None) -> Any:
    """First present key; the storefront historically sent camelCase."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _error(detail: str, code: int) -> Response:
    return Response({"detail": detail}, status=code)


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through the
    service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_price", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service(OrderDjangoRepository())

    def get_permissions(self):
        if self.action == "all_orders":
            return [IsStoreAdmin()]
        return super().get_permissions()

    def get_throttles(self) -> list[BaseThrottle]:
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "all_orders"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        if self.action == "all_orders":
            return self._service.list_orders()
        return self._service.list_orders_for(getattr(self.request.user, "email", ""))

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Body: ``user_details {name, phone, address}`` plus either
        ``cart_items [{name, price, quantity}]`` or ``product_name``,
        ``quantity``, ``total_price`` (and optional ``description``).
        Supports idempotency via the ``Idempotency-Key`` header.
        """
        data = request.data
        try:
            dto = CreateOrderDTO(
                purchaser_email=request.user.email or "",
                purchaser_uid=request.user.uid or "",
                contact=ContactDetailsDTO(
                    **(_first(data, "user_details", "userDetails", default=None) or {})
                ),
                cart_items=[
                    CartItemDTO(**item)
                    for item in (_first(data, "cart_items", "cartItems", default=None) or [])
                ],
                product_name=_first(data, "product_name", "productName"),
                quantity=_first(data, "quantity"),
                total_price=_first(data, "total_price", "totalPrice"),
                description=_first(data, "description", default="") or "",
                idempotency_key=request.headers.get("Idempotency-Key"),
            )
        except (PydanticValidationError, TypeError, ValueError) as exc:
            return _error(str(exc), status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.create_order(dto)
        except Unauthenticated as exc:
            return _error(str(exc), status.HTTP_401_UNAUTHORIZED)
        except InvalidOrderInput as exc:
            return _error(str(exc), status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def _paginated(self, request: Request) -> Response:
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(OrderSerializer(page, many=True).data)
        return Response(OrderSerializer(queryset, many=True).data)

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/ - the caller's own orders, newest first."""
        return self._paginated(request)

    @action(detail=False, methods=["get"], url_path="all")
    def all_orders(self, request: Request) -> Response:
        """GET /api/v1/orders/all/ - every order (administrator)."""
        return self._paginated(request)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        return self._run(
            lambda: self._service.get_order(
                pk, request.user.email, override=request.user.is_admin
            )
        )

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/  body: ``{"status": ..., "notes": ...}``"""
        payload = OrderStatusUpdateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        return self._run(
            lambda: self._service.update_status(
                pk,
                payload.validated_data["status"],
                request.user.email,
                notes=payload.validated_data["notes"],
                override=request.user.is_admin,
            )
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/"""
        return self.partial_update(request, pk)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/ (idempotent)."""
        return self._run(
            lambda: self._service.cancel_order(
                pk,
                request.user.email,
                notes=request.data.get("notes", ""),
                override=request.user.is_admin,
            )
        )

    def _run(self, operation: Callable[[], Order]) -> Response:
        try:
            order = operation()
        except OrderNotFound:
            return _error("Order not found.", status.HTTP_404_NOT_FOUND)
        except OrderAccessForbidden as exc:
            return _error(str(exc), status.HTTP_403_FORBIDDEN)
        except InvalidOrderInput as exc:
            return _error(str(exc), status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(order).data)
