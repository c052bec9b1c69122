"""Stock ledger API views.

``GET /stocks/`` lists the ledger for any signed-in user; restocking and the
sales summary are reserved for the store administrator.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.permissions import IsStoreAdmin
from modules.inventory.exceptions import InvalidStockQuantity
from modules.inventory.models import Stock
from modules.inventory.repositories.django_repository import StockDjangoRepository
from modules.inventory.serializers import SalesSummarySerializer, StockSerializer
from modules.inventory.services import StockService
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import build_order_service


class StockViewSet(GenericViewSet):
    queryset = Stock.objects.all()
    serializer_class = StockSerializer
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StockService(repository=StockDjangoRepository())

    def get_permissions(self):
        if self.action in ("populate", "summary"):
            return [IsStoreAdmin()]
        return super().get_permissions()

    def list(self, request: Request) -> Response:
        """GET /api/v1/stocks/"""
        stocks = self._service.list_stocks()
        return Response(StockSerializer(stocks, many=True).data)

    @action(detail=False, methods=["put", "post"], url_path="populate")
    def populate(self, request: Request) -> Response:
        """PUT|POST /api/v1/stocks/populate/  body: ``{"name": str, "quantity": int}``"""
        name = request.data.get("name")
        quantity = request.data.get("quantity")
        try:
            stock, created = self._service.populate(name, quantity)
        except InvalidStockQuantity as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        if created:
            message = f"New stock item {stock.name} created and populated with {quantity}kg."
        else:
            message = (
                f"Successfully added {quantity}kg to {stock.name}. "
                f"Total bought: {stock.bought_total}, Total available: {stock.available}."
            )
        return Response(
            {"message": message, "stock": StockSerializer(stock).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"], url_path="summary")
    def summary(self, request: Request) -> Response:
        """GET /api/v1/stocks/summary/: units sold per product, canceled orders excluded."""
        totals = build_order_service(OrderDjangoRepository()).sales_summary()
        rows = [{"name": name, "total_sold": sold} for name, sold in totals.items()]
        return Response(SalesSummarySerializer(rows, many=True).data)
