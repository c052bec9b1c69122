"""Catalog API views.

Anyone may browse the catalog; writes are reserved for the store
administrator.  Domain exceptions are translated into HTTP status codes
here; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
from modules.catalog.exceptions import ProductAlreadyExists, ProductNotFound
from modules.catalog.filters import ProductFilter
from modules.catalog.models import RiceProduct
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.catalog.serializers import ProductSerializer
from modules.catalog.services import ProductService
from modules.core.permissions import ReadOnlyOrStoreAdmin
from modules.inventory.repositories.django_repository import StockDjangoRepository
from modules.inventory.services import StockService

_WRITABLE_FIELDS = (
    "name",
    "description",
    "original_price",
    "discount_percentage",
    "image_url",
    "category",
)

_NOT_FOUND = {"detail": "Rice product not found."}


class ProductViewSet(ListModelMixin, GenericViewSet):
    """Catalog CRUD through ``ProductService``; no direct ORM writes."""

    permission_classes = [ReadOnlyOrStoreAdmin]
    filterset_class = ProductFilter
    search_fields = ["name", "description"]
    ordering_fields = ["name", "original_price", "category"]
    ordering = ["category", "name"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = RiceProduct.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            stock_service=StockService(repository=StockDjangoRepository()),
        )

    def get_queryset(self):
        return self._service.list_products()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(ProductSerializer(product).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = {key: request.data[key] for key in _WRITABLE_FIELDS if key in request.data}
        try:
            dto = CreateProductDTO(**data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            product = self._service.create_product(dto)
        except ProductAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        data = {key: request.data[key] for key in _WRITABLE_FIELDS if key in request.data}
        try:
            dto = UpdateProductDTO(**data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        if not dto.changes():
            return Response(
                {"detail": "No update data provided."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except ProductAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(ProductSerializer(product).data)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/"""
        return self.partial_update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/ (also removes the stock entry)."""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
