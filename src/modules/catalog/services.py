"""Catalog service layer.

Every catalog write keeps the stock ledger in step in the same
transaction: a new product gets an empty ledger entry, a rename re-keys
the entry, a delete removes it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction

from modules.catalog.exceptions import ProductAlreadyExists, ProductNotFound
from modules.catalog.models import RiceProduct

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
    from modules.catalog.repositories.interfaces import IProductRepository
    from modules.inventory.services import StockService

logger = structlog.get_logger(__name__)


class ProductService:
    def __init__(self, repository: IProductRepository, stock_service: StockService) -> None:
        self._repo = repository
        self._stock = stock_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> RiceProduct:
        """Raises:
        ProductAlreadyExists: the name is taken.
        """
        log = logger.bind(name=dto.name)
        if self._repo.get_by_name(dto.name):
            log.warning("product.duplicate_name")
            raise ProductAlreadyExists("A product with this name already exists.")

        product = self._repo.save(RiceProduct(**dto.model_dump()))
        self._stock.create_for_catalog_product(product.name)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> RiceProduct:
        """Apply the supplied fields; a new name re-keys the stock entry.

        Raises:
            ProductNotFound: no product with ``id``.
            ProductAlreadyExists: the new name belongs to another product.
        """
        product = self.get_product(id)
        changes = dto.changes()
        old_name = product.name
        new_name = changes.get("name", old_name)

        if new_name != old_name and self._repo.get_by_name(new_name):
            raise ProductAlreadyExists(
                f'Another product with the name "{new_name}" already exists.'
            )

        for field, value in changes.items():
            setattr(product, field, value)
        product = self._repo.save(product)

        if product.name != old_name:
            self._stock.rename_product(old_name, product.name)

        logger.info("product.updated", product_id=str(id), fields=sorted(changes))
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Raises:
        ProductNotFound: no product with ``id``.
        """
        product = self.get_product(id)
        name = product.name
        self._repo.delete(product)
        self._stock.delete_by_product_name(name)
        logger.info("product.deleted_with_stock", name=name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        return self._repo.list(filters)

    def get_product(self, id: str) -> RiceProduct:
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product
