"""Inventory Ledger service.

Keeps, per product name, the cumulative stocked quantity and the quantity
currently available for sale.  Order-driven changes come in as signed
deltas through ``apply_delta``; administrator restocks come in through
``populate``; the catalog keeps entries in step through the
``*_for_catalog_product`` / ``rename_product`` / ``delete_by_product_name``
hooks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Tuple

import structlog
from django.db import transaction
from pydantic import ValidationError

from modules.inventory.constants import AppliedResult
from modules.inventory.dtos import PopulateStockDTO
from modules.inventory.exceptions import InvalidStockQuantity, StockNotFound

if TYPE_CHECKING:
    from modules.inventory.models import Stock
    from modules.inventory.repositories.interfaces import IStockRepository

logger = structlog.get_logger(__name__)


class StockService:
    """Application service for the stock ledger."""

    def __init__(self, repository: IStockRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_stock(self, name: str) -> Stock:
        """Raises:
        StockNotFound: no entry is keyed by ``name``.
        """
        stock = self._repo.get_by_name(name)
        if stock is None:
            raise StockNotFound(f"No stock entry for '{name}'.")
        return stock

    def list_stocks(self) -> List[Stock]:
        return self._repo.list()

    def list_by_names(self, names: Iterable[str]) -> List[Stock]:
        return self._repo.list_by_names(names)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def apply_delta(self, name: str, quantity: int) -> AppliedResult:
        """Add a signed ``quantity`` to ``available`` of the entry ``name``.

        The match is exact.  The result is never clamped, so ``available``
        may become negative.  A zero delta on an existing entry reports
        ``UNCHANGED``; a missing entry reports ``NOT_MATCHED`` and nothing
        is written.
        """
        if quantity == 0:
            if self._repo.get_by_name(name) is None:
                return AppliedResult.NOT_MATCHED
            return AppliedResult.UNCHANGED

        matched = self._repo.increment(name, available=quantity)
        if not matched:
            logger.warning("stock.delta_not_matched", name=name, quantity=quantity)
            return AppliedResult.NOT_MATCHED

        logger.info("stock.delta_applied", name=name, quantity=quantity)
        return AppliedResult.APPLIED

    @transaction.atomic
    def populate(self, name: str, quantity: int) -> Tuple[Stock, bool]:
        """Restock ``name`` by ``quantity`` kg.

        Both ``bought_total`` and ``available`` grow by ``quantity``.  A
        missing entry is created with both set to ``quantity``.

        Returns:
            ``(stock, created)``.

        Raises:
            InvalidStockQuantity: blank name or non-positive quantity.
        """
        try:
            dto = PopulateStockDTO(name=name, quantity=quantity)
        except ValidationError as exc:
            raise InvalidStockQuantity(
                "Invalid input: Rice name and a positive quantity are required."
            ) from exc

        log = logger.bind(name=dto.name, quantity=dto.quantity)

        created = False
        if not self._repo.increment(dto.name, available=dto.quantity, bought_total=dto.quantity):
            _, created = self._repo.get_or_create(
                dto.name, bought_total=dto.quantity, available=dto.quantity
            )
            if not created:
                # Another request created the entry in between.
                self._repo.increment(
                    dto.name, available=dto.quantity, bought_total=dto.quantity
                )

        stock = self.get_stock(dto.name)
        log.info(
            "stock.populated",
            created=created,
            bought_total=stock.bought_total,
            available=stock.available,
        )
        return stock, created

    def create_for_catalog_product(self, name: str) -> Stock:
        """Ensure an entry exists for a new catalog product (0 bought / 0 available)."""
        stock, created = self._repo.get_or_create(name)
        if created:
            logger.info("stock.entry_created", name=name)
        return stock

    @transaction.atomic
    def rename_product(self, old_name: str, new_name: str) -> bool:
        """Re-key the entry after a catalog rename; ``False`` if there was none.

        When ``new_name`` already has an entry (stocked through ``populate``
        before the catalog knew it), the old entry is folded into it: both
        totals are added and the old entry is removed.
        """
        if old_name == new_name:
            return False

        source = self._repo.get_by_name(old_name)
        if source is not None and self._repo.get_by_name(new_name) is not None:
            self._repo.increment(
                new_name, available=source.available, bought_total=source.bought_total
            )
            self._repo.delete_by_name(old_name)
            logger.info(
                "stock.entry_merged",
                old_name=old_name,
                new_name=new_name,
                available=source.available,
                bought_total=source.bought_total,
            )
            return True

        renamed = self._repo.rename(old_name, new_name)
        logger.info(
            "stock.entry_renamed", old_name=old_name, new_name=new_name, renamed=renamed
        )
        return renamed

    def delete_by_product_name(self, name: str) -> bool:
        deleted = self._repo.delete_by_name(name)
        logger.info("stock.entry_deleted", name=name, deleted=deleted)
        return deleted
