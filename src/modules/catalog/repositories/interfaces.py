"""Catalog repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.catalog.models import RiceProduct


class IProductRepository(IRepository["RiceProduct"]):

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[RiceProduct]:
        """Exact lookup by product name."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Products ordered by category then name."""

    @abstractmethod
    def save(self, entity: RiceProduct) -> RiceProduct:
        """Persist (create or update) a product."""

    @abstractmethod
    def delete(self, entity: RiceProduct) -> None:
        """Remove the product row."""
