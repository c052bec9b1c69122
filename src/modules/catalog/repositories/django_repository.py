"""Django ORM implementation of the catalog repository.

Lookups return ``None`` instead of raising; the service decides how a
missing product is reported.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from modules.catalog.models import RiceProduct
from modules.catalog.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):

    def get_by_id(self, id: str) -> Optional[RiceProduct]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return RiceProduct.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_name(self, name: str) -> Optional[RiceProduct]:
        return RiceProduct.objects.filter(name=name.strip()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = RiceProduct.objects.order_by("category", "name")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def save(self, entity: RiceProduct) -> RiceProduct:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id), name=entity.name)
        return entity

    def delete(self, entity: RiceProduct) -> None:
        product_id = str(entity.id)
        entity.delete()
        logger.info("product.deleted", product_id=product_id)
