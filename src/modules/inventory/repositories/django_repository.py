"""Django ORM implementation of the stock ledger repository.

Quantity changes are issued as ``UPDATE stocks SET available = available + %s``
through ``F()`` expressions, so concurrent orders never lose an update.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from modules.inventory.models import Stock
from modules.inventory.repositories.interfaces import IStockRepository

logger = structlog.get_logger(__name__)


class StockDjangoRepository(IStockRepository):
    """Concrete ledger repository backed by the ``stocks`` table."""

    def get_by_id(self, id: str) -> Optional[Stock]:
        try:
            return Stock.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_name(self, name: str) -> Optional[Stock]:
        return Stock.objects.filter(name=name).first()

    def list(self) -> List[Stock]:
        return list(Stock.objects.order_by("name"))

    def list_by_names(self, names: Iterable[str]) -> List[Stock]:
        return list(Stock.objects.filter(name__in=set(names)).order_by("name"))

    def increment(self, name: str, available: int, bought_total: int = 0) -> int:
        changes = {
            "available": F("available") + available,
            "updated_at": timezone.now(),
        }
        if bought_total:
            changes["bought_total"] = F("bought_total") + bought_total
        return Stock.objects.filter(name=name).update(**changes)

    def get_or_create(
        self, name: str, bought_total: int = 0, available: int = 0
    ) -> Tuple[Stock, bool]:
        existing = self.get_by_name(name)
        if existing is not None:
            return existing, False
        try:
            # Savepoint keeps the outer transaction usable if the insert loses a race.
            with transaction.atomic():
                stock = Stock.objects.create(
                    name=name, bought_total=bought_total, available=available
                )
        except IntegrityError:
            logger.info("stock.create_race_lost", name=name)
            return Stock.objects.get(name=name), False
        return stock, True

    def delete_by_name(self, name: str) -> bool:
        deleted, _ = Stock.objects.filter(name=name).delete()
        return deleted > 0

    def rename(self, old_name: str, new_name: str) -> bool:
        return (
            Stock.objects.filter(name=old_name).update(
                name=new_name, updated_at=timezone.now()
            )
            > 0
        )
