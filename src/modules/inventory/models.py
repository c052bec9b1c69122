"""Inventory ledger model.

One ``Stock`` row per rice product, keyed by the product's display name.
The catalog and the ledger are joined by exact string equality on that
name, there is no foreign key between them.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Stock(BaseModel):
    """Stocked and currently available quantity (kg) of one product.

    ``available`` is signed: concurrent orders are not reserved against
    stock, so it may drop below zero and is never clamped.
    ``bought_total`` only ever grows, through ``populate``.
    """

    name = models.CharField(max_length=200, unique=True)
    bought_total = models.PositiveIntegerField(default=0)
    available = models.IntegerField(default=0)

    class Meta:
        db_table = "stocks"
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name}: {self.available}/{self.bought_total} kg"
