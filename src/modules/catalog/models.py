"""Rice product catalog.

The product ``name`` doubles as the key of the product's stock ledger
entry, so it is unique and stripped of surrounding whitespace.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class RiceCategory(models.TextChoices):
    BIRYANI = "Biryani", "Biryani"
    IDLY = "Idly", "Idly"
    DOSA = "Dosa", "Dosa"
    GENERAL = "General", "General"


class RiceProduct(BaseModel):
    name = models.CharField(max_length=200, unique=True)
    description = models.TextField()
    original_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    image_url = models.CharField(max_length=500)
    category = models.CharField(
        max_length=20,
        choices=RiceCategory.choices,
        default=RiceCategory.GENERAL,
    )

    class Meta:
        db_table = "rice_products"
        ordering = ["category", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(original_price__gt=0),
                name="rice_products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(discount_percentage__gte=0)
                & models.Q(discount_percentage__lte=100),
                name="rice_products_discount_range",
            ),
        ]

    @property
    def effective_price(self) -> Decimal:
        """Price after discount, rounded to paise."""
        price = Decimal(self.original_price)
        discount = Decimal(self.discount_percentage or 0)
        if discount > 0:
            price = price * (1 - discount / 100)
        return price.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def clean(self) -> None:
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if self.original_price is not None and self.original_price <= 0:
            raise ValidationError({"original_price": "Original price must be positive."})

    def save(self, *args, **kwargs) -> None:
        if self.name:
            self.name = self.name.strip()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"
