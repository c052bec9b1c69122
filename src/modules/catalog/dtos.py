"""Catalog DTOs (Pydantic v2, immutable).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial updates; ``None`` means unchanged.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.catalog.models import RiceCategory


def _check_price(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and v <= 0:
        raise ValueError("Original price must be positive.")
    return v


def _check_discount(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and not (0 <= v <= 100):
        raise ValueError("Discount percentage must be between 0 and 100.")
    return v


def _check_category(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in RiceCategory.values:
        raise ValueError(f"Category must be one of: {', '.join(RiceCategory.values)}.")
    return v


class CreateProductDTO(BaseModel):
    """Validates:
    - ``name``, ``description`` and ``image_url`` are non-blank.
    - ``original_price`` is greater than zero.
    - ``discount_percentage`` is within 0..100 (defaults to 0).
    - ``category`` is one of ``RiceCategory``.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str
    description: str
    original_price: Decimal
    discount_percentage: Decimal = Decimal("0")
    image_url: str
    category: str = RiceCategory.GENERAL.value

    @field_validator("name", "description", "image_url")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Field must not be empty.")
        return v

    @field_validator("original_price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @field_validator("discount_percentage")
    @classmethod
    def discount_in_range(cls, v: Decimal) -> Decimal:
        return _check_discount(v)

    @field_validator("category")
    @classmethod
    def category_must_be_known(cls, v: str) -> str:
        return _check_category(v)


class UpdateProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: Optional[str] = None
    description: Optional[str] = None
    original_price: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None
    image_url: Optional[str] = None
    category: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("Name must not be empty.")
        return v

    @field_validator("original_price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _check_price(v)

    @field_validator("discount_percentage")
    @classmethod
    def discount_in_range(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _check_discount(v)

    @field_validator("category")
    @classmethod
    def category_must_be_known(cls, v: Optional[str]) -> Optional[str]:
        return _check_category(v)

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually supplied."""
        return self.model_dump(exclude_none=True)
