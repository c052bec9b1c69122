"""Inventory DTOs.

- ``StockLineDTO``: one (product name, positive quantity) pair taken from
  an order, the input of the adjustment engine.
- ``StockDelta``: a signed change for one product, produced by the engine.
- ``PopulateStockDTO``: administrator restock request.
- ``AdjustmentSummary``: aggregated result of a batch adjustment.
"""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, field_validator


class StockLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_name: str
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class StockDelta(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_name: str
    quantity: int


class PopulateStockDTO(BaseModel):
    """Immutable DTO for ``PUT /stocks/populate/``.

    Validates:
    - ``name`` is a non-blank string (surrounding whitespace is stripped).
    - ``quantity`` is greater than zero.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: int

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Rice name is required.")
        return v.strip()

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quantity must be a positive number.")
        return v


class AdjustmentSummary(BaseModel):
    """``matched_count`` rows were found, ``modified_count`` actually changed."""

    model_config = ConfigDict(frozen=True)

    matched_count: int = 0
    modified_count: int = 0
    unmatched: Tuple[str, ...] = ()

    @property
    def fully_matched(self) -> bool:
        return not self.unmatched
