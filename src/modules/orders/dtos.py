"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).

Field-level shape (types, positive quantities, non-negative prices) is
checked here.  Whether the request as a whole is acceptable (verified
identity, contact details, cart or single product) is decided by
``OrderService.create_order`` so the checks run in a fixed order.

- ``ContactDetailsDTO``: name / phone / address from the checkout form.
- ``CartItemDTO``: one cart line.
- ``CreateOrderDTO``: input for order creation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ContactDetailsDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = ""
    phone: str = ""
    address: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.name and self.phone and self.address)


class CartItemDTO(BaseModel):
    """A cart line as sent by the storefront: ``{name, price, quantity}``."""

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    quantity: int

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Cart item name must not be empty.")
        return v

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    ``purchaser_email`` / ``purchaser_uid`` are filled from the verified
    identity by the view.  Either ``cart_items`` or the single-product
    fields (``product_name``, ``quantity``, ``total_price``) describe what
    was bought.  ``total_price`` may be omitted for carts, in which case
    the sum of the line subtotals is used.
    """

    model_config = ConfigDict(frozen=True)

    purchaser_email: str = ""
    purchaser_uid: str = ""
    contact: ContactDetailsDTO = ContactDetailsDTO()
    cart_items: List[CartItemDTO] = []
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    total_price: Optional[Decimal] = None
    description: str = ""
    idempotency_key: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("total_price")
    @classmethod
    def total_must_not_be_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Total price cannot be negative.")
        return v

    @property
    def has_single_product(self) -> bool:
        return bool(
            self.product_name
            and self.quantity is not None
            and self.total_price is not None
        )

    @property
    def resolved_total(self) -> Decimal:
        if self.total_price is not None:
            return self.total_price
        return sum((item.subtotal for item in self.cart_items), Decimal("0.00"))

