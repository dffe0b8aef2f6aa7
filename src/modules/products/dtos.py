"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``sku`` is a non-empty string (normalised to uppercase).
    - ``price`` is not negative.
    - ``stock_quantity`` is not negative.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sku: str
    name: str
    price: Decimal
    description: str = ""
    stock_quantity: int = 0
    status: str = "active"
    image_url: str = ""

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SKU must not be empty.")
        return v.strip().upper()


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields are written.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sku: Optional[str] = None
    name: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    stock_quantity: Optional[int] = None
    status: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v

    @field_validator("sku")
    @classmethod
    def normalise_sku(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("SKU must not be empty.")
        return v.strip().upper()
