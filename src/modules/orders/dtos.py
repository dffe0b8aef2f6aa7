"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``) and reject
unknown fields (``extra="forbid"``).

- ``CreateOrderItemDTO``: one requested line (product, quantity, unit price).
- ``CreateOrderDTO``: order creation input (customer identity + lines).
- ``UpdateOrderDTO``: full order update input (lines replaced wholesale).
- ``OrderSnapshotDTO``: the payload pushed to the third-party order intake.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from modules.orders.constants import OrderStatus

if TYPE_CHECKING:
    from modules.orders.models import SalesOrder


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order line.

    ``price`` is the unit price the caller agreed to; it is stored as-is and
    never re-read from the catalog.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    product_id: UUID
    quantity: int
    price: Decimal

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.price


def _reject_duplicate_products(items: List[CreateOrderItemDTO]) -> None:
    product_ids = [item.product_id for item in items]
    if len(product_ids) != len(set(product_ids)):
        raise ValueError("Duplicate product IDs are not allowed in the same order.")


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``items`` must contain at least one line.
    - a product appears at most once per order.

    ``status`` is checked against the state machine by the service so an
    unknown value surfaces as ``UnknownStatus``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    customer_name: str
    email: str
    mobile_number: str
    status: str = OrderStatus.PENDING.value
    order_date: date
    items: List[CreateOrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @model_validator(mode="after")
    def no_duplicate_products(self):
        _reject_duplicate_products(self.items)
        return self

    @property
    def total_amount(self) -> Decimal:
        """Sum of quantity x supplied price over every line."""
        return sum((item.line_total for item in self.items), Decimal("0.00"))


class UpdateOrderDTO(CreateOrderDTO):
    """Immutable DTO for full order updates (``PUT``).

    ``status`` is optional; when given it must equal the current status.
    """

    status: Optional[str] = None  # type: ignore[assignment]


# ---------------------------------------------------------------------------
# Outbound snapshot
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )


class SalesOrderHeaderDTO(_CamelModel):
    id: UUID
    order_number: str
    customer_name: str
    email: str
    mobile_number: str
    status: str
    order_date: date
    total_amount: Decimal


class SnapshotLineDTO(_CamelModel):
    product_id: UUID
    product_name: str
    quantity: int
    price: Decimal


class OrderSnapshotDTO(_CamelModel):
    """Fixed payload shape delivered to the external order-intake system."""

    sales_order: SalesOrderHeaderDTO
    products: List[SnapshotLineDTO]

    @classmethod
    def from_entity(cls, order: SalesOrder) -> OrderSnapshotDTO:
        """Build the snapshot from an order with items/products prefetched."""
        return cls(
            sales_order=SalesOrderHeaderDTO(
                id=order.id,
                order_number=order.order_number,
                customer_name=order.customer_name,
                email=order.email,
                mobile_number=order.mobile_number,
                status=order.status,
                order_date=order.order_date,
                total_amount=order.total_amount,
            ),
            products=[
                SnapshotLineDTO(
                    product_id=item.product_id,
                    product_name=item.product.name,
                    quantity=item.quantity,
                    price=item.price,
                )
                for item in order.items.all()
            ],
        )

    def to_payload(self) -> dict:
        """JSON-ready dict with camelCase keys (decimals as strings)."""
        return self.model_dump(mode="json", by_alias=True)
