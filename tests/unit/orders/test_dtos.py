"""Unit tests for order DTOs."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, UpdateOrderDTO

pytestmark = pytest.mark.unit


def _payload(**overrides):
    data = {
        "customer_name": "Ana Souza",
        "email": "ana@example.com",
        "mobile_number": "11912340001",
        "order_date": date(2024, 5, 10),
        "items": [{"product_id": uuid4(), "quantity": 2, "price": Decimal("3.50")}],
    }
    data.update(overrides)
    return data


class TestCreateOrderDTO:
    def test_defaults_to_pending(self):
        dto = CreateOrderDTO(**_payload())
        assert dto.status == "pending"

    def test_total_amount(self):
        dto = CreateOrderDTO(
            **_payload(
                items=[
                    {"product_id": uuid4(), "quantity": 2, "price": Decimal("3.50")},
                    {"product_id": uuid4(), "quantity": 1, "price": Decimal("0.99")},
                ]
            )
        )
        assert dto.total_amount == Decimal("7.99")

    def test_is_frozen(self):
        dto = CreateOrderDTO(**_payload())
        with pytest.raises(ValidationError):
            dto.customer_name = "Someone else"

    def test_empty_items(self):
        with pytest.raises(ValidationError, match="at least one item"):
            CreateOrderDTO(**_payload(items=[]))

    def test_duplicate_products(self):
        product_id = uuid4()
        line = {"product_id": product_id, "quantity": 1, "price": Decimal("1.00")}
        with pytest.raises(ValidationError, match="Duplicate product"):
            CreateOrderDTO(**_payload(items=[line, line]))

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(**_payload(notes="leave at the door"))


class TestCreateOrderItemDTO:
    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(product_id=uuid4(), quantity=quantity, price=Decimal("1"))

    def test_price_must_not_be_negative(self):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(product_id=uuid4(), quantity=1, price=Decimal("-0.01"))

    def test_zero_price_is_allowed(self):
        item = CreateOrderItemDTO(product_id=uuid4(), quantity=3, price=Decimal("0"))
        assert item.line_total == Decimal("0")


class TestUpdateOrderDTO:
    def test_status_is_optional(self):
        assert UpdateOrderDTO(**_payload()).status is None
