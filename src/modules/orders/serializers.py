"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views) and speaks the
camelCase wire format.  Business logic lives in the Service Layer, which
receives Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.core.serializers import StrictFieldsMixin
from modules.orders.models import OrderItem, SalesOrder

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderItemInputSerializer(StrictFieldsMixin, serializers.Serializer):
    """Validates a single line in an order request."""

    productId = serializers.UUIDField(source="product_id")
    quantity = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.00")
    )


class OrderInputSerializer(StrictFieldsMixin, serializers.Serializer):
    """Validates order creation and full update payloads.

    ``status`` is a free string here; the state machine decides whether it
    is a known status.
    """

    customerName = serializers.CharField(source="customer_name", max_length=255)
    email = serializers.CharField(max_length=255)
    mobileNumber = serializers.CharField(source="mobile_number", max_length=50)
    status = serializers.CharField(required=False, max_length=20)
    orderDate = serializers.DateField(source="order_date")
    orderItems = OrderItemInputSerializer(
        source="items", many=True, allow_empty=False
    )


class StatusUpdateSerializer(StrictFieldsMixin, serializers.Serializer):
    """Validates ``PATCH /api/orders/{id}/status/``."""

    status = serializers.CharField(max_length=20)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemProductSerializer(serializers.Serializer):
    """Product detail embedded in each order line."""

    id = serializers.UUIDField(read_only=True)
    sku = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    stockQty = serializers.IntegerField(source="stock_quantity", read_only=True)
    imageUrl = serializers.CharField(source="image_url", read_only=True)


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order lines with the referenced product."""

    productId = serializers.UUIDField(source="product_id", read_only=True)
    productName = serializers.CharField(source="product.name", read_only=True)
    subtotal = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )
    product = OrderItemProductSerializer(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "productId",
            "productName",
            "quantity",
            "price",
            "subtotal",
            "product",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested lines."""

    orderNumber = serializers.CharField(source="order_number", read_only=True)
    customerName = serializers.CharField(source="customer_name", read_only=True)
    mobileNumber = serializers.CharField(source="mobile_number", read_only=True)
    orderDate = serializers.DateField(source="order_date", read_only=True)
    totalAmount = serializers.DecimalField(
        source="total_amount", max_digits=12, decimal_places=2, read_only=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    allowedNextStatuses = serializers.ListField(
        source="allowed_next_statuses",
        child=serializers.CharField(),
        read_only=True,
    )
    orderItems = OrderItemSerializer(source="items", many=True, read_only=True)

    class Meta:
        model = SalesOrder
        fields = [
            "id",
            "orderNumber",
            "customerName",
            "email",
            "mobileNumber",
            "status",
            "orderDate",
            "totalAmount",
            "createdAt",
            "updatedAt",
            "allowedNextStatuses",
            "orderItems",
        ]
        read_only_fields = fields
