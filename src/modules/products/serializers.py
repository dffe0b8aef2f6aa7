"""Product DRF serializers for API input/output.

The wire format is camelCase (``stockQty``, ``imageUrl``); serializers map
it onto the snake_case model and DTO fields.  Business logic lives in the
Service Layer, which receives Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.core.serializers import StrictFieldsMixin
from modules.products.models import Product, ProductStatus


class ProductInputSerializer(StrictFieldsMixin, serializers.Serializer):
    """Validates create (full) and update (``partial=True``) payloads."""

    sku = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.00")
    )
    stockQty = serializers.IntegerField(
        source="stock_quantity", min_value=0, required=False
    )
    status = serializers.ChoiceField(choices=ProductStatus.choices, required=False)
    imageUrl = serializers.URLField(
        source="image_url", max_length=500, required=False, allow_blank=True
    )


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    stockQty = serializers.IntegerField(source="stock_quantity", read_only=True)
    imageUrl = serializers.CharField(source="image_url", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "price",
            "stockQty",
            "status",
            "imageUrl",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
