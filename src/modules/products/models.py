"""Product catalog model.

Business rules implemented:
- SKU is unique and normalised to uppercase.
- Price is never negative (DB check constraint + model validation).
- Stock quantity is never negative (``PositiveIntegerField`` adds the DB
  check); order workflows only touch it through the inventory ledger.
- A product referenced by an order line cannot be deleted (the FK on
  ``OrderItem`` uses ``PROTECT``).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class ProductStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class Product(BaseModel):
    """Catalog entry whose ``stock_quantity`` is the inventory ledger row."""

    sku = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    stock_quantity = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.ACTIVE,
    )
    image_url = models.URLField(max_length=500, blank=True, default="")

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["status"], name="products_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.sku:
            self.sku = self.sku.strip().upper()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.sku:
            self.sku = self.sku.strip().upper()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                sku=self.sku,
                stock_quantity=self.stock_quantity,
            )

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"
