"""Django ORM implementations of the product repository and inventory ledger.

``ProductDjangoRepository`` follows the Null Object pattern for look-ups:
methods return ``None`` instead of raising, and the Service Layer decides
how to translate a missing entity into an API response.

``InventoryDjangoLedger`` never reads-then-writes stock in Python.  Deltas
are ``F()`` expressions executed as a single ``UPDATE``; decrements carry a
``stock_quantity >= quantity`` guard so concurrent orders cannot oversell
even when the database ignores ``SELECT ... FOR UPDATE`` (SQLite).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.products.exceptions import InsufficientStock, ProductNotFound
from modules.products.models import Product
from modules.products.repositories.interfaces import (
    IInventoryLedger,
    IProductRepository,
)

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None):
        """Return a queryset of products, optionally filtered.

        Examples of valid filters::

            {"status": "active"}
            {"name__icontains": "widget"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU (case-insensitive via upper normalisation)."""
        return Product.objects.filter(sku=sku.strip().upper()).first()

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id), sku=entity.sku)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Delete a product by ID.

        Raises ``django.db.models.ProtectedError`` when order lines still
        reference the product.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.deleted", product_id=str(id))
        return True


class InventoryDjangoLedger(IInventoryLedger):
    """Stock ledger backed by the ``products.stock_quantity`` column."""

    def lock_products(self, product_ids: Iterable[Any]) -> Dict[Any, Product]:
        ids = set(product_ids)
        # Lock in primary-key order so concurrent orders that share products
        # always acquire row locks in the same sequence (no deadlocks).
        products = Product.objects.select_for_update().filter(id__in=ids).order_by("id")
        return {product.id: product for product in products}

    def get_stock(self, product_id: Any) -> Optional[int]:
        try:
            return (
                Product.objects.filter(id=product_id)
                .values_list("stock_quantity", flat=True)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def decrement(self, product_id: Any, quantity: int) -> int:
        updated = Product.objects.filter(
            id=product_id, stock_quantity__gte=quantity
        ).update(
            stock_quantity=F("stock_quantity") - quantity, updated_at=timezone.now()
        )
        remaining = self.get_stock(product_id)
        if not updated:
            raise InsufficientStock(
                product_id, available=remaining or 0, requested=quantity
            )

        logger.info(
            "inventory.decremented",
            product_id=str(product_id),
            quantity=quantity,
            remaining=remaining,
        )
        return remaining

    def increment(self, product_id: Any, quantity: int) -> int:
        updated = Product.objects.filter(id=product_id).update(
            stock_quantity=F("stock_quantity") + quantity, updated_at=timezone.now()
        )
        if not updated:
            raise ProductNotFound(
                f"Product {product_id} not found.", productId=str(product_id)
            )
        restored = self.get_stock(product_id)

        logger.info(
            "inventory.incremented",
            product_id=str(product_id),
            quantity=quantity,
            restored_stock=restored,
        )
        return restored
