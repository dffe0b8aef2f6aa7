"""Product repository and inventory ledger interfaces.

``IProductRepository`` covers catalog CRUD.  ``IInventoryLedger`` is the
only path through which order workflows read or change stock: every
mutation is a signed delta applied atomically at the database level, and
callers are expected to run inside a ``transaction.atomic()`` block.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product catalog."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU."""

    @abstractmethod
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete a product; ``False`` if it does not exist."""


class IInventoryLedger(ABC):
    """Reads and signed adjustments of per-product stock."""

    @abstractmethod
    def lock_products(self, product_ids: Iterable[Any]) -> Dict[Any, Product]:
        """Row-lock the given products and return them keyed by id.

        Unknown ids are simply absent from the result.
        """

    @abstractmethod
    def get_stock(self, product_id: Any) -> Optional[int]:
        """Current stock for a product, ``None`` if it does not exist."""

    @abstractmethod
    def decrement(self, product_id: Any, quantity: int) -> int:
        """Remove ``quantity`` units and return the remaining stock.

        Raises ``InsufficientStock`` when fewer than ``quantity`` units are
        available; stock is never driven negative.
        """

    @abstractmethod
    def increment(self, product_id: Any, quantity: int) -> int:
        """Return ``quantity`` units to stock and return the new level.

        Raises ``ProductNotFound`` if the product row is missing.
        """
