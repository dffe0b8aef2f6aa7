"""Product repositories package."""

from modules.products.repositories.django_repository import (
    InventoryDjangoLedger,
    ProductDjangoRepository,
)
from modules.products.repositories.interfaces import (
    IInventoryLedger,
    IProductRepository,
)

__all__ = [
    "IInventoryLedger",
    "IProductRepository",
    "InventoryDjangoLedger",
    "ProductDjangoRepository",
]
