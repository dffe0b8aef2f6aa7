"""Product service layer (Use Cases).

Orchestrates catalog CRUD, delegating persistence to the injected
``IProductRepository``.

Business rules enforced here:
- SKU must be unique.
- Price and stock cannot be negative (validated by DTO).
- A product referenced by order lines cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction
from django.db.models import ProtectedError

from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductInUse,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

_UPDATABLE_FIELDS = (
    "sku",
    "name",
    "price",
    "description",
    "stock_quantity",
    "status",
    "image_url",
)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing SKU uniqueness.

        Raises:
            ProductAlreadyExists: if the SKU is already taken.
        """
        log = logger.bind(sku=dto.sku)

        if self._repo.get_by_sku(dto.sku):
            log.warning("product.duplicate_sku")
            raise ProductAlreadyExists(
                f"SKU '{dto.sku}' already registered.", sku=dto.sku
            )

        product = Product(
            sku=dto.sku,
            name=dto.name,
            price=dto.price,
            description=dto.description,
            stock_quantity=dto.stock_quantity,
            status=dto.status,
            image_url=dto.image_url,
        )
        product = self._repo.save(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductAlreadyExists: if the new SKU belongs to another product.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.", productId=str(id))

        if dto.sku is not None and dto.sku != product.sku:
            if self._repo.get_by_sku(dto.sku):
                raise ProductAlreadyExists(
                    f"SKU '{dto.sku}' already registered.", sku=dto.sku
                )

        for field in _UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)

        product = self._repo.save(product)
        logger.info("product.updated", product_id=str(id))
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Delete a product that no order line references.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductInUse: if order lines reference the product.
        """
        try:
            deleted = self._repo.delete(id)
        except ProtectedError as exc:
            logger.warning("product.delete_blocked", product_id=str(id))
            raise ProductInUse(
                f"Product {id} is referenced by existing orders.", productId=str(id)
            ) from exc
        if not deleted:
            raise ProductNotFound(f"Product {id} not found.", productId=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None):
        """Return a queryset of products, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.", productId=str(id))
        return product
