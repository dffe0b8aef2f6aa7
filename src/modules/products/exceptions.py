"""Product and inventory exceptions.

Raised by the Service Layer and the inventory ledger when business rules
are violated.  The API layer (Views) catches these and renders
``exc.to_dict()`` with ``exc.status_code``.
"""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import DomainError


class ProductAlreadyExists(DomainError):
    """A product with the same SKU already exists."""

    code = "product_already_exists"
    status_code = status.HTTP_409_CONFLICT


class ProductNotFound(DomainError):
    """The requested product does not exist."""

    code = "product_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Product not found."


class ProductInUse(DomainError):
    """The product is referenced by order lines and cannot be deleted."""

    code = "product_in_use"
    status_code = status.HTTP_409_CONFLICT


class InsufficientStock(DomainError):
    """Not enough stock to cover the requested quantity.

    A product that does not exist reports ``available=0``.
    """

    code = "insufficient_stock"

    def __init__(self, product_id, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for product ID {product_id}",
            productId=str(product_id),
            available=available,
            requested=requested,
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested
