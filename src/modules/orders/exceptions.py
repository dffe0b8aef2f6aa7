"""Order domain exceptions.

Raised by the Service Layer and the state machine when business rules are
violated.  Each carries a machine-checkable ``code`` and the structured
details a caller needs to correct the request (current/requested status,
allowed next statuses).  Views render ``exc.to_dict()``.

``InsufficientStock`` and ``ProductNotFound`` live with the inventory
ledger in ``modules.products`` and are re-exported here because the order
workflows raise them too.
"""

from __future__ import annotations

from typing import Iterable

from rest_framework import status

from modules.core.exceptions import DomainError, InvalidInput, PersistenceFailure
from modules.products.exceptions import InsufficientStock, ProductNotFound

__all__ = [
    "InsufficientStock",
    "InvalidInput",
    "InvalidTransition",
    "OrderNotFound",
    "PersistenceFailure",
    "ProductNotFound",
    "TerminalState",
    "UnknownStatus",
]


class OrderNotFound(DomainError):
    """The requested order does not exist."""

    code = "order_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Order not found."


class UnknownStatus(InvalidInput):
    """The requested status is not one of the recognised values."""

    code = "unknown_status"

    def __init__(self, requested, allowed: Iterable[str]) -> None:
        super().__init__(
            "Invalid status",
            requested=requested,
            allowed=list(allowed),
        )


class TerminalState(DomainError):
    """The order is delivered or cancelled; no further change is permitted."""

    code = "terminal_state"

    def __init__(self, current: str, requested: str | None = None) -> None:
        super().__init__(
            f"{str(current).capitalize()} orders cannot be modified",
            current=current,
            requested=requested,
        )
        self.current = current
        self.requested = requested


class InvalidTransition(DomainError):
    """The requested status is not reachable from the current one."""

    code = "invalid_transition"

    def __init__(self, current: str, requested: str, allowed: Iterable[str]) -> None:
        allowed = list(allowed)
        super().__init__(
            "Invalid status transition",
            current=current,
            requested=requested,
            allowed=allowed,
        )
        self.current = current
        self.requested = requested
        self.allowed = allowed
