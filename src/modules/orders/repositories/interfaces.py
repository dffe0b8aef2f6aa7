"""Order repository interface.

Extends ``IRepository[SalesOrder]`` with the methods the order lifecycle
needs: atomic creation with lines, locked look-up for status transitions,
wholesale line replacement and status persistence.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import SalesOrder


class IOrderRepository(IRepository["SalesOrder"]):
    """Repository contract for the SalesOrder aggregate root.

    The aggregate includes its OrderItem children.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> SalesOrder:
        """Create an order with its lines atomically.

        ``data`` must include ``customer_name``, ``email``, ``mobile_number``,
        ``status``, ``order_date`` and ``items`` (list of dicts with
        ``product_id``, ``quantity``, ``price``).
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[SalesOrder]:
        """Retrieve an order with prefetched lines and products."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[SalesOrder]:
        """Same as ``get_by_id`` while holding a row lock on the order."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """List orders newest first with optional filters."""

    @abstractmethod
    def update(self, id: str, data: Dict[str, Any]) -> SalesOrder:
        """Update header fields; replace every line when ``items`` is given."""

    @abstractmethod
    def set_status(self, order: SalesOrder, status: str) -> SalesOrder:
        """Persist a new status on ``order``."""
