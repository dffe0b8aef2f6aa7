"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the order
aggregate (SalesOrder + OrderItems) is persisted atomically; when the
service already holds a transaction these become savepoints.

Status transitions lock the order row with ``select_for_update()``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.models import OrderItem, SalesOrder
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_HEADER_FIELDS = ("customer_name", "email", "mobile_number", "order_date", "status")


class OrderDjangoRepository(IOrderRepository):
    """Concrete SalesOrder repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> SalesOrder:
        """Create an order with its lines atomically.

        ``total_amount`` is computed from the lines, never taken from input.
        """
        order = SalesOrder(
            customer_name=data["customer_name"],
            email=data["email"],
            mobile_number=data["mobile_number"],
            status=data["status"],
            order_date=data["order_date"],
        )
        order.save()

        items = data["items"]
        order.total_amount = self._write_items(order, items)
        order.save(update_fields=["total_amount"])

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            order_number=order.order_number,
            item_count=len(items),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[SalesOrder]:
        """Retrieve an order with its lines and their products prefetched.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                SalesOrder.objects.prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[SalesOrder]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Must be called inside a transaction.  Lines are prefetched so the
        caller can apply stock deltas while the row is locked.
        """
        try:
            return (
                SalesOrder.objects.select_for_update()
                .prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None):
        """Return a queryset of orders, newest first.

        Examples of valid filters::

            {"status": "pending"}
            {"order_date__gte": date(2024, 1, 1)}
        """
        queryset = SalesOrder.objects.prefetch_related("items__product").order_by(
            "-created_at", "-id"
        )
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    @transaction.atomic
    def update(self, id: str, data: Dict[str, Any]) -> SalesOrder:
        """Update header fields and, when ``items`` is given, every line.

        Lines are replaced wholesale (delete-all, recreate) and the total is
        recomputed from the new lines.
        """
        order = SalesOrder.objects.select_for_update().filter(id=id).first()
        if order is None:
            raise SalesOrder.DoesNotExist(f"Order {id} not found.")

        for field in _HEADER_FIELDS:
            value = data.get(field)
            if value is not None:
                setattr(order, field, value)

        items = data.get("items")
        if items is not None:
            order.items.all().delete()
            order.total_amount = self._write_items(order, items)

        order.save()
        logger.info(
            "order.persisted_update",
            order_id=str(order.id),
            replaced_items=items is not None,
        )
        return order

    @transaction.atomic
    def set_status(self, order: SalesOrder, status: str) -> SalesOrder:
        order.status = status
        order.save(update_fields=["status"])
        return order

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _write_items(order: SalesOrder, items: Iterable[Dict[str, Any]]) -> Decimal:
        total = Decimal("0.00")
        for item_data in items:
            item = OrderItem(
                order=order,
                product_id=item_data["product_id"],
                quantity=item_data["quantity"],
                price=item_data["price"],
            )
            item.save()
            total += item.subtotal
        return total
