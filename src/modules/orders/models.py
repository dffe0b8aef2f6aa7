"""SalesOrder and OrderItem models.

Business rules implemented:
- Order number auto-generated from the creation time (``SO-<epoch ms>``).
- Customer identity is captured as free text on the order itself.
- OrderItem snapshots the unit ``price`` given at order time; it never
  tracks later catalog price changes.
- Product FK uses PROTECT so a referenced product cannot be deleted.
- Items are owned by the order (CASCADE); the core never deletes orders.
- Status transitions are validated by ``OrderStateMachine`` (service layer).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import structlog
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    ORDER_NUMBER_MAX_RETRIES,
    ORDER_NUMBER_PREFIX,
    TERMINAL_STATES,
    OrderStatus,
)
from modules.orders.state_machine import order_state_machine

logger = structlog.get_logger(__name__)


class SalesOrder(BaseModel):
    """Sales order aggregate root.

    ``order_number`` is the human-facing identifier; the UUIDv7 ``id`` is
    used for API lookups and foreign keys.
    """

    order_number = models.CharField(max_length=32, unique=True, editable=False)
    customer_name = models.CharField(max_length=255)
    email = models.CharField(max_length=255)
    mobile_number = models.CharField(max_length=50)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    order_date = models.DateField()
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        db_table = "sales_orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="sales_orders_status_idx"),
            models.Index(fields=["order_date"], name="sales_orders_date_idx"),
            models.Index(fields=["-created_at"], name="sales_orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        return order_state_machine.can_transition(self.status, new_status)

    @property
    def allowed_next_statuses(self) -> list[str]:
        return list(order_state_machine.allowed_next(self.status))

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number(offset_ms: int = 0) -> str:
        """``SO-<milliseconds since epoch>``, optionally shifted forward."""
        millis = int(timezone.now().timestamp() * 1000) + offset_ms
        return f"{ORDER_NUMBER_PREFIX}-{millis}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            # Two orders created in the same millisecond would collide; bump
            # the candidate forward a few milliseconds before giving up.
            for attempt in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number(offset_ms=attempt)
                if not SalesOrder.objects.filter(order_number=candidate).exists():
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Line item linking a SalesOrder to a Product.

    ``price`` is the unit price supplied when the line was created.
    """

    order = models.ForeignKey(
        "orders.SalesOrder",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.price

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity} @ {self.price}"
