"""Order domain constants.

Status choices plus the immutable lookup tables behind the order state
machine.  The tables are built once at import time and wrapped in
``MappingProxyType`` / ``frozenset`` so nothing can mutate them at runtime.

Flow::

    pending -> confirmed -> shipped -> delivered
       \\____________\\__________\\______-> cancelled

``delivered`` and ``cancelled`` are absorbing.
"""

from types import MappingProxyType

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


ALL_STATUSES: tuple = tuple(OrderStatus.values)

# Source of truth for the state machine.  Tuples keep the documented order
# of the "allowed" list returned to API clients.
VALID_TRANSITIONS = MappingProxyType(
    {
        OrderStatus.PENDING: (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
        OrderStatus.CONFIRMED: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        OrderStatus.SHIPPED: (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
        OrderStatus.DELIVERED: (),
        OrderStatus.CANCELLED: (),
    }
)

# Forward-only ordering.  Cancelled ranks above everything so "no backward
# motion" never blocks a cancellation.
STATUS_RANK = MappingProxyType(
    {
        OrderStatus.PENDING: 0,
        OrderStatus.CONFIRMED: 1,
        OrderStatus.SHIPPED: 2,
        OrderStatus.DELIVERED: 3,
        OrderStatus.CANCELLED: 99,
    }
)

TERMINAL_STATES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# Initial statuses accepted on creation (everything but cancelled).
CREATABLE_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
    }
)

ORDER_NUMBER_PREFIX = "SO"
ORDER_NUMBER_MAX_RETRIES = 5
