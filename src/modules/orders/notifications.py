"""Order notification dispatch.

After an order commits, its snapshot is handed to a Celery task that pushes
it to the third-party order-intake system.  Nothing here can fail the
caller: enqueue errors are logged, delivery errors are logged by the task.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict

import structlog
from kombu.exceptions import OperationalError

from modules.orders.dtos import OrderSnapshotDTO
from modules.orders.tasks import push_order_to_third_party

if TYPE_CHECKING:
    from modules.orders.models import SalesOrder

logger = structlog.get_logger(__name__)


def build_order_snapshot(order: SalesOrder) -> Dict[str, Any]:
    """``{"salesOrder": {...}, "products": [...]}`` for ``order``."""
    return OrderSnapshotDTO.from_entity(order).to_payload()


class IOrderNotifier(ABC):
    """Announces a committed order to external systems."""

    @abstractmethod
    def notify(self, order: SalesOrder) -> None:
        """Fire-and-forget; must never raise."""


class CeleryOrderNotifier(IOrderNotifier):
    def notify(self, order: SalesOrder) -> None:
        try:
            payload = build_order_snapshot(order)
            push_order_to_third_party.delay(payload)
        except (OperationalError, OSError) as exc:
            logger.error(
                "order.notification_enqueue_failed",
                order_id=str(order.id),
                error=str(exc),
            )
            return
        except Exception as exc:
            logger.error(
                "order.notification_enqueue_failed",
                order_id=str(order.id),
                error=str(exc),
                exc_info=True,
            )
            return
        logger.info("order.notification_enqueued", order_id=str(order.id))


class LoggingOrderNotifier(IOrderNotifier):
    """Records the notification without contacting the third party."""

    def notify(self, order: SalesOrder) -> None:
        logger.info("order.notification_skipped", order_id=str(order.id))
