"""Asynchronous tasks of the orders module."""

import requests
import structlog
from celery import shared_task
from django.conf import settings

logger = structlog.get_logger(__name__)


@shared_task(name="orders.push_order_to_third_party", ignore_result=True)
def push_order_to_third_party(payload: dict) -> bool:
    """POST an order snapshot to the external order-intake system.

    Best effort: a failed delivery is logged and dropped, never retried.
    Returns ``True`` when the remote side answered 2xx.
    """
    sales_order = payload.get("salesOrder", {})
    log = logger.bind(
        order_id=sales_order.get("id"),
        order_number=sales_order.get("orderNumber"),
        url=settings.THIRD_PARTY_ORDER_URL,
    )

    try:
        response = requests.post(
            settings.THIRD_PARTY_ORDER_URL,
            json=payload,
            headers={
                "Authorization": f"Bearer {settings.THIRD_PARTY_ORDER_TOKEN}",
                "Content-Type": "application/json",
            },
            timeout=settings.THIRD_PARTY_TIMEOUT,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        log.error(
            "order.notification_failed",
            error=str(exc),
            status_code=getattr(exc.response, "status_code", None),
        )
        return False

    log.info("order.notification_sent", status_code=response.status_code)
    return True
