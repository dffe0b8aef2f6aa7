"""Integration tests for the /api/orders/ endpoints."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest

from modules.orders.models import SalesOrder
from modules.orders.tasks import push_order_to_third_party

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/orders/"


def _body(*lines, **overrides):
    data = {
        "customerName": "Ana Souza",
        "email": "ana@example.com",
        "mobileNumber": "+55 11 91234-0001",
        "orderDate": "2024-05-10",
        "orderItems": [
            {"productId": str(product.id), "quantity": qty, "price": price}
            for product, qty, price in lines
        ],
    }
    data.update(overrides)
    return data


def _stock(product) -> int:
    product.refresh_from_db()
    return product.stock_quantity


@pytest.fixture()
def created_order(api_client, make_product):
    product = make_product(stock_quantity=10)
    response = api_client.post(ORDERS_URL, _body((product, 2, "5.00")), format="json")
    assert response.status_code == 201
    return response.json()["order"], product


class TestCreateOrder:
    def test_created(self, api_client, make_product):
        product = make_product(name="Gaming Mouse", stock_quantity=5)

        response = api_client.post(ORDERS_URL, _body((product, 5, "10.00")), format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Order created successfully"
        assert data["stockUpdated"] is True
        order = data["order"]
        assert order["status"] == "pending"
        assert order["totalAmount"] == "50.00"
        assert order["orderNumber"].startswith("SO-")
        assert order["allowedNextStatuses"] == ["confirmed", "cancelled"]
        line = order["orderItems"][0]
        assert line["productId"] == str(product.id)
        assert line["productName"] == "Gaming Mouse"
        assert line["subtotal"] == "50.00"
        assert line["product"]["sku"] == product.sku
        assert _stock(product) == 0

    def test_insufficient_stock(self, api_client, make_product):
        product = make_product(stock_quantity=0)

        response = api_client.post(ORDERS_URL, _body((product, 1, "10.00")), format="json")

        assert response.status_code == 400
        assert response.json() == {
            "code": "insufficient_stock",
            "detail": f"Insufficient stock for product ID {product.id}",
            "productId": str(product.id),
            "available": 0,
            "requested": 1,
        }
        assert SalesOrder.objects.count() == 0

    def test_unknown_field_is_rejected(self, api_client, make_product):
        product = make_product()

        response = api_client.post(
            ORDERS_URL, _body((product, 1, "1.00"), couponCode="X"), format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"
        assert "couponCode" in response.json()["errors"]

    def test_unknown_nested_field_is_rejected(self, api_client, make_product):
        product = make_product()
        body = _body((product, 1, "1.00"))
        body["orderItems"][0]["discount"] = "0.50"

        response = api_client.post(ORDERS_URL, body, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"

    @pytest.mark.parametrize(
        "line_override",
        [{"quantity": 0}, {"quantity": -2}, {"price": "-1.00"}],
    )
    def test_invalid_line_values(self, api_client, make_product, line_override):
        product = make_product()
        body = _body((product, 1, "1.00"))
        body["orderItems"][0].update(line_override)

        response = api_client.post(ORDERS_URL, body, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"
        assert _stock(product) == 10

    def test_empty_items(self, api_client):
        response = api_client.post(ORDERS_URL, _body(), format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"

    def test_duplicate_products(self, api_client, make_product):
        product = make_product()

        response = api_client.post(
            ORDERS_URL, _body((product, 1, "1.00"), (product, 2, "1.00")), format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"
        assert response.json()["errors"][0]["message"].endswith(
            "Duplicate product IDs are not allowed in the same order."
        )

    def test_unknown_initial_status(self, api_client, make_product):
        product = make_product()

        response = api_client.post(
            ORDERS_URL, _body((product, 1, "1.00"), status="archived"), format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "unknown_status"

    def test_notification_is_pushed_after_commit(
        self, api_client, make_product, django_capture_on_commit_callbacks
    ):
        product = make_product()

        with patch("modules.orders.tasks.requests.post") as post:
            with django_capture_on_commit_callbacks(execute=True):
                response = api_client.post(
                    ORDERS_URL, _body((product, 1, "1.00")), format="json"
                )

        assert response.status_code == 201
        post.assert_called_once()
        payload = post.call_args.kwargs["json"]
        assert payload["salesOrder"]["orderNumber"] == response.json()["order"]["orderNumber"]

    def test_notification_failure_does_not_affect_the_order(
        self, api_client, make_product, django_capture_on_commit_callbacks
    ):
        import requests

        product = make_product()

        with patch(
            "modules.orders.tasks.requests.post",
            side_effect=requests.ConnectionError("refused"),
        ):
            with django_capture_on_commit_callbacks(execute=True):
                response = api_client.post(
                    ORDERS_URL, _body((product, 1, "1.00")), format="json"
                )

        assert response.status_code == 201
        assert SalesOrder.objects.count() == 1
        assert _stock(product) == 9

    @pytest.mark.django_db(transaction=True)
    def test_enqueue_crash_after_commit_still_answers_created(
        self, api_client, make_product
    ):
        product = make_product(stock_quantity=5)

        with patch.object(
            push_order_to_third_party, "delay", side_effect=RuntimeError("boom")
        ) as delay:
            response = api_client.post(
                ORDERS_URL, _body((product, 1, "1.00")), format="json"
            )

        assert response.status_code == 201
        delay.assert_called_once()
        assert SalesOrder.objects.count() == 1
        assert _stock(product) == 4


class TestReadOrders:
    def test_retrieve(self, api_client, created_order):
        order, _ = created_order
        response = api_client.get(f"{ORDERS_URL}{order['id']}/")
        assert response.status_code == 200
        assert response.json()["orderNumber"] == order["orderNumber"]

    def test_retrieve_missing(self, api_client):
        response = api_client.get(f"{ORDERS_URL}{uuid4()}/")
        assert response.status_code == 404
        assert response.json()["code"] == "order_not_found"

    def test_retrieve_malformed_id(self, api_client):
        response = api_client.get(f"{ORDERS_URL}not-a-uuid/")
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"

    def test_list_is_paginated(self, api_client, make_product):
        product = make_product(stock_quantity=100)
        for _ in range(3):
            api_client.post(ORDERS_URL, _body((product, 1, "1.00")), format="json")

        response = api_client.get(ORDERS_URL, {"limit": 2, "page": 2})

        assert response.status_code == 200
        data = response.json()
        assert len(data["results"]) == 1
        assert data["pagination"] == {
            "total": 3,
            "pages": 2,
            "current": 2,
            "hasNext": False,
            "hasPrev": True,
            "limit": 2,
        }

    def test_page_past_the_end_is_empty(self, api_client, created_order):
        response = api_client.get(ORDERS_URL, {"page": 9})
        assert response.status_code == 200
        assert response.json()["results"] == []

    def test_filters(self, api_client, make_product):
        product = make_product(stock_quantity=100)
        api_client.post(
            ORDERS_URL,
            _body((product, 1, "1.00"), customerName="Bruno Lima", orderDate="2024-01-15"),
            format="json",
        )
        api_client.post(
            ORDERS_URL,
            _body((product, 1, "1.00"), customerName="Carla Mendes", orderDate="2024-03-20"),
            format="json",
        )

        by_name = api_client.get(ORDERS_URL, {"name": "bruno"}).json()
        assert [o["customerName"] for o in by_name["results"]] == ["Bruno Lima"]

        by_range = api_client.get(
            ORDERS_URL, {"orderDateFrom": "2024-03-01", "orderDateTo": "2024-03-31"}
        ).json()
        assert [o["customerName"] for o in by_range["results"]] == ["Carla Mendes"]

        by_status = api_client.get(ORDERS_URL, {"status": "confirmed"}).json()
        assert by_status["results"] == []


class TestUpdateStatus:
    def _patch(self, api_client, order_id, status):
        return api_client.patch(
            f"{ORDERS_URL}{order_id}/status/", {"status": status}, format="json"
        )

    def test_confirm(self, api_client, created_order):
        order, product = created_order

        response = self._patch(api_client, order["id"], "confirmed")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == 'Status updated to "confirmed" successfully'
        assert data["order"]["status"] == "confirmed"
        assert _stock(product) == 6

    def test_cancel_restores_stock(self, api_client, created_order):
        order, product = created_order

        response = self._patch(api_client, order["id"], "cancelled")

        assert response.status_code == 200
        assert _stock(product) == 10

    def test_invalid_transition(self, api_client, created_order):
        order, _ = created_order

        response = self._patch(api_client, order["id"], "shipped")

        assert response.status_code == 400
        assert response.json() == {
            "code": "invalid_transition",
            "detail": "Invalid status transition",
            "current": "pending",
            "requested": "shipped",
            "allowed": ["confirmed", "cancelled"],
        }

    def test_terminal_state(self, api_client, created_order):
        order, _ = created_order
        for status in ("confirmed", "shipped", "delivered"):
            assert self._patch(api_client, order["id"], status).status_code == 200

        response = self._patch(api_client, order["id"], "cancelled")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "terminal_state"
        assert body["detail"] == "Delivered orders cannot be modified"
        assert body["current"] == "delivered"

    def test_unknown_status(self, api_client, created_order):
        order, _ = created_order
        response = self._patch(api_client, order["id"], "archived")
        assert response.status_code == 400
        assert response.json()["code"] == "unknown_status"
        assert response.json()["allowed"] == [
            "pending",
            "confirmed",
            "shipped",
            "delivered",
            "cancelled",
        ]

    def test_missing_order(self, api_client):
        response = self._patch(api_client, uuid4(), "confirmed")
        assert response.status_code == 404
        assert response.json()["code"] == "order_not_found"

    def test_malformed_id(self, api_client):
        response = self._patch(api_client, "123", "confirmed")
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"

    def test_missing_status_field(self, api_client, created_order):
        order, _ = created_order
        response = api_client.patch(
            f"{ORDERS_URL}{order['id']}/status/", {}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"


class TestFullUpdate:
    def test_replaces_lines(self, api_client, created_order, make_product):
        order, product = created_order
        other = make_product(stock_quantity=1)

        response = api_client.put(
            f"{ORDERS_URL}{order['id']}/",
            _body((other, 4, "2.25"), customerName="Ana S."),
            format="json",
        )

        assert response.status_code == 200
        updated = response.json()["order"]
        assert updated["customerName"] == "Ana S."
        assert updated["totalAmount"] == "9.00"
        assert [line["productId"] for line in updated["orderItems"]] == [str(other.id)]
        assert _stock(product) == 8
        assert _stock(other) == 1

    def test_status_change_is_refused(self, api_client, created_order):
        order, product = created_order

        response = api_client.put(
            f"{ORDERS_URL}{order['id']}/",
            _body((product, 1, "1.00"), status="confirmed"),
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_transition"

    def test_unknown_product(self, api_client, created_order):
        order, _ = created_order

        class Ghost:
            id = uuid4()

        response = api_client.put(
            f"{ORDERS_URL}{order['id']}/", _body((Ghost, 1, "1.00")), format="json"
        )

        assert response.status_code == 404
        assert response.json()["code"] == "product_not_found"

    def test_orders_cannot_be_deleted(self, api_client, created_order):
        order, _ = created_order
        response = api_client.delete(f"{ORDERS_URL}{order['id']}/")
        assert response.status_code == 405
        assert response.json()["code"] == "method_not_allowed"
