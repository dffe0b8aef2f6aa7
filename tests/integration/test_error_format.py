"""Every error answers with the same ``{"code", "detail", ...}`` envelope."""

import pytest

pytestmark = pytest.mark.integration


class TestErrorEnvelope:
    def test_malformed_json(self, api_client):
        response = api_client.post(
            "/api/orders/", "{not json", content_type="application/json"
        )
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "invalid_input"
        assert body["detail"]

    def test_validation_error_lists_fields(self, api_client):
        response = api_client.post("/api/orders/", {}, format="json")
        body = response.json()
        assert response.status_code == 400
        assert body["detail"] == "Invalid request payload."
        assert {"customerName", "email", "mobileNumber", "orderDate", "orderItems"} <= set(
            body["errors"]
        )

    def test_method_not_allowed(self, api_client):
        response = api_client.delete("/api/orders/")
        assert response.status_code == 405
        assert response.json()["code"] == "method_not_allowed"

    def test_invalid_date_filter(self, api_client):
        response = api_client.get("/api/orders/", {"orderDateFrom": "yesterday"})
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"


class TestCeleryConfig:
    def test_celery_app_exported_from_config(self):
        from config import celery_app

        assert celery_app.main == "orders"

    def test_push_task_is_registered(self):
        from config import celery_app

        import modules.orders.tasks  # noqa: F401

        assert "orders.push_order_to_third_party" in celery_app.tasks

    def test_tasks_run_eagerly_in_tests(self, settings):
        assert settings.CELERY_TASK_ALWAYS_EAGER is True
