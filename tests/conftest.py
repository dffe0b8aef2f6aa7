from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.notifications import IOrderNotifier
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product, ProductStatus
from modules.products.repositories.django_repository import InventoryDjangoLedger

INTERNAL_KEY = "test-internal-key"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def internal_client():
    """APIClient sending the shared ``X-Internal-Key``."""
    client = APIClient()
    client.defaults["HTTP_X_INTERNAL_KEY"] = INTERNAL_KEY
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


class RecordingNotifier(IOrderNotifier):
    def __init__(self):
        self.notified = []

    def notify(self, order):
        self.notified.append(order)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def order_service(notifier):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        inventory_ledger=InventoryDjangoLedger(),
        notifier=notifier,
    )


@pytest.fixture()
def make_product():
    counter = {"n": 0}

    def _make(**overrides) -> Product:
        counter["n"] += 1
        defaults = {
            "sku": f"SKU-{counter['n']:03d}",
            "name": f"Product {counter['n']}",
            "price": Decimal("10.00"),
            "stock_quantity": 10,
            "status": ProductStatus.ACTIVE,
        }
        defaults.update(overrides)
        return Product.objects.create(**defaults)

    return _make


@pytest.fixture()
def make_order_dto():
    def _make(lines, status="pending", **overrides) -> CreateOrderDTO:
        data = {
            "customer_name": "Ana Souza",
            "email": "ana@example.com",
            "mobile_number": "+55 11 91234-0001",
            "status": status,
            "order_date": date(2024, 5, 10),
            "items": [
                CreateOrderItemDTO(product_id=product.id, quantity=qty, price=price)
                for product, qty, price in lines
            ],
        }
        data.update(overrides)
        return CreateOrderDTO(**data)

    return _make
