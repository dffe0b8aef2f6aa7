from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command

from modules.core.management.commands import seed_data
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import InsufficientStock
from modules.orders.models import SalesOrder
from modules.orders.services import OrderService
from modules.products.models import Product

pytestmark = pytest.mark.unit


class TestSeedDataCommand:
    def test_seeds_catalog_and_orders(self):
        out = StringIO()

        call_command("seed_data", orders=4, stdout=out)

        assert Product.objects.count() == 9
        assert SalesOrder.objects.count() == 4
        assert "Seed completed" in out.getvalue()

    def test_orders_keep_stock_consistent(self):
        call_command("seed_data", orders=4, stdout=StringIO())

        for order in SalesOrder.objects.prefetch_related("items"):
            assert order.total_amount == sum(item.subtotal for item in order.items.all())
        assert not Product.objects.filter(stock_quantity__lt=0).exists()

    def test_is_idempotent_for_products(self):
        call_command("seed_data", orders=0, stdout=StringIO())
        call_command("seed_data", orders=0, stdout=StringIO())
        assert Product.objects.count() == 9

    def test_failed_status_walk_still_counts_the_order(self, monkeypatch):
        monkeypatch.setattr(seed_data, "STATUS_PATHS", [(OrderStatus.CONFIRMED,)])
        out = StringIO()

        with patch.object(
            OrderService,
            "update_status",
            side_effect=InsufficientStock("p-1", available=0, requested=1),
        ):
            call_command("seed_data", orders=3, stdout=out)

        assert SalesOrder.objects.count() == 3
        assert set(SalesOrder.objects.values_list("status", flat=True)) == {"pending"}
        assert "orders=3" in out.getvalue()
        assert "stays pending" in out.getvalue()
