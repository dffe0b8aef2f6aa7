from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock
from modules.orders.notifications import CeleryOrderNotifier, LoggingOrderNotifier
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product, ProductStatus
from modules.products.repositories.django_repository import InventoryDjangoLedger

CUSTOMERS = [
    ("Ana Souza", "ana@example.com", "+55 11 91234-0001"),
    ("Bruno Lima", "bruno@example.com", "+55 21 99876-0002"),
    ("Carla Mendes", "carla@example.com", "+55 31 98765-0003"),
    ("Daniel Costa", "daniel@example.com", "+55 41 97654-0004"),
    ("Helena Ferreira", "helena@example.com", "+55 51 96543-0005"),
]

CATALOG = [
    ("ELET-001", "Monitor 27\"", "Electronics", Decimal("1299.90")),
    ("ELET-002", "Mechanical Keyboard", "Electronics", Decimal("399.90")),
    ("ELET-003", "Gaming Mouse", "Electronics", Decimal("249.90")),
    ("ELET-004", "Notebook 14\"", "Electronics", Decimal("3999.00")),
    ("MOV-001", "Office Desk", "Furniture", Decimal("899.00")),
    ("MOV-002", "Ergonomic Chair", "Furniture", Decimal("1499.00")),
    ("OFF-001", "A4 Paper", "Office", Decimal("29.90")),
    ("OFF-002", "Blue Pen", "Office", Decimal("4.90")),
    ("OFF-003", "Notebook Stand", "Office", Decimal("149.90")),
]

# Walk each seeded order through these statuses after creation.
STATUS_PATHS = [
    (),
    (OrderStatus.CONFIRMED,),
    (OrderStatus.CONFIRMED, OrderStatus.SHIPPED),
    (OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED),
    (OrderStatus.CANCELLED,),
]


class Command(BaseCommand):
    help = "Seed the database with a product catalog and sample orders."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=10)
        parser.add_argument(
            "--notify",
            action="store_true",
            help="Push seeded orders to the third-party endpoint.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        notifier = CeleryOrderNotifier() if options["notify"] else LoggingOrderNotifier()
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            inventory_ledger=InventoryDjangoLedger(),
            notifier=notifier,
        )

        products = self._seed_products()
        orders_created = self._seed_orders(service, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={len(products)}, orders={orders_created}"
            )
        )

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for sku, name, category, price in CATALOG:
            product, _ = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "description": category,
                    "price": price,
                    "stock_quantity": random.randint(50, 200),
                    "status": ProductStatus.ACTIVE,
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(
        self, service: OrderService, products: list[Product], count: int
    ) -> int:
        self.stdout.write("Creating orders...")
        if not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no products)."))
            return 0

        orders_created = 0
        today = timezone.localdate()
        for _ in range(count):
            name, email, mobile = random.choice(CUSTOMERS)
            lines = random.sample(products, k=min(random.randint(1, 3), len(products)))
            dto = CreateOrderDTO(
                customer_name=name,
                email=email,
                mobile_number=mobile,
                order_date=today - timedelta(days=random.randint(0, 30)),
                items=[
                    CreateOrderItemDTO(
                        product_id=product.id,
                        quantity=random.randint(1, 3),
                        price=product.price,
                    )
                    for product in lines
                ],
            )

            try:
                order = service.create_order(dto)
            except InsufficientStock as exc:
                self.stdout.write(self.style.WARNING(f"Skipped: {exc.message}"))
                continue
            orders_created += 1

            for next_status in random.choice(STATUS_PATHS):
                try:
                    service.update_status(str(order.id), next_status)
                except InsufficientStock as exc:
                    self.stdout.write(
                        self.style.WARNING(
                            f"{order.order_number} stays {order.status}: {exc.message}"
                        )
                    )
                    break
                order.status = next_status

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
