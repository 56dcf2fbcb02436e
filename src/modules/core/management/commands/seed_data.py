from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import PlaceOrderDTO
from modules.orders.exceptions import InsufficientStock
from modules.orders.models import Order
from modules.orders.repositories.django_repository import (
    DeliveryDjangoRepository,
    OrderDjangoRepository,
)
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

CATALOGUE = [
    ("Sourdough Loaf", "bread", Decimal("6.50"), 40),
    ("Baguette", "bread", Decimal("3.20"), 60),
    ("Rye Bread", "bread", Decimal("5.80"), 25),
    ("Butter Croissant", "pastry", Decimal("2.90"), 80),
    ("Pain au Chocolat", "pastry", Decimal("3.40"), 70),
    ("Cinnamon Roll", "pastry", Decimal("3.75"), 50),
    ("Carrot Cake", "cake", Decimal("24.00"), 8),
    ("Chocolate Fudge Cake", "cake", Decimal("28.50"), 6),
    ("Lemon Tart", "cake", Decimal("4.60"), 30),
    ("Oat Cookie", "cookie", Decimal("1.50"), 120),
]

CUSTOMERS = [
    ("Alice Baker", "alice@example.com", "555-0101"),
    ("Bruno Lima", "bruno@example.com", None),
    ("Carla Mendes", "carla@example.com", "555-0103"),
    ("Daniel Costa", "daniel@example.com", None),
    ("Helena Ferreira", "helena@example.com", "555-0105"),
]


class Command(BaseCommand):
    help = "Seed the database with a bakery catalogue and sample orders."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=15,
            help="Number of sample orders to place (default: %(default)s).",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        products = self._seed_products()
        placed = self._seed_orders(products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={len(products)}, orders={placed}"
            )
        )

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for name, category, price, quantity in CATALOGUE:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={"category": category, "price": price, "quantity": quantity},
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, products: list[Product], count: int) -> int:
        """Place sample orders through ``OrderService`` so stock stays consistent."""
        self.stdout.write("Placing orders...")
        if Order.objects.exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            delivery_repository=DeliveryDjangoRepository(),
        )

        placed = 0
        for _ in range(count):
            name, email, phone = random.choice(CUSTOMERS)
            lines = random.sample(products, k=random.randint(1, 3))
            dto = PlaceOrderDTO.from_payload(
                {
                    "customer": {"name": name, "email": email, "phone": phone},
                    "items": [
                        {"product_id": p.id, "quantity": random.randint(1, 4)}
                        for p in lines
                    ],
                }
            )
            try:
                service.place_order(dto)
            except InsufficientStock as exc:
                self.stdout.write(self.style.WARNING(str(exc)))
                continue
            placed += 1

        self.stdout.write(self.style.SUCCESS("Placing orders... Done!"))
        return placed
