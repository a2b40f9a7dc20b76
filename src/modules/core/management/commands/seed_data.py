from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.core.repositories.django_repository import SystemSettingDjangoRepository
from modules.fulfillment.currency import EXCHANGE_RATE_SETTING
from modules.orders.aggregation import worst_status
from modules.orders.constants import ItemStatus, ItemType
from modules.orders.models import Order, OrderItem

SERVICE_PRODUCTS = [
    (ItemType.RANK_BOOST, "Division rivals boost"),
    (ItemType.CHALLENGE_SERVICE, "Squad building challenges"),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=30)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        self._seed_settings()
        orders_created = self._seed_orders(options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: users={users_created}, orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="manager").exists():
            User.objects.create_user("manager", password="manager123", is_staff=True)
            created += 1
        return created

    def _seed_settings(self) -> None:
        repo = SystemSettingDjangoRepository()
        if repo.get_value(EXCHANGE_RATE_SETTING) is None:
            repo.set_value(EXCHANGE_RATE_SETTING, "0.84")

    def _seed_orders(self, count: int) -> int:
        self.stdout.write("Creating orders...")
        orders_created = 0
        open_statuses = [ItemStatus.NEW, ItemStatus.PROCESSING, ItemStatus.SHIPPING]

        for i in range(count):
            order, created = Order.objects.get_or_create(
                storefront_order_id=f"SEED-{i + 1:04d}",
                defaults={"customer_name": f"Seed customer {i + 1}"},
            )
            if not created:
                continue

            created_at = timezone.now() - timedelta(days=random.randint(0, 30))
            Order.objects.filter(id=order.id).update(created_at=created_at)

            statuses = []
            for _ in range(random.randint(1, 3)):
                quantity = Decimal(random.choice([500, 1000, 2500]))
                item = OrderItem.objects.create(
                    order=order,
                    item_type=ItemType.CURRENCY_BUNDLE,
                    product_name=f"Coins {quantity:,}",
                    status=random.choice(open_statuses),
                    foreign_order_id=str(random.randint(100000, 999999)),
                    quantity_ordered=quantity,
                    expected_cost=(quantity / 100).quantize(Decimal("0.01")),
                )
                statuses.append(item.status)

            if random.random() < 0.3:
                item_type, name = random.choice(SERVICE_PRODUCTS)
                item = OrderItem.objects.create(
                    order=order, item_type=item_type, product_name=name
                )
                statuses.append(item.status)

            Order.objects.filter(id=order.id).update(status=worst_status(statuses))
            orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
