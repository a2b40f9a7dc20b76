"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Item updates
save only the columns they touch (``update_fields``) so concurrent writers
to other columns of the same row are not clobbered.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db.models import Prefetch

from modules.orders.constants import TERMINAL_STATUSES, ItemType
from modules.orders.models import Order, OrderItem, OrderStatusLog
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its alive items and their status logs.

        Returns ``None`` for non-existent, soft-deleted or invalid IDs.
        """
        try:
            return (
                Order.objects.alive()
                .prefetch_related(
                    Prefetch(
                        "items",
                        queryset=OrderItem.objects.alive().prefetch_related(
                            "status_log"
                        ),
                    )
                )
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_item(self, item_id: str) -> Optional[OrderItem]:
        try:
            return (
                OrderItem.objects.alive()
                .select_related("order")
                .filter(id=item_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list_items_for_orders(self, order_ids: Iterable[str]) -> List[OrderItem]:
        try:
            return list(
                OrderItem.objects.alive()
                .filter(order_id__in=list(order_ids), order__deleted_at__isnull=True)
                .order_by("created_at", "id")
            )
        except (ValueError, ValidationError):
            return []

    def list_reconcilable_items(
        self, order_id: Optional[str] = None
    ) -> List[OrderItem]:
        queryset = (
            OrderItem.objects.alive()
            .filter(
                item_type=ItemType.CURRENCY_BUNDLE,
                foreign_order_id__isnull=False,
                order__deleted_at__isnull=True,
            )
            .exclude(foreign_order_id="")
            .exclude(status__in=TERMINAL_STATUSES)
        )
        if order_id is not None:
            queryset = queryset.filter(order_id=order_id)
        return list(queryset.order_by("created_at", "id"))

    def item_statuses(self, order_id: Any) -> List[str]:
        return list(
            OrderItem.objects.alive()
            .filter(order_id=order_id)
            .order_by("created_at", "id")
            .values_list("status", flat=True)
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def update_item(self, item: OrderItem, fields: Dict[str, Any]) -> OrderItem:
        for field, value in fields.items():
            setattr(item, field, value)
        item.save(update_fields=list(fields))
        return item

    def add_status_log(
        self,
        item_id: Any,
        old_status: Optional[str],
        new_status: str,
        note: str = "",
        changed_by: Any = None,
    ) -> OrderStatusLog:
        entry = OrderStatusLog.objects.create(
            item_id=item_id,
            old_status=old_status,
            new_status=new_status,
            note=note,
            changed_by=changed_by,
        )
        logger.info(
            "order_item.status_logged",
            item_id=str(item_id),
            old_status=old_status,
            new_status=new_status,
        )
        return entry

    def set_order_status(self, order_id: Any, status: str) -> None:
        order = Order.objects.filter(id=order_id).first()
        if order is None:
            return
        order.status = status
        order.save(update_fields=["status"])
