"""Order service layer (Use Cases).

Manual item status changes and parent-status derivation.

Business rules enforced:
- A status change is written to the audit log only when the status actually
  changes; re-applying the current status leaves no trace.
- After any item status change the parent order status is recomputed from
  *all* alive items of the order, not just the changed one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.orders.aggregation import worst_status
from modules.orders.constants import BULK_STATUS_UPDATE_NOTE, ItemStatus
from modules.orders.exceptions import (
    InvalidItemStatus,
    OrderItemNotFound,
    OrderNotFound,
)

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderItemStatusService:
    """Application service for item status use-cases.

    Receives the order repository via constructor injection (DIP).
    """

    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_item_status(
        self,
        item_id: UUID | str,
        new_status: str,
        note: str = "",
        user: Any = None,
    ) -> OrderItem:
        """Set one item's status by hand and refresh its order.

        Raises:
            InvalidItemStatus: *new_status* is not a known item status.
            OrderItemNotFound: the item does not exist or is trashed.
        """
        self._validate_status(new_status)

        item = self._order_repo.get_item(str(item_id))
        if not item:
            raise OrderItemNotFound(f"Order item {item_id} not found.")

        log = logger.bind(
            item_id=str(item.id),
            current_status=item.status,
            new_status=new_status,
        )

        old_status = item.status
        self._order_repo.update_item(item, {"status": new_status})
        if old_status != new_status:
            self._order_repo.add_status_log(
                item_id=item.id,
                old_status=old_status,
                new_status=new_status,
                note=note,
                changed_by=user,
            )

        self.recompute_order_status(item.order_id)
        log.info("order_item.status_updated", changed=old_status != new_status)
        return item

    @transaction.atomic
    def bulk_update_orders_status(
        self,
        order_ids: Iterable[UUID | str],
        new_status: str,
        user: Any = None,
    ) -> int:
        """Move every alive item of the given orders to *new_status*.

        Returns the number of items written.

        Raises:
            InvalidItemStatus: no orders given or unknown status.
            OrderNotFound: none of the orders has alive items.
        """
        ids = [str(order_id) for order_id in order_ids]
        if not ids:
            raise InvalidItemStatus("No orders selected.")
        self._validate_status(new_status)

        items = self._order_repo.list_items_for_orders(ids)
        if not items:
            raise OrderNotFound("No items found in the selected orders.")

        touched_orders: List[Any] = []
        for item in items:
            old_status = item.status
            self._order_repo.update_item(item, {"status": new_status})
            if old_status != new_status:
                self._order_repo.add_status_log(
                    item_id=item.id,
                    old_status=old_status,
                    new_status=new_status,
                    note=BULK_STATUS_UPDATE_NOTE,
                    changed_by=user,
                )
            if item.order_id not in touched_orders:
                touched_orders.append(item.order_id)

        for order_id in touched_orders:
            self.recompute_order_status(order_id)

        logger.info(
            "order.bulk_status_updated",
            order_count=len(touched_orders),
            item_count=len(items),
            new_status=new_status,
        )
        return len(items)

    def recompute_order_status(self, order_id: Any) -> Optional[str]:
        """Derive and persist the order status from all of its alive items.

        Returns the new status, or ``None`` when the order has no alive
        items (the stored status is then left untouched).
        """
        statuses = self._order_repo.item_statuses(order_id)
        if not statuses:
            return None
        status = worst_status(statuses)
        self._order_repo.set_order_status(order_id, status)
        logger.info(
            "order.status_recomputed",
            order_id=str(order_id),
            status=status,
            item_count=len(statuses),
        )
        return status

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order with items and status logs.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_status(status: str) -> None:
        if status not in ItemStatus.values:
            raise InvalidItemStatus(f"Unknown item status: {status!r}.")
