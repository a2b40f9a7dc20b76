"""Order repository interface.

Extends ``IRepository[Order]`` with the item-level reads and writes needed
by manual status changes and by provider reconciliation: eligibility
selection, field updates, status-log inserts, and parent status writes.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem, OrderStatusLog


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and their
    OrderStatusLog records.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an alive order with prefetched items and status logs."""

    @abstractmethod
    def get_item(self, item_id: str) -> Optional[OrderItem]:
        """Retrieve a single alive order item."""

    @abstractmethod
    def list_items_for_orders(self, order_ids: Iterable[str]) -> List[OrderItem]:
        """Alive items of the given orders, in creation order."""

    @abstractmethod
    def list_reconcilable_items(
        self, order_id: Optional[str] = None
    ) -> List[OrderItem]:
        """Alive, provider-linked, non-terminal currency bundles in creation order.

        When *order_id* is given the selection is restricted to that order.
        """

    @abstractmethod
    def update_item(self, item: OrderItem, fields: Dict[str, Any]) -> OrderItem:
        """Write *fields* onto *item* and persist only those columns."""

    @abstractmethod
    def add_status_log(
        self,
        item_id: Any,
        old_status: Optional[str],
        new_status: str,
        note: str = "",
        changed_by: Any = None,
    ) -> OrderStatusLog:
        """Append an entry to the item's status audit trail."""

    @abstractmethod
    def item_statuses(self, order_id: Any) -> List[str]:
        """Statuses of every alive item of the order, in creation order."""

    @abstractmethod
    def set_order_status(self, order_id: Any, status: str) -> None:
        """Persist a recomputed order status."""
