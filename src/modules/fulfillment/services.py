"""Provider reconciliation service (Use Case).

Pulls the current state of every non-terminal, provider-fulfilled order item
from the fulfillment provider and writes it back locally.

Business rules enforced:
- Items are looked up in the order they were created, in batches of at most
  ``FULFILLMENT_BULK_MAX_BATCH`` ids; a lone item uses the single lookup.
- A failed batch is logged and skipped; the rest of the run carries on.
- Every returned item is persisted, even when its status did not change,
  so ``last_synced_at``, cost and delivery progress stay fresh.
- A status log row is written only for a real status change, which keeps
  repeated runs against an unchanged provider free of log noise.
- Once the provider reports the order finished, ``amount_ordered`` is the
  authoritative delivered quantity, even if ``amount`` lags behind.
- Each touched order is re-derived from all of its alive items afterwards;
  an order whose re-derivation fails is logged and skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Sequence, TypeVar

import structlog
from django.db import DatabaseError, transaction
from django.utils import timezone

from modules.fulfillment.exceptions import ProviderError
from modules.fulfillment.provider.status import ProviderStatus, map_provider_status
from modules.notifications.constants import NotificationLevel
from modules.orders.constants import ON_HOLD_STATUSES
from modules.orders.exceptions import OrderNotFound

if TYPE_CHECKING:
    from modules.fulfillment.currency import CurrencyConverter
    from modules.fulfillment.provider.client import FulfillmentProviderClient
    from modules.fulfillment.provider.dtos import ProviderStatusResponse
    from modules.notifications.services import NotificationService
    from modules.orders.models import OrderItem
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.orders.services import OrderItemStatusService

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class SyncTrigger(str, Enum):
    SCHEDULED = "scheduled"
    MANUAL = "manual"


SYNC_LOG_NOTES: Dict[SyncTrigger, str] = {
    SyncTrigger.SCHEDULED: "Auto sync from fulfillment provider (scheduled)",
    SyncTrigger.MANUAL: "Auto sync from fulfillment provider (manual)",
}


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive slices of *items* of at most *size* elements."""
    if size < 1:
        raise ValueError("Chunk size must be positive.")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


@dataclass
class ItemSyncResult:
    item_id: str
    order_id: str
    foreign_order_id: str
    old_status: str
    new_status: str
    quantity_delivered: Decimal
    provider_response: Dict[str, Any]

    @property
    def changed(self) -> bool:
        return self.old_status != self.new_status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itemId": self.item_id,
            "orderId": self.order_id,
            "foreignOrderId": self.foreign_order_id,
            "oldStatus": self.old_status,
            "newStatus": self.new_status,
            "changed": self.changed,
            "quantityDelivered": str(self.quantity_delivered),
            "providerResponse": self.provider_response,
        }


@dataclass
class SyncResult:
    """Outcome of one reconciliation run."""

    synced: int = 0
    items_checked: int = 0
    orders_updated: int = 0
    failed_batches: int = 0
    results: List[ItemSyncResult] = field(default_factory=list)
    timestamp: datetime = field(default_factory=timezone.now)

    def summary(self) -> Dict[str, Any]:
        """Compact form returned to the cron caller.

        ``ordersChecked`` counts the distinct parent orders re-derived.
        """
        return {"synced": self.synced, "ordersChecked": self.orders_updated}

    def to_dict(self) -> Dict[str, Any]:
        """Full form returned to interactive callers, with provider echoes."""
        return {
            "synced": self.synced,
            "ordersUpdated": self.orders_updated,
            "failedBatches": self.failed_batches,
            "results": [result.to_dict() for result in self.results],
            "timestamp": self.timestamp.isoformat(),
        }


class ReconciliationService:
    """Application service that reconciles local items with the provider.

    Collaborators are injected so tests can swap any of them.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        provider_client: FulfillmentProviderClient,
        currency_converter: CurrencyConverter,
        status_service: OrderItemStatusService,
        notification_service: Optional[NotificationService] = None,
    ) -> None:
        self._order_repo = order_repository
        self._client = provider_client
        self._converter = currency_converter
        self._status_service = status_service
        self._notifications = notification_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def sync(
        self,
        trigger: SyncTrigger = SyncTrigger.SCHEDULED,
        order_id: Optional[str] = None,
    ) -> SyncResult:
        """Run one reconciliation pass, globally or for a single order.

        Raises:
            ProviderCredentialsMissing: provider credentials are not set.
            OrderNotFound: *order_id* names no alive order.
        """
        self._client.ensure_credentials()

        if order_id is not None and self._order_repo.get_by_id(str(order_id)) is None:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(trigger=trigger.value, order_id=order_id)
        items = self._order_repo.list_reconcilable_items(
            order_id=str(order_id) if order_id is not None else None
        )
        result = SyncResult(items_checked=len(items))
        log.info("fulfillment.sync_started", item_count=len(items))

        if not items:
            log.info("fulfillment.sync_nothing_to_do")
            return result

        touched_orders: List[Any] = []
        for batch, responses in self._fetch(items, result):
            for item in batch:
                response = responses.get(item.foreign_order_id)
                if response is None:
                    log.info(
                        "fulfillment.item_missing_from_response",
                        item_id=str(item.id),
                        foreign_order_id=item.foreign_order_id,
                    )
                    continue
                item_result = self._apply(item, response, trigger)
                if item_result is None:
                    continue
                result.synced += 1
                result.results.append(item_result)
                if item.order_id not in touched_orders:
                    touched_orders.append(item.order_id)

        for touched in touched_orders:
            try:
                with transaction.atomic():
                    self._status_service.recompute_order_status(touched)
            except DatabaseError as exc:
                log.error(
                    "fulfillment.order_recompute_failed",
                    touched_order_id=str(touched),
                    error=str(exc),
                )
                continue
            result.orders_updated += 1

        log.info(
            "fulfillment.sync_finished",
            synced=result.synced,
            orders_updated=result.orders_updated,
            failed_batches=result.failed_batches,
        )
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fetch(
        self, items: List[OrderItem], result: SyncResult
    ) -> Iterator[tuple[List[OrderItem], Dict[str, ProviderStatusResponse]]]:
        """Yield each batch with its provider responses, skipping failures."""
        if len(items) == 1:
            item = items[0]
            try:
                response = self._client.get_status(item.foreign_order_id)
            except ProviderError as exc:
                result.failed_batches += 1
                logger.warning(
                    "fulfillment.batch_failed",
                    batch_index=0,
                    batch_size=1,
                    error=str(exc),
                )
                return
            yield items, {item.foreign_order_id: response}
            return

        for index, batch in enumerate(chunked(items, self._client.max_batch)):
            ids = [item.foreign_order_id for item in batch]
            try:
                responses = self._client.get_status_bulk(ids)
            except ProviderError as exc:
                result.failed_batches += 1
                logger.warning(
                    "fulfillment.batch_failed",
                    batch_index=index,
                    batch_size=len(batch),
                    error=str(exc),
                )
                continue
            yield batch, responses

    def _apply(
        self,
        item: OrderItem,
        response: ProviderStatusResponse,
        trigger: SyncTrigger,
    ) -> Optional[ItemSyncResult]:
        """Persist one provider response onto *item*.

        Returns ``None`` when the write failed; the item is then left as it
        was and retried on the next run.
        """
        old_status = item.status
        mapped = map_provider_status(
            response.status, response.account_check, response.economy_state
        )
        new_status = mapped.status.value

        fields: Dict[str, Any] = {
            "status": new_status,
            "provider_raw_status": response.status[:64],
            "provider_status_detail": response.status_detail[:255],
            "last_synced_at": timezone.now(),
        }
        if response.to_pay is not None:
            fields["actual_cost"] = self._converter.to_local(response.to_pay)
        delivered = self._delivered_quantity(response)
        if delivered is not None:
            fields["quantity_delivered"] = delivered
        if mapped.customer_note:
            fields["customer_note"] = mapped.customer_note

        log = logger.bind(
            item_id=str(item.id),
            foreign_order_id=item.foreign_order_id,
            old_status=old_status,
            new_status=new_status,
        )
        try:
            with transaction.atomic():
                self._order_repo.update_item(item, fields)
                if old_status != new_status:
                    self._order_repo.add_status_log(
                        item_id=item.id,
                        old_status=old_status,
                        new_status=new_status,
                        note=SYNC_LOG_NOTES[trigger],
                    )
                    if new_status in ON_HOLD_STATUSES:
                        self._notify_on_hold(item, new_status, mapped.customer_note)
        except DatabaseError as exc:
            item.status = old_status
            log.error("fulfillment.item_persist_failed", error=str(exc))
            return None

        log.debug("fulfillment.item_synced", changed=old_status != new_status)
        return ItemSyncResult(
            item_id=str(item.id),
            order_id=str(item.order_id),
            foreign_order_id=item.foreign_order_id,
            old_status=old_status,
            new_status=new_status,
            quantity_delivered=item.quantity_delivered,
            provider_response=response.raw,
        )

    @staticmethod
    def _delivered_quantity(response: ProviderStatusResponse) -> Optional[Decimal]:
        finished = ProviderStatus.parse(response.status) is ProviderStatus.FINISHED
        if finished and response.amount_ordered is not None and response.amount_ordered > 0:
            return response.amount_ordered
        if response.amount is not None and response.amount > 0:
            return response.amount
        return None

    def _notify_on_hold(
        self, item: OrderItem, new_status: str, customer_note: Optional[str]
    ) -> None:
        if self._notifications is None:
            return
        self._notifications.broadcast_to_staff(
            title=f"Order item {item.foreign_order_id} is on hold",
            message=customer_note or f"Provider reported status {item.provider_raw_status!r}.",
            level=NotificationLevel.WARNING,
        )
