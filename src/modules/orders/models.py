"""Order, OrderItem, and OrderStatusLog models.

Business rules implemented:
- ``Order.status`` is derived: it is always recomputed from the statuses of
  its alive items (see ``modules.orders.aggregation``), never set on its own.
- Items fulfilled through the external provider carry ``foreign_order_id``;
  ``provider_raw_status`` keeps the last provider status string verbatim.
- ``actual_cost`` is written only by provider reconciliation, once the
  provider reports a concrete charge.
- Each real status change produces exactly one ``OrderStatusLog`` row.
- Items are never hard-deleted; trash is a soft delete via ``deleted_at``.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel, SoftDeleteModel
from modules.orders.constants import ItemStatus, ItemType


class Order(SoftDeleteModel):
    """Parent aggregate for one storefront purchase.

    ``storefront_order_id`` is the identifier of the order in the shop that
    sold it; the UUIDv7 ``id`` is used for all internal references.
    """

    storefront_order_id: models.CharField = models.CharField(
        max_length=64, unique=True
    )
    customer_name: models.CharField = models.CharField(max_length=255)
    status: models.CharField = models.CharField(
        max_length=20,
        choices=ItemStatus.choices,
        default=ItemStatus.NEW,
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.storefront_order_id} ({self.status})"


class OrderItem(SoftDeleteModel):
    """A single sellable line of an order.

    Currency-bundle items are dispatched to the fulfillment provider and then
    kept in sync by the reconciliation engine; service items move through
    their statuses by manual action only.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    item_type: models.CharField = models.CharField(
        max_length=20,
        choices=ItemType.choices,
        default=ItemType.CURRENCY_BUNDLE,
    )
    product_name: models.CharField = models.CharField(max_length=255)
    status: models.CharField = models.CharField(
        max_length=20,
        choices=ItemStatus.choices,
        default=ItemStatus.NEW,
    )

    # Fulfillment provider
    foreign_order_id: models.CharField = models.CharField(  # noqa: DJ01
        max_length=64, null=True, blank=True, db_index=True
    )
    provider_raw_status: models.CharField = models.CharField(
        max_length=64, blank=True, default=""
    )
    provider_status_detail: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    last_synced_at: models.DateTimeField = models.DateTimeField(
        null=True, blank=True
    )

    # Cost, in settlement currency
    expected_cost: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )
    actual_cost: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )

    # Progress (currency bundles are counted in thousands of units)
    quantity_ordered: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    quantity_delivered: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )

    notes: models.TextField = models.TextField(blank=True, default="")
    customer_note: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_items"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["status"], name="order_items_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_delivered__gte=0)
                & models.Q(quantity_ordered__gte=0),
                name="order_items_quantities_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_name} [{self.status}]"


class OrderStatusLog(BaseModel):
    """Append-only audit trail for item status transitions.

    Inherits ``BaseModel`` (not ``SoftDeleteModel``) because audit records
    are immutable.  ``changed_by`` is ``None`` when the change came from the
    system (provider sync, webhook ingestion).
    """

    item: models.ForeignKey = models.ForeignKey(
        "orders.OrderItem",
        on_delete=models.CASCADE,
        related_name="status_log",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=ItemStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=ItemStatus.choices,
    )
    changed_by: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    note: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_log"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["item", "-created_at"],
                name="osl_item_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.item_id} : {self.old_status} -> {self.new_status}"
