"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import ItemStatus
from modules.orders.models import Order, OrderItem, OrderStatusLog

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class UpdateItemStatusSerializer(serializers.Serializer):
    """Validates a manual status change for one item."""

    status = serializers.ChoiceField(choices=ItemStatus.choices)
    note = serializers.CharField(required=False, default="", allow_blank=True)


class BulkOrderStatusSerializer(serializers.Serializer):
    """Validates a bulk status change across several orders."""

    orderIds = serializers.ListField(  # noqa: N815
        child=serializers.UUIDField(), allow_empty=False
    )
    status = serializers.ChoiceField(choices=ItemStatus.choices)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusLogSerializer(serializers.ModelSerializer):
    """Read serializer for item status log entries."""

    class Meta:
        model = OrderStatusLog
        fields = [
            "id",
            "old_status",
            "new_status",
            "note",
            "changed_by",
            "created_at",
        ]
        read_only_fields = fields


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items including provider sync state."""

    status_log = StatusLogSerializer(many=True, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "order_id",
            "item_type",
            "product_name",
            "status",
            "foreign_order_id",
            "provider_raw_status",
            "provider_status_detail",
            "last_synced_at",
            "expected_cost",
            "actual_cost",
            "quantity_ordered",
            "quantity_delivered",
            "customer_note",
            "notes",
            "status_log",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Full read serializer for an order with its items."""

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "storefront_order_id",
            "customer_name",
            "status",
            "notes",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields
