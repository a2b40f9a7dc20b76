"""Fulfillment DRF serializers."""

from __future__ import annotations

from rest_framework import serializers


class SyncOrderSerializer(serializers.Serializer):
    """Validates the per-order sync request body."""

    orderId = serializers.UUIDField()  # noqa: N815
