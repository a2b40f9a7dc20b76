"""Order API views.

Exposes ``OrderItemStatusService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; generic exceptions propagate.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.orders.exceptions import (
    InvalidItemStatus,
    OrderItemNotFound,
    OrderNotFound,
)
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    BulkOrderStatusSerializer,
    OrderItemSerializer,
    OrderSerializer,
    UpdateItemStatusSerializer,
)
from modules.orders.services import OrderItemStatusService


class OrderViewSet(GenericViewSet):
    """Read access to an order and bulk status changes across orders.

    All ORM access goes through the service/repository layer.
    """

    queryset = Order.objects.alive()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderItemStatusService(
            order_repository=OrderDjangoRepository(),
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(str(pk))
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["post"], url_path="bulk-status")
    def bulk_status(self, request: Request) -> Response:
        """POST /api/v1/orders/bulk-status/

        Body: ``{"orderIds": [...], "status": "..."}``.
        """
        serializer = BulkOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            updated = self._service.bulk_update_orders_status(
                order_ids=data["orderIds"],
                new_status=data["status"],
                user=request.user,
            )
        except InvalidItemStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except OrderNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        return Response({"success": True, "updated": updated})


class OrderItemViewSet(GenericViewSet):
    """Manual status changes for single order items."""

    queryset = OrderItem.objects.alive()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderItemStatusService(
            order_repository=OrderDjangoRepository(),
        )

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/order-items/{pk}/status/

        Body: ``{"status": "...", "note": "..."}``.
        """
        serializer = UpdateItemStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            item = self._service.update_item_status(
                item_id=str(pk),
                new_status=data["status"],
                note=data.get("note", ""),
                user=request.user,
            )
        except OrderItemNotFound:
            return Response(
                {"detail": "Order item not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InvalidItemStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderItemSerializer(item).data)
