"""Fulfillment sync API views.

Three entry points into ``ReconciliationService``: the secret-gated cron
endpoint, a manual sync of everything eligible, and a manual sync of one
order.  Domain exceptions are translated into HTTP status codes here.
"""

from __future__ import annotations

import hmac

import structlog
from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.fulfillment.exceptions import ProviderCredentialsMissing
from modules.fulfillment.factory import build_reconciliation_service
from modules.fulfillment.serializers import SyncOrderSerializer
from modules.fulfillment.services import SyncResult, SyncTrigger
from modules.orders.exceptions import OrderNotFound

logger = structlog.get_logger(__name__)

NOTHING_TO_SYNC_MESSAGE = "No orders to sync."


def _credentials_missing_response(exc: ProviderCredentialsMissing) -> Response:
    return Response(
        {"detail": str(exc)},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _manual_response(result: SyncResult) -> Response:
    body = result.to_dict()
    if result.items_checked == 0:
        body["message"] = NOTHING_TO_SYNC_MESSAGE
    return Response(body)


class CronSyncView(APIView):
    """GET /api/v1/fulfillment/cron/sync/

    Called by an external scheduler.  When ``CRON_SECRET`` is set the
    request must carry ``Authorization: Bearer <CRON_SECRET>``.
    """

    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_scope = "provider_sync"

    def get(self, request: Request) -> Response:
        secret = settings.CRON_SECRET
        if secret:
            supplied = request.headers.get("Authorization", "")
            if not hmac.compare_digest(supplied, f"Bearer {secret}"):
                logger.warning("fulfillment.cron_unauthorized")
                return Response(
                    {"detail": "Unauthorized."},
                    status=status.HTTP_401_UNAUTHORIZED,
                )

        try:
            result = build_reconciliation_service().sync(trigger=SyncTrigger.SCHEDULED)
        except ProviderCredentialsMissing as exc:
            return _credentials_missing_response(exc)
        return Response(result.summary())


class SyncAllView(APIView):
    """POST /api/v1/fulfillment/sync/"""

    permission_classes = [IsAuthenticated]
    throttle_scope = "provider_sync"

    def post(self, request: Request) -> Response:
        try:
            result = build_reconciliation_service().sync(trigger=SyncTrigger.MANUAL)
        except ProviderCredentialsMissing as exc:
            return _credentials_missing_response(exc)
        return _manual_response(result)


class SyncOrderView(APIView):
    """POST /api/v1/fulfillment/sync/order/

    Body: ``{"orderId": "<uuid>"}``.
    """

    permission_classes = [IsAuthenticated]
    throttle_scope = "provider_sync"

    def post(self, request: Request) -> Response:
        serializer = SyncOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order_id = str(serializer.validated_data["orderId"])

        try:
            result = build_reconciliation_service().sync(
                trigger=SyncTrigger.MANUAL, order_id=order_id
            )
        except ProviderCredentialsMissing as exc:
            return _credentials_missing_response(exc)
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return _manual_response(result)
