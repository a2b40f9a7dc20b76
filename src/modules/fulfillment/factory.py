"""Wiring of the reconciliation service with its production collaborators."""

from __future__ import annotations

from modules.core.repositories.django_repository import SystemSettingDjangoRepository
from modules.fulfillment.currency import CurrencyConverter
from modules.fulfillment.provider.client import FulfillmentProviderClient
from modules.fulfillment.services import ReconciliationService
from modules.notifications.services import NotificationService
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderItemStatusService


def build_reconciliation_service() -> ReconciliationService:
    order_repository = OrderDjangoRepository()
    return ReconciliationService(
        order_repository=order_repository,
        provider_client=FulfillmentProviderClient(),
        currency_converter=CurrencyConverter(SystemSettingDjangoRepository()),
        status_service=OrderItemStatusService(order_repository=order_repository),
        notification_service=NotificationService(),
    )
