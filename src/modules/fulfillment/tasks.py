"""Periodic reconciliation task, scheduled by Celery beat."""

import structlog
from celery import shared_task

from modules.fulfillment.factory import build_reconciliation_service
from modules.fulfillment.services import SyncTrigger

logger = structlog.get_logger(__name__)


@shared_task(name="fulfillment.sync_provider_orders")
def sync_provider_orders():
    """Reconcile every eligible item with the provider.

    Returns the same summary the HTTP cron endpoint returns.
    """
    result = build_reconciliation_service().sync(trigger=SyncTrigger.SCHEDULED)
    logger.info("fulfillment.scheduled_sync_done", **result.summary())
    return result.summary()
