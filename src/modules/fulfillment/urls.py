"""Fulfillment URL configuration."""

from django.urls import path

from modules.fulfillment.views import CronSyncView, SyncAllView, SyncOrderView

urlpatterns = [
    path("cron/sync/", CronSyncView.as_view(), name="fulfillment-cron-sync"),
    path("sync/", SyncAllView.as_view(), name="fulfillment-sync"),
    path("sync/order/", SyncOrderView.as_view(), name="fulfillment-sync-order"),
]
