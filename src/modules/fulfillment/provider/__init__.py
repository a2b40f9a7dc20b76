"""Fulfillment provider adapter: transport, payload DTOs and status mapping."""

from modules.fulfillment.provider.client import FulfillmentProviderClient
from modules.fulfillment.provider.dtos import ProviderStatusResponse
from modules.fulfillment.provider.status import MappedStatus, map_provider_status

__all__ = [
    "FulfillmentProviderClient",
    "MappedStatus",
    "ProviderStatusResponse",
    "map_provider_status",
]
