"""
HTTP client for the external fulfillment provider.

Wraps the provider's order-status endpoints with typed responses.  Every
request is a JSON ``POST`` carrying the API credentials in the body, and
every request has a bounded timeout.  The client keeps no state between
calls; splitting long id lists into batches is the caller's job.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import httpx
import structlog
from django.conf import settings
from pydantic import ValidationError

from modules.fulfillment.exceptions import ProviderCredentialsMissing, ProviderError
from modules.fulfillment.provider.dtos import ProviderStatusResponse

logger = structlog.get_logger(__name__)

ORDER_STATUS_ENDPOINT = "/orderStatusAPI"
ORDER_STATUS_BULK_ENDPOINT = "/orderStatusBulkAPI"


class FulfillmentProviderClient:
    """
    Client for the provider's order status API.

    Example:
        >>> client = FulfillmentProviderClient()
        >>> statuses = client.get_status_bulk(["1001", "1002"])
        >>> statuses["1001"].status
        'partlyDelivered'
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_user: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_batch: Optional[int] = None,
    ) -> None:
        self.base_url = (base_url or settings.FULFILLMENT_API_BASE_URL).rstrip("/")
        self._api_user = (
            api_user if api_user is not None else settings.FULFILLMENT_API_USER
        )
        self._api_key = api_key if api_key is not None else settings.FULFILLMENT_API_KEY
        self.timeout = timeout if timeout is not None else settings.FULFILLMENT_PROVIDER_TIMEOUT
        self.max_batch = max_batch or settings.FULFILLMENT_BULK_MAX_BATCH

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_user and self._api_key)

    def ensure_credentials(self) -> None:
        """
        Raises:
            ProviderCredentialsMissing: API user or key is empty.
        """
        if not self.has_credentials:
            logger.error("fulfillment.provider_credentials_missing")
            raise ProviderCredentialsMissing(
                "Fulfillment provider API credentials not configured."
            )

    # ------------------------------------------------------------------
    # Status lookups
    # ------------------------------------------------------------------

    def get_status(self, foreign_order_id: str) -> ProviderStatusResponse:
        """
        Look up a single provider order.

        Raises:
            ProviderError: transport failure, non-2xx status or bad payload.
        """
        payload = self._post(ORDER_STATUS_ENDPOINT, {"orderID": foreign_order_id})
        if not isinstance(payload, dict):
            raise ProviderError("Malformed single status response: expected object.")
        return self._parse(payload)

    def get_status_bulk(
        self, foreign_order_ids: Sequence[str], max_batch: Optional[int] = None
    ) -> Dict[str, ProviderStatusResponse]:
        """
        Look up several provider orders in one call.

        Args:
            foreign_order_ids: Provider ids, at most ``max_batch`` of them.
            max_batch: Override of the configured batch limit.

        Returns:
            Mapping of provider id to status.  Ids the provider does not
            know are simply absent.

        Raises:
            ValueError: more ids than the batch limit allows.
            ProviderError: transport failure, non-2xx status or bad payload.
        """
        limit = max_batch or self.max_batch
        ids = list(foreign_order_ids)
        if len(ids) > limit:
            raise ValueError(
                f"Bulk status lookup accepts at most {limit} ids, got {len(ids)}."
            )
        if not ids:
            return {}

        payload = self._post(ORDER_STATUS_BULK_ENDPOINT, {"orderIDs": ids})
        if not isinstance(payload, dict):
            raise ProviderError("Malformed bulk status response: expected object.")

        statuses: Dict[str, ProviderStatusResponse] = {}
        for foreign_order_id, entry in payload.items():
            if not isinstance(entry, dict):
                raise ProviderError(
                    f"Malformed bulk status entry for order {foreign_order_id}."
                )
            statuses[str(foreign_order_id)] = self._parse(entry)
        return statuses

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _post(self, endpoint: str, body: Dict[str, Any]) -> Any:
        self.ensure_credentials()
        request_body = {"apiUser": self._api_user, "apiKey": self._api_key, **body}
        log = logger.bind(endpoint=endpoint)

        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout) as http:
                response = http.post(endpoint, json=request_body)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            log.warning(
                "fulfillment.provider_http_error",
                status_code=exc.response.status_code,
            )
            raise ProviderError(
                f"Provider API error {exc.response.status_code}: "
                f"{exc.response.text[:200]}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TimeoutException as exc:
            log.warning("fulfillment.provider_timeout", timeout=self.timeout)
            raise ProviderError(f"Provider API timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            log.warning("fulfillment.provider_transport_error", error=str(exc))
            raise ProviderError(f"Provider API transport error: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError("Provider API returned invalid JSON.") from exc

        if isinstance(payload, dict) and "error" in payload and "status" not in payload:
            raise ProviderError(f"Provider API rejected request: {payload['error']}")
        return payload

    @staticmethod
    def _parse(entry: Dict[str, Any]) -> ProviderStatusResponse:
        try:
            return ProviderStatusResponse.from_payload(entry)
        except ValidationError as exc:
            raise ProviderError(f"Malformed provider status payload: {exc}") from exc
