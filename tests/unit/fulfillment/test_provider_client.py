"""Unit tests for the fulfillment provider HTTP client."""

import json

import httpx
import pytest
import respx

from modules.fulfillment.exceptions import ProviderCredentialsMissing, ProviderError
from modules.fulfillment.provider.client import FulfillmentProviderClient

pytestmark = pytest.mark.unit

BASE_URL = "https://provider.test"
SINGLE_URL = f"{BASE_URL}/orderStatusAPI"
BULK_URL = f"{BASE_URL}/orderStatusBulkAPI"


@pytest.fixture()
def client():
    return FulfillmentProviderClient(
        base_url=BASE_URL, api_user="user", api_key="key", timeout=2.0
    )


class TestGetStatus:
    @respx.mock
    def test_posts_id_and_credentials(self, client):
        route = respx.post(SINGLE_URL).mock(
            return_value=httpx.Response(200, json={"status": "finished", "toPay": 3})
        )

        response = client.get_status("1001")

        assert response.status == "finished"
        body = json.loads(route.calls.last.request.content)
        assert body == {"apiUser": "user", "apiKey": "key", "orderID": "1001"}

    @respx.mock
    def test_http_error_raises_provider_error(self, client):
        respx.post(SINGLE_URL).mock(return_value=httpx.Response(502, text="bad gateway"))

        with pytest.raises(ProviderError) as exc_info:
            client.get_status("1001")

        assert exc_info.value.status_code == 502

    @respx.mock
    def test_timeout_raises_provider_error(self, client):
        respx.post(SINGLE_URL).mock(side_effect=httpx.ConnectTimeout("slow"))

        with pytest.raises(ProviderError, match="timed out"):
            client.get_status("1001")

    @respx.mock
    def test_transport_error_raises_provider_error(self, client):
        respx.post(SINGLE_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ProviderError, match="transport"):
            client.get_status("1001")

    @respx.mock
    def test_invalid_json_raises_provider_error(self, client):
        respx.post(SINGLE_URL).mock(return_value=httpx.Response(200, text="<html>"))

        with pytest.raises(ProviderError, match="invalid JSON"):
            client.get_status("1001")

    @respx.mock
    def test_error_body_raises_provider_error(self, client):
        respx.post(SINGLE_URL).mock(
            return_value=httpx.Response(200, json={"error": "unknown order"})
        )

        with pytest.raises(ProviderError, match="unknown order"):
            client.get_status("1001")

    @respx.mock
    def test_non_object_body_raises_provider_error(self, client):
        respx.post(SINGLE_URL).mock(return_value=httpx.Response(200, json=[1, 2]))

        with pytest.raises(ProviderError):
            client.get_status("1001")


class TestGetStatusBulk:
    @respx.mock
    def test_returns_mapping_by_foreign_id(self, client):
        route = respx.post(BULK_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "1001": {"status": "ready"},
                    "1002": {"status": "partlyDelivered", "amount": 400},
                },
            )
        )

        statuses = client.get_status_bulk(["1001", "1002"])

        assert set(statuses) == {"1001", "1002"}
        assert statuses["1002"].amount == 400
        body = json.loads(route.calls.last.request.content)
        assert body["orderIDs"] == ["1001", "1002"]
        assert body["apiUser"] == "user"

    def test_more_than_max_batch_is_rejected(self, client):
        with pytest.raises(ValueError):
            client.get_status_bulk([str(i) for i in range(21)])

    def test_explicit_max_batch_override(self, client):
        with pytest.raises(ValueError):
            client.get_status_bulk(["1", "2", "3"], max_batch=2)

    @respx.mock(assert_all_called=False)
    def test_empty_list_makes_no_request(self, client):
        route = respx.post(BULK_URL)

        assert client.get_status_bulk([]) == {}
        assert not route.called

    @respx.mock
    def test_malformed_entry_fails_whole_batch(self, client):
        respx.post(BULK_URL).mock(
            return_value=httpx.Response(200, json={"1001": "oops"})
        )

        with pytest.raises(ProviderError):
            client.get_status_bulk(["1001"])


class TestCredentials:
    def test_missing_credentials_fail_before_any_request(self):
        client = FulfillmentProviderClient(base_url=BASE_URL, api_user="", api_key="")

        assert client.has_credentials is False
        with pytest.raises(ProviderCredentialsMissing):
            client.get_status("1001")

    def test_defaults_come_from_settings(self, settings):
        settings.FULFILLMENT_API_USER = "from-settings"
        settings.FULFILLMENT_API_KEY = "secret"
        settings.FULFILLMENT_BULK_MAX_BATCH = 20

        client = FulfillmentProviderClient()

        assert client.has_credentials
        assert client.max_batch == 20
        assert client.base_url == "https://provider.test"
