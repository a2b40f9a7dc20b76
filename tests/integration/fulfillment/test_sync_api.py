"""Integration tests for the sync endpoints, with the provider mocked over HTTP."""

import httpx
import pytest
import respx

from modules.orders.constants import ItemStatus
from modules.orders.models import OrderStatusLog

pytestmark = pytest.mark.integration

CRON_URL = "/api/v1/fulfillment/cron/sync/"
SYNC_URL = "/api/v1/fulfillment/sync/"
SYNC_ORDER_URL = "/api/v1/fulfillment/sync/order/"

PROVIDER = "https://provider.test"


class TestCronSync:
    @respx.mock
    def test_open_when_no_secret_configured(self, api_client, make_item):
        make_item(foreign_order_id="1001")
        respx.post(f"{PROVIDER}/orderStatusAPI").mock(
            return_value=httpx.Response(200, json={"status": "ready"})
        )

        response = api_client.get(CRON_URL)

        assert response.status_code == 200
        assert response.json() == {"synced": 1, "ordersChecked": 1}

    @respx.mock
    def test_orders_checked_counts_distinct_orders(self, api_client, make_order, make_item):
        order = make_order()
        for fid in ("1", "2", "3"):
            make_item(order=order, foreign_order_id=fid)
        respx.post(f"{PROVIDER}/orderStatusBulkAPI").mock(
            return_value=httpx.Response(
                200,
                json={fid: {"status": "ready"} for fid in ("1", "2", "3")},
            )
        )

        response = api_client.get(CRON_URL)

        assert response.status_code == 200
        assert response.json() == {"synced": 3, "ordersChecked": 1}

    def test_wrong_secret_is_unauthorized(self, api_client, settings):
        settings.CRON_SECRET = "s3cret"

        response = api_client.get(CRON_URL, HTTP_AUTHORIZATION="Bearer nope")

        assert response.status_code == 401

    def test_missing_header_is_unauthorized(self, api_client, settings):
        settings.CRON_SECRET = "s3cret"

        response = api_client.get(CRON_URL)

        assert response.status_code == 401

    def test_matching_secret_runs_sync(self, api_client, settings):
        settings.CRON_SECRET = "s3cret"

        response = api_client.get(CRON_URL, HTTP_AUTHORIZATION="Bearer s3cret")

        assert response.status_code == 200
        assert response.json() == {"synced": 0, "ordersChecked": 0}

    def test_missing_credentials_is_server_error(self, api_client, settings):
        settings.FULFILLMENT_API_KEY = ""

        response = api_client.get(CRON_URL)

        assert response.status_code == 500
        assert "detail" in response.json()

    @respx.mock
    def test_scheduled_trigger_note_is_logged(self, api_client, make_item):
        item = make_item(foreign_order_id="1001", status=ItemStatus.NEW)
        respx.post(f"{PROVIDER}/orderStatusAPI").mock(
            return_value=httpx.Response(200, json={"status": "ready"})
        )

        api_client.get(CRON_URL)

        assert "scheduled" in OrderStatusLog.objects.get(item=item).note


class TestManualSync:
    def test_requires_authentication(self, api_client):
        response = api_client.post(SYNC_URL)
        assert response.status_code == 401

    def test_empty_run_has_message(self, auth_client):
        response = auth_client.post(SYNC_URL)

        body = response.json()
        assert response.status_code == 200
        assert body["synced"] == 0
        assert body["ordersUpdated"] == 0
        assert body["results"] == []
        assert "message" in body
        assert "timestamp" in body

    @respx.mock
    def test_results_echo_provider_payload(self, auth_client, make_order, make_item):
        order = make_order()
        make_item(order=order, foreign_order_id="1", status=ItemStatus.NEW)
        make_item(order=order, foreign_order_id="2", status=ItemStatus.NEW)
        route = respx.post(f"{PROVIDER}/orderStatusBulkAPI").mock(
            return_value=httpx.Response(
                200,
                json={
                    "1": {"status": "finished", "amountOrdered": 500},
                    "2": {"status": "interrupted", "accountCheck": "captcha"},
                },
            )
        )

        response = auth_client.post(SYNC_URL)

        body = response.json()
        assert route.call_count == 1
        assert body["synced"] == 2
        assert body["ordersUpdated"] == 1
        echoes = {r["foreignOrderId"]: r for r in body["results"]}
        assert echoes["1"]["providerResponse"] == {"status": "finished", "amountOrdered": 500}
        assert echoes["1"]["quantityDelivered"] == "500"
        assert echoes["2"]["newStatus"] == ItemStatus.ON_HOLD_CUSTOMER
        assert "message" not in body
        assert "apiKey" not in str(body)

    @respx.mock
    def test_provider_outage_still_returns_result(self, auth_client, make_order, make_item):
        order = make_order()
        make_item(order=order, foreign_order_id="1")
        make_item(order=order, foreign_order_id="2")
        respx.post(f"{PROVIDER}/orderStatusBulkAPI").mock(
            return_value=httpx.Response(503)
        )

        response = auth_client.post(SYNC_URL)

        assert response.status_code == 200
        assert response.json()["synced"] == 0
        assert response.json()["failedBatches"] == 1


class TestOrderSync:
    def test_missing_order_id_is_bad_request(self, auth_client):
        response = auth_client.post(SYNC_ORDER_URL, {}, format="json")
        assert response.status_code == 400

    def test_invalid_order_id_is_bad_request(self, auth_client):
        response = auth_client.post(SYNC_ORDER_URL, {"orderId": "abc"}, format="json")
        assert response.status_code == 400

    def test_unknown_order_is_not_found(self, auth_client):
        response = auth_client.post(
            SYNC_ORDER_URL,
            {"orderId": "0190a1d2-0000-7000-8000-000000000000"},
            format="json",
        )
        assert response.status_code == 404

    @respx.mock
    def test_syncs_only_that_order(self, auth_client, make_order, make_item):
        order = make_order()
        item = make_item(order=order, foreign_order_id="1001", status=ItemStatus.NEW)
        other = make_item(foreign_order_id="9999", status=ItemStatus.NEW)
        respx.post(f"{PROVIDER}/orderStatusAPI").mock(
            return_value=httpx.Response(200, json={"status": "partlyDelivered"})
        )

        response = auth_client.post(
            SYNC_ORDER_URL, {"orderId": str(order.id)}, format="json"
        )

        item.refresh_from_db()
        other.refresh_from_db()
        assert response.status_code == 200
        assert response.json()["synced"] == 1
        assert item.status == ItemStatus.SHIPPING
        assert other.status == ItemStatus.NEW
        assert "manual" in OrderStatusLog.objects.get(item=item).note
