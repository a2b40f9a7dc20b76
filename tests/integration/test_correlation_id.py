import logging
import uuid

import pytest

pytestmark = pytest.mark.integration


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        custom_id = "my-custom-request-id-123"
        response = client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        assert response["X-Request-ID"] == custom_id

    def test_generates_uuid_when_no_request_id(self, client):
        response = client.get("/health")
        request_id = response["X-Request-ID"]
        assert str(uuid.UUID(request_id, version=4)) == request_id

    def test_request_id_returned_on_api_errors(self, client):
        response = client.post("/api/v1/fulfillment/sync/", HTTP_X_REQUEST_ID="cid-401")
        assert response.status_code == 401
        assert response["X-Request-ID"] == "cid-401"

    def test_correlation_id_reaches_sync_logs(self, api_client_with_correlation, caplog):
        api_client, cid = api_client_with_correlation
        with caplog.at_level(logging.INFO):
            api_client.get("/api/v1/fulfillment/cron/sync/")
        sync_records = [r for r in caplog.records if "fulfillment.sync_started" in r.getMessage()]
        assert sync_records
        assert all(cid in record.getMessage() for record in sync_records)
