import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_provider_api_key_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "body": '{"apiUser": "shop", "apiKey": "k-998877"}'}
        result = mask_sensitive_data(None, None, event_dict)
        assert "k-998877" not in result["body"]
        assert '"apiKey": "***MASKED***' in result["body"]

    def test_bearer_authorization_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "headers": "Authorization: Bearer cron-secret"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "cron-secret" not in result["headers"]

    def test_backup_code_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "backup_code_1=12345678"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "12345678" not in result["data"]

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "order_item.status_logged", "item_id": "ITEM-001"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["item_id"] == "ITEM-001"
        assert result["event"] == "order_item.status_logged"
