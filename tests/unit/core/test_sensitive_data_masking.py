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

    def test_bearer_authorization_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "Authorization: Bearer eyJhbGciOi"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "eyJhbGciOi" not in result["header"]
        assert result["header"].startswith("Authorization: Bearer ")

    def test_internal_key_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "X-Internal-Key: top-secret-key"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "top-secret-key" not in result["header"]

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "order.created", "order_number": "SO-1715342400000"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_number"] == "SO-1715342400000"
        assert result["event"] == "order.created"
