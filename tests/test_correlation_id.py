# tests/test_correlation_id.py
"""
Tests for correlation ID middleware and context management.
"""

from wealthvault.utils.context import (
    clear_correlation_id,
    clear_user_id,
    get_correlation_id,
    get_user_id,
    set_correlation_id,
    set_user_id,
)


class TestCorrelationIdContext:
    """Tests for correlation ID context functions."""

    def test_get_returns_none_when_not_set(self):
        """Should return None when correlation ID is not set."""
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_and_get_correlation_id(self):
        set_correlation_id("test-correlation-123")
        assert get_correlation_id() == "test-correlation-123"
        clear_correlation_id()

    def test_clear_correlation_id(self):
        set_correlation_id("test-correlation-456")
        clear_correlation_id()
        assert get_correlation_id() is None


class TestUserIdContext:
    """The identity dependency records the caller for log lines."""

    def test_set_and_clear(self):
        set_user_id("user-42")
        assert get_user_id() == "user-42"
        clear_user_id()
        assert get_user_id() is None


class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    def test_generates_correlation_id_when_not_provided(self, client):
        """Should generate a UUID when the request carries no id."""
        response = client.get("/health")

        assert response.status_code == 200
        correlation_id = response.headers["X-Correlation-ID"]
        assert len(correlation_id) == 36
        assert correlation_id.count("-") == 4

    def test_uses_provided_correlation_id(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "my-custom-trace-id-123"})
        assert response.headers["X-Correlation-ID"] == "my-custom-trace-id-123"

    def test_uses_request_id_header_as_fallback(self, client):
        response = client.get("/health", headers={"X-Request-ID": "my-request-id-456"})
        assert response.headers["X-Correlation-ID"] == "my-request-id-456"

    def test_prefers_correlation_id_over_request_id(self, client):
        response = client.get(
            "/health",
            headers={"X-Correlation-ID": "correlation-123", "X-Request-ID": "request-456"},
        )
        assert response.headers["X-Correlation-ID"] == "correlation-123"

    def test_error_responses_carry_the_id(self, client):
        """Domain errors go through the handlers and still get the header."""
        response = client.get("/holdings", headers={"X-Correlation-ID": "trace-401"})

        assert response.status_code == 401
        assert response.headers["X-Correlation-ID"] == "trace-401"

    def test_different_requests_get_different_ids(self, client):
        id1 = client.get("/health").headers["X-Correlation-ID"]
        id2 = client.get("/health").headers["X-Correlation-ID"]

        assert id1 != id2

    def test_context_is_cleared_after_request(self, client, auth_headers):
        client.get("/holdings", headers={**auth_headers, "X-Correlation-ID": "trace-1"})

        assert get_correlation_id() is None
        assert get_user_id() is None
