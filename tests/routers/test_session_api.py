# tests/routers/test_session_api.py
"""
API layer tests for session endpoints and global routes.

Covers the mocked login, display currency preferences, logout and the
root/health endpoints.
"""

from wealthvault.services.constants import DEMO_USER_ID


class TestLogin:
    """POST /session/login."""

    def test_returns_demo_identity(self, client):
        response = client.post("/session/login")

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["user_id"] == DEMO_USER_ID
        assert data["user"]["name"]
        assert data["preferences"]["display_currency"] == "GBP"
        assert data["preferences"]["currency_symbol"] == "£"
        assert set(data["preferences"]["supported_currencies"]) >= {"GBP", "USD", "EUR"}

    def test_login_restores_stored_preference(self, client, sql_store):
        sql_store.save_display_currency(DEMO_USER_ID, "EUR")

        response = client.post("/session/login")

        assert response.json()["preferences"]["display_currency"] == "EUR"


class TestPreferences:
    """GET/PUT /session/preferences."""

    def test_get_requires_identity(self, client):
        assert client.get("/session/preferences").status_code == 401

    def test_update_is_stored_immediately(self, client, auth_headers, sql_store):
        response = client.put(
            "/session/preferences", json={"display_currency": "usd"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["display_currency"] == "USD"
        assert response.json()["currency_symbol"] == "$"
        assert sql_store.get_display_currency("api-user") == "USD"

        current = client.get("/session/preferences", headers=auth_headers).json()
        assert current["display_currency"] == "USD"

    def test_unsupported_currency_is_400(self, client, auth_headers):
        response = client.put(
            "/session/preferences", json={"display_currency": "JPY"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "display_currency"}

    def test_malformed_currency_is_422(self, client, auth_headers):
        response = client.put(
            "/session/preferences", json={"display_currency": "POUNDS"}, headers=auth_headers
        )
        assert response.status_code == 422


class TestLogout:
    """POST /session/logout."""

    def test_logout_without_session(self, client, auth_headers):
        response = client.post("/session/logout", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"user_id": "api-user", "flushed": False}

    def test_logout_closes_session(self, client, auth_headers, api_manager):
        client.get("/holdings", headers=auth_headers)
        assert len(api_manager) == 1

        client.post("/session/logout", headers=auth_headers)

        assert len(api_manager) == 0


class TestGlobalEndpoints:
    """Root and health routes."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_health_degraded_without_provider_key(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["market_data"]["status"] == "unconfigured"
        assert data["checks"]["market_data"]["critical"] is False

    def test_unknown_route_uses_error_format(self, client):
        response = client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == "NotFoundError"
