# tests/routers/test_holdings_api.py
"""
API layer tests for holdings endpoints.

These tests verify the HTTP layer using FastAPI's TestClient:
- Correct status codes (200, 201, 204, 401, 404, 422)
- Response JSON structure matches Pydantic schemas
- Error responses use the standard ErrorDetail format

Test Methodology:
    1. Seed the test store (or configure the mock provider)
    2. Make HTTP requests via TestClient with an X-User-Id header
    3. Assert status codes and response structure
"""

from decimal import Decimal

from tests.conftest import create_holding


def add(client, headers, symbol="VWRP", shares="10", total_paid="1000"):
    return client.post(
        "/holdings",
        json={"symbol": symbol, "shares": shares, "total_paid": total_paid},
        headers=headers,
    )


# =============================================================================
# AUTHENTICATION
# =============================================================================

class TestIdentity:
    """Every holdings endpoint needs X-User-Id."""

    def test_missing_header_is_401(self, client):
        response = client.get("/holdings")

        assert response.status_code == 401
        assert response.json()["error"] == "UnauthorizedError"

    def test_blank_header_is_401(self, client):
        assert client.get("/holdings", headers={"X-User-Id": "  "}).status_code == 401


# =============================================================================
# CREATE / LIST
# =============================================================================

class TestAddHolding:
    """POST /holdings."""

    def test_add_priced_by_provider(self, client, auth_headers, mock_provider):
        mock_provider.add_quote("AAPL", "125", currency="USD", name="Apple Inc.")

        response = add(client, auth_headers, symbol=" aapl ", shares="2", total_paid="190.50")

        assert response.status_code == 201
        data = response.json()
        assert data["id"].startswith("TX-")
        assert data["symbol"] == "AAPL"
        assert Decimal(data["shares"]) == Decimal("2")
        assert Decimal(data["total_paid"]) == Decimal("190.50")
        assert Decimal(data["native_price"]) == Decimal("125")
        assert data["original_currency"] == "USD"
        assert Decimal(data["current_price"]) == Decimal("100")

    def test_add_with_provider_down_uses_fallback(self, client, auth_headers):
        response = add(client, auth_headers, symbol="ZZZZ")

        assert response.status_code == 201
        assert Decimal(response.json()["native_price"]) == Decimal("1")
        assert response.json()["original_currency"] == "USD"

    def test_zero_shares_is_422(self, client, auth_headers, mock_provider):
        response = add(client, auth_headers, shares="0")

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "ValidationError"
        assert any("shares" in d["field"] for d in body["details"])
        assert mock_provider.quote_calls == []

    def test_negative_paid_is_422(self, client, auth_headers):
        assert add(client, auth_headers, total_paid="-1").status_code == 422

    def test_invalid_ticker_is_422(self, client, auth_headers):
        assert add(client, auth_headers, symbol="not a ticker!").status_code == 422

    def test_list_in_insertion_order(self, client, auth_headers):
        add(client, auth_headers, symbol="VWRP")
        add(client, auth_headers, symbol="AAPL")

        response = client.get("/holdings", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "api-user"
        assert data["display_currency"] == "GBP"
        assert data["count"] == 2
        assert [h["symbol"] for h in data["holdings"]] == ["VWRP", "AAPL"]

    def test_users_do_not_see_each_other(self, client, auth_headers):
        add(client, auth_headers)
        response = client.get("/holdings", headers={"X-User-Id": "someone-else"})
        assert response.json()["count"] == 0


# =============================================================================
# EDIT / DELETE
# =============================================================================

class TestEditAndDelete:
    """PATCH and DELETE on lots and symbols."""

    def test_edit_lot(self, client, auth_headers, sql_store):
        sql_store.save_holdings("api-user", [create_holding(holding_id="lot-1")])

        response = client.patch(
            "/holdings/lot-1", json={"shares": "12", "total_paid": "1300"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert Decimal(response.json()["shares"]) == Decimal("12")
        assert Decimal(response.json()["total_paid"]) == Decimal("1300")

    def test_edit_unknown_lot_is_404(self, client, auth_headers):
        response = client.patch("/holdings/nope", json={"shares": "1"}, headers=auth_headers)

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "HoldingNotFoundError"
        assert body["details"] == {"resource_type": "Holding", "resource_id": "nope"}

    def test_edit_without_fields_is_422(self, client, auth_headers, sql_store):
        sql_store.save_holdings("api-user", [create_holding(holding_id="lot-1")])
        assert client.patch("/holdings/lot-1", json={}, headers=auth_headers).status_code == 422

    def test_delete_lot(self, client, auth_headers, sql_store):
        sql_store.save_holdings("api-user", [
            create_holding(symbol="VWRP", holding_id="lot-1"),
            create_holding(symbol="VWRP", holding_id="lot-2"),
        ])

        response = client.delete("/holdings/lot-1", headers=auth_headers)

        assert response.status_code == 204
        remaining = client.get("/holdings", headers=auth_headers).json()["holdings"]
        assert [h["id"] for h in remaining] == ["lot-2"]

    def test_delete_unknown_lot_is_404(self, client, auth_headers):
        assert client.delete("/holdings/nope", headers=auth_headers).status_code == 404

    def test_delete_symbol(self, client, auth_headers, sql_store):
        sql_store.save_holdings("api-user", [
            create_holding(symbol="VWRP", holding_id="lot-1"),
            create_holding(symbol="AAPL", holding_id="lot-2"),
            create_holding(symbol="VWRP", holding_id="lot-3"),
        ])

        response = client.delete("/holdings/symbols/vwrp", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"symbol": "VWRP", "removed": 2}

    def test_delete_unknown_symbol_is_404(self, client, auth_headers):
        response = client.delete("/holdings/symbols/NVDA", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "SymbolNotFoundError"


# =============================================================================
# CONTRIBUTIONS
# =============================================================================

class TestContributions:
    """PUT /holdings/symbols/{symbol}/contribution."""

    def test_set_contribution(self, client, auth_headers, sql_store):
        sql_store.save_holdings("api-user", [
            create_holding(symbol="VWRP", holding_id="lot-1"),
            create_holding(symbol="VWRP", holding_id="lot-2"),
            create_holding(symbol="AAPL", holding_id="lot-3", monthly_contribution="50"),
        ])

        response = client.put(
            "/holdings/symbols/VWRP/contribution", json={"amount": "250"}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["symbol"] == "VWRP"
        assert Decimal(data["total_monthly_contribution"]) == Decimal("300")

        lots = client.get("/holdings", headers=auth_headers).json()["holdings"]
        assert [Decimal(h["monthly_contribution"]) for h in lots] == [
            Decimal("250"), Decimal("250"), Decimal("50"),
        ]

    def test_amount_off_step_is_422(self, client, auth_headers, sql_store):
        sql_store.save_holdings("api-user", [create_holding(symbol="VWRP")])
        response = client.put(
            "/holdings/symbols/VWRP/contribution", json={"amount": "15"}, headers=auth_headers
        )
        assert response.status_code == 422

    def test_amount_above_max_is_422(self, client, auth_headers, sql_store):
        sql_store.save_holdings("api-user", [create_holding(symbol="VWRP")])
        response = client.put(
            "/holdings/symbols/VWRP/contribution", json={"amount": "2010"}, headers=auth_headers
        )
        assert response.status_code == 422

    def test_unknown_symbol_is_404(self, client, auth_headers):
        response = client.put(
            "/holdings/symbols/VWRP/contribution", json={"amount": "10"}, headers=auth_headers
        )
        assert response.status_code == 404


# =============================================================================
# GROUPED / REFRESH / SYNC STATUS
# =============================================================================

class TestGroupedHoldings:
    """GET /holdings/grouped."""

    def test_grouped_sums(self, client, auth_headers, sql_store):
        sql_store.save_holdings("api-user", [
            create_holding(symbol="VWRP", shares="2", total_paid="200", holding_id="lot-1"),
            create_holding(symbol="AAPL", shares="1", total_paid="150", holding_id="lot-2"),
            create_holding(symbol="VWRP", shares="3", total_paid="330", holding_id="lot-3"),
        ])

        response = client.get("/holdings/grouped", headers=auth_headers)

        assert response.status_code == 200
        groups = response.json()["groups"]
        assert [g["symbol"] for g in groups] == ["AAPL", "VWRP"]
        vwrp = groups[1]
        assert vwrp["lot_count"] == 2
        assert Decimal(vwrp["shares"]) == Decimal("5")
        assert Decimal(vwrp["total_paid"]) == Decimal("530")
        assert vwrp["risk_bucket"] == "growth"


class TestRefresh:
    """POST /holdings/refresh."""

    def test_refresh(self, client, auth_headers, sql_store, mock_provider):
        sql_store.save_holdings("api-user", [
            create_holding(symbol="AAPL", holding_id="lot-1"),
            create_holding(symbol="TBLA", holding_id="lot-2"),
        ])
        mock_provider.add_quote("AAPL", "250", currency="USD")
        mock_provider.set_rates("GBP", {"USD": "1.25", "EUR": "1.15", "GBP": "1"})

        response = client.post("/holdings/refresh", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["skipped"] is False
        assert data["refreshed"] == ["AAPL"]
        assert data["failed"] == ["TBLA"]
        assert data["rates_updated"] is True
        assert Decimal(data["exchange_rates"]["EUR"]) == Decimal("1.15")

        lots = client.get("/holdings", headers=auth_headers).json()["holdings"]
        assert Decimal(lots[0]["current_price"]) == Decimal("200")


class TestSyncStatus:
    """GET /holdings/sync-status."""

    def test_pending_after_write(self, client, auth_headers):
        add(client, auth_headers)

        data = client.get("/holdings/sync-status", headers=auth_headers).json()

        assert data["loaded"] is True
        assert data["load_error"] is None
        assert data["pending_write"] is True

    def test_logout_flushes_to_store(self, client, auth_headers, sql_store):
        add(client, auth_headers)

        response = client.post("/session/logout", headers=auth_headers)

        assert response.json() == {"user_id": "api-user", "flushed": True}
        assert len(sql_store.get_holdings("api-user")) == 1
