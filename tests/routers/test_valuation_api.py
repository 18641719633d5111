# tests/routers/test_valuation_api.py
"""
API layer tests for valuation endpoints.

These tests verify the HTTP layer using FastAPI's TestClient:
- Totals, per-lot values and risk mix in the display currency
- Allocation ordering
- Display currency switch
"""

from decimal import Decimal

from tests.conftest import create_holding


def seed(sql_store):
    """VAGS worth 300 GBP and AAPL worth 700 GBP (875 USD at 1.25)."""
    sql_store.save_holdings("api-user", [
        create_holding(symbol="VAGS", shares="3", total_paid="270", current_price="100", holding_id="lot-1"),
        create_holding(
            symbol="AAPL", shares="7", total_paid="630",
            native_price="125", original_currency="USD", holding_id="lot-2",
            monthly_contribution="100",
        ),
    ])


class TestGetValuation:
    """GET /valuation."""

    def test_empty_portfolio(self, client, auth_headers):
        response = client.get("/valuation", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total_value"]) == Decimal("0")
        assert data["total_gain_loss_pct"] is None
        assert data["holding_count"] == 0
        assert Decimal(data["risk_mix"]["growth_pct"]) == Decimal("0")

    def test_totals_and_risk_mix(self, client, auth_headers, sql_store):
        seed(sql_store)

        response = client.get("/valuation", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["display_currency"] == "GBP"
        assert Decimal(data["total_value"]) == Decimal("1000")
        assert Decimal(data["total_paid"]) == Decimal("900")
        assert Decimal(data["total_gain_loss"]) == Decimal("100")
        assert Decimal(data["total_gain_loss_pct"]) == Decimal("11.11")
        assert Decimal(data["monthly_contribution"]) == Decimal("100")
        assert Decimal(data["risk_mix"]["stable_pct"]) == Decimal("0.3")
        assert Decimal(data["risk_mix"]["growth_pct"]) == Decimal("0.7")

    def test_per_lot_values(self, client, auth_headers, sql_store):
        seed(sql_store)

        holdings = client.get("/valuation", headers=auth_headers).json()["holdings"]
        aapl = next(h for h in holdings if h["symbol"] == "AAPL")

        assert Decimal(aapl["display_price"]) == Decimal("100")
        assert Decimal(aapl["market_value"]) == Decimal("700")
        assert Decimal(aapl["gain_loss"]) == Decimal("70")
        assert aapl["original_currency"] == "USD"
        assert aapl["risk_bucket"] == "growth"

    def test_values_follow_display_currency(self, client, auth_headers, sql_store):
        seed(sql_store)

        update = client.put("/session/preferences", json={"display_currency": "USD"}, headers=auth_headers)
        assert update.status_code == 200

        data = client.get("/valuation", headers=auth_headers).json()
        assert data["display_currency"] == "USD"
        # VAGS: 300 stored at par (no original currency); AAPL: 7 x 125 USD
        assert Decimal(data["total_value"]) == Decimal("1175")
        assert Decimal(data["total_paid"]) == Decimal("900")


class TestGetAllocation:
    """GET /valuation/allocation."""

    def test_largest_first(self, client, auth_headers, sql_store):
        seed(sql_store)

        response = client.get("/valuation/allocation", headers=auth_headers)

        assert response.status_code == 200
        entries = response.json()["entries"]
        assert [e["symbol"] for e in entries] == ["AAPL", "VAGS"]
        assert Decimal(entries[0]["percentage"]) == Decimal("70")
        assert entries[1]["risk_bucket"] == "stable"
