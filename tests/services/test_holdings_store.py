# tests/services/test_holdings_store.py
"""
Integration tests for the SQLAlchemy stores (in-memory SQLite).

Test Coverage:
- Holdings snapshot save / load / overwrite / delete
- Corrupt records surface as PersistenceError
- Display-currency preference
- Payload cache get / put / delete
"""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from wealthvault.models import HoldingsRecord
from wealthvault.services.exceptions import PersistenceError
from wealthvault.services.holdings_store import SqlHoldingsStore
from tests.conftest import create_holding


class TestSqlHoldingsStore:
    """Holdings snapshots keyed by user id."""

    def test_missing_user_returns_empty_list(self, sql_store):
        assert sql_store.get_holdings("nobody") == []

    def test_save_and_load(self, sql_store):
        holdings = [
            create_holding(symbol="VWRP", holding_id="a", monthly_contribution="100"),
            create_holding(symbol="AAPL", holding_id="b", native_price="180.5", original_currency="USD"),
        ]
        sql_store.save_holdings("user-1", holdings)

        assert sql_store.get_holdings("user-1") == holdings

    def test_save_overwrites_snapshot(self, sql_store):
        sql_store.save_holdings("user-1", [create_holding(holding_id="a")])
        sql_store.save_holdings("user-1", [create_holding(symbol="AAPL", holding_id="b")])

        assert [h.id for h in sql_store.get_holdings("user-1")] == ["b"]

    def test_users_are_isolated(self, sql_store):
        sql_store.save_holdings("user-1", [create_holding(holding_id="a")])
        sql_store.save_holdings("user-2", [])

        assert len(sql_store.get_holdings("user-1")) == 1
        assert sql_store.get_holdings("user-2") == []

    def test_decimals_kept_exactly(self, sql_store):
        holding = create_holding(shares="0.12345678", total_paid="1234.56", current_price="10000.01")
        sql_store.save_holdings("user-1", [holding])

        loaded = sql_store.get_holdings("user-1")[0]
        assert loaded.shares == Decimal("0.12345678")
        assert loaded.current_price == Decimal("10000.01")

    def test_delete(self, sql_store):
        sql_store.save_holdings("user-1", [create_holding()])
        sql_store.delete_holdings("user-1")
        assert sql_store.get_holdings("user-1") == []

    def test_corrupt_record_raises(self, sql_store, session_factory):
        with session_factory() as db:
            db.add(HoldingsRecord(user_id="user-1", holdings=[{"id": "a", "symbol": "VWRP", "shares": "-1"}]))
            db.commit()

        with pytest.raises(PersistenceError) as exc_info:
            sql_store.get_holdings("user-1")
        assert exc_info.value.operation == "read"

    def test_database_error_raises(self):
        def broken_factory():
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        store = SqlHoldingsStore(broken_factory)
        with pytest.raises(PersistenceError):
            store.get_holdings("user-1")
        with pytest.raises(PersistenceError) as exc_info:
            store.save_holdings("user-1", [])
        assert exc_info.value.operation == "write"


class TestDisplayCurrencyPreference:
    """Preference row per user."""

    def test_default_none(self, sql_store):
        assert sql_store.get_display_currency("user-1") is None

    def test_save_and_update(self, sql_store):
        sql_store.save_display_currency("user-1", "USD")
        sql_store.save_display_currency("user-1", "EUR")
        assert sql_store.get_display_currency("user-1") == "EUR"


class TestSqlPayloadCache:
    """Never-expiring key/value cache."""

    def test_miss(self, payload_cache):
        assert payload_cache.get("missing") is None

    def test_put_get_overwrite_delete(self, payload_cache):
        payload_cache.put("key", "one")
        payload_cache.put("key", "two")
        assert payload_cache.get("key") == "two"

        payload_cache.delete("key")
        assert payload_cache.get("key") is None
