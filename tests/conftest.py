# tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Database fixtures (in-memory SQLite)
- Mock market data provider
- In-memory holdings store with failure switches
- Sample data factories
- A TestClient wired to the fixtures above
"""

import os

# Set required environment variables BEFORE importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GEMINI_API_KEY"] = ""
os.environ.setdefault("APP_NAME", "Test App")

import threading
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wealthvault.database import init_db
from wealthvault.models import Base
from wealthvault.services.cache_store import SqlPayloadCache
from wealthvault.services.constants import INITIAL_EXCHANGE_RATES
from wealthvault.services.currency import CurrencyConverter, FXPolicy
from wealthvault.services.exceptions import PersistenceError, ProviderUnavailableError
from wealthvault.services.holdings_store import SqlHoldingsStore
from wealthvault.services.market_data.base import MarketDataProvider, MarketQuote, TickerGroup
from wealthvault.services.market_data.service import MarketDataService
from wealthvault.services.portfolio.session import PortfolioSession, SessionManager
from wealthvault.services.portfolio.types import Holding, VaultState
from wealthvault.services.valuation import PatternRiskClassifier, ValuationService

STABLE_TOKENS = ["BOND", "GILT", "GOLD", "CASH", "VAGS", "IGLT", "VGOV"]

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def sql_store(session_factory) -> SqlHoldingsStore:
    return SqlHoldingsStore(session_factory)


@pytest.fixture
def payload_cache(session_factory) -> SqlPayloadCache:
    return SqlPayloadCache(session_factory)


# =============================================================================
# MOCK MARKET DATA PROVIDER
# =============================================================================

class MockMarketDataProvider(MarketDataProvider):
    """
    Mock implementation of MarketDataProvider for testing.

    Anything not configured fails with ProviderUnavailableError, so the
    service's fallbacks kick in by default.
    """

    def __init__(self):
        self._quotes: dict[str, MarketQuote] = {}
        self._quote_errors: dict[str, Exception] = {}
        self._rates: dict[str, dict[str, Decimal]] = {}
        self._rates_error: Exception | None = None
        self._catalog: list[TickerGroup] | None = None
        self._catalog_error: Exception | None = None
        self.quote_calls: list[str] = []
        self.rates_calls: list[str] = []
        self.catalog_calls = 0
        # When set, get_quote blocks until the event is set
        self.quote_gate: threading.Event | None = None
        self.quote_started = threading.Event()

    @property
    def name(self) -> str:
        return "mock"

    def add_quote(self, symbol: str, price: str, currency: str = "USD", name: str | None = None) -> None:
        """Configure a successful quote for a symbol."""
        self._quotes[symbol.upper()] = MarketQuote(
            symbol=symbol,
            price=Decimal(price),
            currency=currency,
            name=name or symbol,
        )

    def add_quote_error(self, symbol: str, error: Exception) -> None:
        self._quote_errors[symbol.upper()] = error

    def set_rates(self, base: str, rates: dict[str, str]) -> None:
        self._rates[base.upper()] = {code: Decimal(rate) for code, rate in rates.items()}

    def set_rates_error(self, error: Exception) -> None:
        self._rates_error = error

    def set_catalog(self, groups: list[TickerGroup]) -> None:
        self._catalog = groups

    def set_catalog_error(self, error: Exception) -> None:
        self._catalog_error = error

    def get_quote(self, symbol: str) -> MarketQuote:
        symbol = symbol.upper()
        self.quote_calls.append(symbol)
        self.quote_started.set()
        if self.quote_gate is not None:
            self.quote_gate.wait(timeout=5)

        if symbol in self._quote_errors:
            raise self._quote_errors[symbol]
        if symbol in self._quotes:
            return self._quotes[symbol]
        raise ProviderUnavailableError(self.name, f"no quote configured for {symbol}")

    def get_exchange_rates(self, base_currency: str) -> dict[str, Decimal]:
        base = base_currency.upper()
        self.rates_calls.append(base)
        if self._rates_error is not None:
            raise self._rates_error
        if base in self._rates:
            return dict(self._rates[base])
        raise ProviderUnavailableError(self.name, f"no rates configured for {base}")

    def get_ticker_catalog(self) -> list[TickerGroup]:
        self.catalog_calls += 1
        if self._catalog_error is not None:
            raise self._catalog_error
        if self._catalog is not None:
            return self._catalog
        raise ProviderUnavailableError(self.name, "no catalog configured")


@pytest.fixture
def mock_provider() -> MockMarketDataProvider:
    """Create a fresh mock provider for each test."""
    return MockMarketDataProvider()


@pytest.fixture
def market_data(mock_provider, payload_cache) -> MarketDataService:
    return MarketDataService(provider=mock_provider, cache=payload_cache)


# =============================================================================
# IN-MEMORY HOLDINGS STORE
# =============================================================================

class InMemoryHoldingsStore:
    """
    HoldingsStore + PreferenceStore kept in dicts.

    fail_reads / fail_writes make every call raise PersistenceError.
    """

    def __init__(self):
        self.records: dict[str, list[Holding]] = {}
        self.preferences: dict[str, str] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.save_count = 0

    def get_holdings(self, user_id: str) -> list[Holding]:
        if self.fail_reads:
            raise PersistenceError(user_id, "read", "store offline")
        return list(self.records.get(user_id, []))

    def save_holdings(self, user_id: str, holdings: list[Holding]) -> None:
        if self.fail_writes:
            raise PersistenceError(user_id, "write", "store offline")
        self.save_count += 1
        self.records[user_id] = list(holdings)

    def get_display_currency(self, user_id: str) -> str | None:
        if self.fail_reads:
            raise PersistenceError(user_id, "read", "store offline")
        return self.preferences.get(user_id)

    def save_display_currency(self, user_id: str, currency: str) -> None:
        if self.fail_writes:
            raise PersistenceError(user_id, "write", "store offline")
        self.preferences[user_id] = currency


@pytest.fixture
def memory_store() -> InMemoryHoldingsStore:
    return InMemoryHoldingsStore()


# =============================================================================
# SERVICES
# =============================================================================

@pytest.fixture
def converter() -> CurrencyConverter:
    return CurrencyConverter(FXPolicy.LENIENT)


@pytest.fixture
def classifier() -> PatternRiskClassifier:
    return PatternRiskClassifier(STABLE_TOKENS)


@pytest.fixture
def valuation_service(converter, classifier) -> ValuationService:
    return ValuationService(converter, classifier)


@pytest.fixture
def make_session(memory_store, market_data, converter):
    """
    Factory for PortfolioSessions on the in-memory store.

    The debounce delay defaults to a minute so tests control writes
    through flush(). Every session is flushed at teardown.
    """
    created: list[PortfolioSession] = []

    def _make(
            user_id: str = "user-1",
            display_currency: str = "GBP",
            exchange_rates: dict[str, Decimal] | None = None,
            debounce_seconds: float = 60,
            store=None,
            load: bool = True,
    ) -> PortfolioSession:
        backing = store or memory_store
        session = PortfolioSession(
            user_id=user_id,
            store=backing,
            preferences=backing,
            market_data=market_data,
            converter=converter,
            display_currency=display_currency,
            exchange_rates=exchange_rates if exchange_rates is not None else dict(INITIAL_EXCHANGE_RATES),
            debounce_seconds=debounce_seconds,
            max_workers=4,
            supported_currencies=["GBP", "USD", "EUR"],
            clock=lambda: FIXED_NOW,
        )
        if load:
            session.load()
        created.append(session)
        return session

    yield _make

    for session in created:
        session.flush()


# =============================================================================
# SAMPLE DATA FACTORIES
# =============================================================================

def create_holding(
        symbol: str = "VWRP",
        shares: str = "10",
        total_paid: str = "1000",
        current_price: str | None = None,
        native_price: str | None = None,
        original_currency: str | None = None,
        monthly_contribution: str = "0",
        holding_id: str | None = None,
) -> Holding:
    """Factory function for creating Holding test data."""
    return Holding(
        id=holding_id or f"TX-{symbol}-{shares}-{total_paid}",
        symbol=symbol,
        shares=Decimal(shares),
        total_paid=Decimal(total_paid),
        current_price=Decimal(current_price) if current_price is not None else Decimal(total_paid) / Decimal(shares),
        native_price=Decimal(native_price) if native_price is not None else None,
        original_currency=original_currency,
        purchase_date=FIXED_NOW,
        last_updated=FIXED_NOW,
        monthly_contribution=Decimal(monthly_contribution),
    )


def create_state(
        holdings: list[Holding] | None = None,
        display_currency: str = "GBP",
        exchange_rates: dict[str, str] | None = None,
        user_id: str = "user-1",
) -> VaultState:
    """Factory function for creating VaultState test data."""
    rates = exchange_rates if exchange_rates is not None else {"GBP": "1", "USD": "1.25", "EUR": "1.18"}
    return VaultState(
        user_id=user_id,
        display_currency=display_currency,
        holdings=tuple(holdings or ()),
        exchange_rates={code: Decimal(rate) for code, rate in rates.items()},
    )


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture
def api_manager(sql_store, market_data, converter) -> SessionManager:
    """SessionManager whose sessions use the test database and mock provider."""

    def factory(user_id: str) -> PortfolioSession:
        return PortfolioSession(
            user_id=user_id,
            store=sql_store,
            preferences=sql_store,
            market_data=market_data,
            converter=converter,
            display_currency=sql_store.get_display_currency(user_id) or "GBP",
            exchange_rates=dict(INITIAL_EXCHANGE_RATES),
            debounce_seconds=60,
            max_workers=4,
            supported_currencies=["GBP", "USD", "EUR"],
        )

    manager = SessionManager(factory)
    yield manager
    manager.shutdown()


@pytest.fixture
def client(api_manager, market_data, sql_store) -> Iterator[TestClient]:
    """
    Create TestClient with dependency overrides.

    All API calls use the test database, the mock provider and a fresh
    session manager.
    """
    from wealthvault.dependencies import (
        get_holdings_store,
        get_market_data_service,
        get_session_manager,
        reset_singletons,
    )
    from wealthvault.main import app

    reset_singletons()
    app.dependency_overrides[get_market_data_service] = lambda: market_data
    app.dependency_overrides[get_holdings_store] = lambda: sql_store
    app.dependency_overrides[get_session_manager] = lambda: api_manager

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
    reset_singletons()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-User-Id": "api-user"}
