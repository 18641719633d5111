# wealthvault/dependencies.py
"""
Dependency injection module for FastAPI services.

This module provides singleton service instances that are shared across
all requests. Sessions in particular must be shared: each user's
in-memory portfolio lives in the SessionManager singleton.

Services are lazily initialized on first use to avoid import-time side effects.

Usage in routers:
    from wealthvault.dependencies import get_portfolio_session, get_valuation_service

    @router.get("/")
    def list_holdings(
        session: PortfolioSession = Depends(get_portfolio_session),
    ):
        ...
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from wealthvault.config import settings
from wealthvault.database import SessionLocal
from wealthvault.services.cache_store import SqlPayloadCache
from wealthvault.services.constants import INITIAL_EXCHANGE_RATES
from wealthvault.services.currency import CurrencyConverter, FXPolicy
from wealthvault.services.exceptions import PersistenceError
from wealthvault.services.holdings_store import SqlHoldingsStore
from wealthvault.services.market_data import GeminiProvider, MarketDataProvider, MarketDataService
from wealthvault.services.portfolio.session import PortfolioSession, SessionManager
from wealthvault.services.projection import ProjectionEngine
from wealthvault.services.valuation import PatternRiskClassifier, RiskClassifier, ValuationService
from wealthvault.utils.context import set_user_id

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Using @lru_cache ensures the function returns the same instance on every call
#
# Order matters: define dependencies before dependents
# 1. get_market_data_provider, get_payload_cache, get_holdings_store (no deps)
# 2. get_market_data_service (depends on provider, cache)
# 3. get_currency_converter, get_risk_classifier (config only)
# 4. get_valuation_service (depends on converter, classifier)
# 5. get_session_manager (depends on store, market data, converter)


@lru_cache(maxsize=1)
def get_market_data_provider() -> MarketDataProvider:
    """
    Get the singleton market data provider instance.

    Shares one HTTP client (and its connection pool) across all requests.
    """
    logger.debug("Initializing singleton GeminiProvider")
    return GeminiProvider(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.provider_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_payload_cache() -> SqlPayloadCache:
    return SqlPayloadCache(SessionLocal)


@lru_cache(maxsize=1)
def get_holdings_store() -> SqlHoldingsStore:
    return SqlHoldingsStore(SessionLocal)


@lru_cache(maxsize=1)
def get_market_data_service() -> MarketDataService:
    """
    Get the singleton MarketDataService instance.

    Holds the ticker catalog cache handle; fallbacks are applied here.
    """
    logger.debug("Initializing singleton MarketDataService")
    return MarketDataService(provider=get_market_data_provider(), cache=get_payload_cache())


@lru_cache(maxsize=1)
def get_currency_converter() -> CurrencyConverter:
    return CurrencyConverter(policy=FXPolicy(settings.fx_policy))


@lru_cache(maxsize=1)
def get_risk_classifier() -> RiskClassifier:
    return PatternRiskClassifier(settings.stable_symbol_tokens)


@lru_cache(maxsize=1)
def get_valuation_service() -> ValuationService:
    logger.debug("Initializing singleton ValuationService")
    return ValuationService(converter=get_currency_converter(), classifier=get_risk_classifier())


@lru_cache(maxsize=1)
def get_projection_engine() -> ProjectionEngine:
    return ProjectionEngine()


def _initial_display_currency(store: SqlHoldingsStore, user_id: str) -> str:
    try:
        stored = store.get_display_currency(user_id)
    except PersistenceError as e:
        logger.error(f"Could not read preferences for user {user_id}: {e}")
        return settings.default_display_currency
    if stored and stored in settings.supported_currencies:
        return stored
    return settings.default_display_currency


def _build_session(user_id: str) -> PortfolioSession:
    store = get_holdings_store()
    return PortfolioSession(
        user_id=user_id,
        store=store,
        preferences=store,
        market_data=get_market_data_service(),
        converter=get_currency_converter(),
        display_currency=_initial_display_currency(store, user_id),
        exchange_rates=dict(INITIAL_EXCHANGE_RATES),
        debounce_seconds=settings.persist_debounce_seconds,
        max_workers=settings.refresh_max_workers,
        supported_currencies=settings.supported_currencies,
    )


@lru_cache(maxsize=1)
def get_session_manager() -> SessionManager:
    """
    Get the singleton SessionManager.

    Flushed on application shutdown (see main.lifespan).
    """
    logger.debug("Initializing singleton SessionManager")
    return SessionManager(factory=_build_session)


# =============================================================================
# IDENTITY DEPENDENCIES
# =============================================================================


def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """
    Dependency that reads the opaque user id sent by the client.

    Identity is mocked: whatever id the login endpoint handed out is
    trusted as-is.

    Raises:
        HTTPException 401: If the X-User-Id header is missing or blank
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated: X-User-Id header required",
        )
    set_user_id(user_id)
    return user_id


def get_portfolio_session(
    user_id: Annotated[str, Depends(get_current_user_id)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> PortfolioSession:
    """The caller's session, created and loaded on first use."""
    return manager.get(user_id)


def reset_singletons() -> None:
    """Clear all cached singletons (tests)."""
    for factory in (
        get_market_data_provider,
        get_payload_cache,
        get_holdings_store,
        get_market_data_service,
        get_currency_converter,
        get_risk_classifier,
        get_valuation_service,
        get_projection_engine,
        get_session_manager,
    ):
        factory.cache_clear()
