# wealthvault/services/market_data/service.py
"""
Market data service: provider calls plus the fallback policy.

The provider is unreliable by assumption. This service turns its
failures into documented fallback values so callers always get something
usable, and logs every degradation:

    fetch_price            -> None on failure
    quote_or_fallback      -> price 1 USD, name = symbol on failure
    try_fetch_exchange_rates -> None on failure
    fetch_exchange_rates   -> {USD: 1, EUR: 1, GBP: 1} on failure
    get_ticker_catalog     -> cached copy, else provider, else fixed fallback

The ticker catalog is cached indefinitely after the first successful
fetch. An unreadable cache entry is discarded and the provider is asked
again. The fallback catalog is never cached, so a later call can still
pick up the real one.

Usage:
    service = MarketDataService(provider, cache=SqlPayloadCache(SessionLocal))
    quote = service.quote_or_fallback("VWRP")
"""

import json
import logging
from decimal import Decimal

from wealthvault.services.constants import (
    FALLBACK_EXCHANGE_RATES,
    FALLBACK_PRICE,
    FALLBACK_QUOTE_CURRENCY,
    FALLBACK_TICKER_CATALOG,
    TICKER_CATALOG_CACHE_KEY,
)
from wealthvault.services.exceptions import MalformedResponseError, MarketDataError
from wealthvault.services.market_data.base import (
    MarketDataProvider,
    MarketQuote,
    TickerGroup,
    TickerOption,
    dump_ticker_catalog,
    parse_ticker_catalog,
)
from wealthvault.services.protocols import PayloadCache

logger = logging.getLogger(__name__)


def fallback_quote(symbol: str) -> MarketQuote:
    """Quote used when the provider cannot price a symbol."""
    symbol = symbol.strip().upper()
    return MarketQuote(symbol=symbol, price=FALLBACK_PRICE, currency=FALLBACK_QUOTE_CURRENCY, name=symbol)


def fallback_catalog() -> list[TickerGroup]:
    return [
        TickerGroup(
            group=group,
            options=tuple(TickerOption(symbol=symbol, label=label) for symbol, label in options),
        )
        for group, options in FALLBACK_TICKER_CATALOG
    ]


class MarketDataService:
    """
    Wraps a MarketDataProvider with fallbacks and the catalog cache.

    Thread-safe as long as the provider is; the refresh path calls
    fetch_price from several worker threads at once.
    """

    def __init__(self, provider: MarketDataProvider, cache: PayloadCache | None = None) -> None:
        self._provider = provider
        self._cache = cache

    @property
    def provider_name(self) -> str:
        return self._provider.name

    # =========================================================================
    # QUOTES
    # =========================================================================

    def get_quote(self, symbol: str) -> MarketQuote:
        """
        Raw provider quote with no fallback.

        Raises:
            MarketDataError: Any provider failure
        """
        return self._provider.get_quote(symbol)

    def fetch_price(self, symbol: str) -> MarketQuote | None:
        try:
            return self._provider.get_quote(symbol)
        except MarketDataError as e:
            logger.warning(f"Price lookup failed for {symbol}: {e}")
            return None

    def quote_or_fallback(self, symbol: str) -> MarketQuote:
        return self.fetch_price(symbol) or fallback_quote(symbol)

    # =========================================================================
    # EXCHANGE RATES
    # =========================================================================

    def try_fetch_exchange_rates(self, base_currency: str) -> dict[str, Decimal] | None:
        try:
            return self._provider.get_exchange_rates(base_currency)
        except MarketDataError as e:
            logger.warning(f"Exchange rate lookup failed for {base_currency}: {e}")
            return None

    def fetch_exchange_rates(self, base_currency: str) -> dict[str, Decimal]:
        rates = self.try_fetch_exchange_rates(base_currency)
        if rates is None:
            logger.info(f"Using fallback exchange rates for {base_currency}")
            return dict(FALLBACK_EXCHANGE_RATES)
        return rates

    # =========================================================================
    # TICKER CATALOG
    # =========================================================================

    def get_ticker_catalog(self) -> list[TickerGroup]:
        cached = self._read_cached_catalog()
        if cached is not None:
            return cached

        try:
            catalog = self._provider.get_ticker_catalog()
        except MarketDataError as e:
            logger.warning(f"Ticker catalog fetch failed, serving fallback: {e}")
            return fallback_catalog()

        if self._cache is not None:
            self._cache.put(TICKER_CATALOG_CACHE_KEY, dump_ticker_catalog(catalog))
        logger.info(f"Fetched ticker catalog with {len(catalog)} groups")
        return catalog

    def _read_cached_catalog(self) -> list[TickerGroup] | None:
        if self._cache is None:
            return None

        payload = self._cache.get(TICKER_CATALOG_CACHE_KEY)
        if payload is None:
            return None

        try:
            return parse_ticker_catalog(json.loads(payload))
        except (json.JSONDecodeError, MalformedResponseError) as e:
            logger.warning(f"Discarding unreadable ticker catalog cache: {e}")
            self._cache.delete(TICKER_CATALOG_CACHE_KEY)
            return None
