# wealthvault/services/market_data/__init__.py
"""
Market data services package.

This package contains:
- Abstract interface for market data providers (base.py)
- Gemini implementation (gemini.py)
- Fallback and caching policy (service.py)

Architecture:
    MarketDataProvider (ABC)
    └── GeminiProvider (concrete)

    MarketDataService
    └── Fallback values on provider failure
    └── Ticker catalog cache
"""

from wealthvault.services.market_data.base import (
    MarketDataProvider,
    MarketQuote,
    TickerGroup,
    TickerOption,
    dump_ticker_catalog,
    parse_ticker_catalog,
)
from wealthvault.services.market_data.gemini import GeminiProvider
from wealthvault.services.market_data.service import (
    MarketDataService,
    fallback_catalog,
    fallback_quote,
)

__all__ = [
    "MarketDataProvider",
    "MarketQuote",
    "TickerGroup",
    "TickerOption",
    "dump_ticker_catalog",
    "parse_ticker_catalog",
    "GeminiProvider",
    "MarketDataService",
    "fallback_catalog",
    "fallback_quote",
]
