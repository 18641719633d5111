# wealthvault/services/market_data/base.py
"""
Abstract interface for market data providers.

This module defines the contract that all market data providers must follow.
Using an abstract base class allows for:
- Swapping the generative-text provider for a conventional quote API
- Mock implementations for testing
- A single fallback policy in MarketDataService regardless of provider

Providers make exactly one attempt per call. They raise MarketDataError
subclasses on failure and never return fallback values themselves; the
fallback policy belongs to MarketDataService.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from wealthvault.services.exceptions import MalformedResponseError


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class MarketQuote:
    """
    Latest price of a ticker in its trading currency.

    Attributes:
        symbol: Ticker, upper-case
        price: Price in `currency` (> 0)
        currency: ISO-4217-like code, upper-case
        name: Instrument name as reported by the provider
    """

    symbol: str
    price: Decimal
    currency: str
    name: str

    def __post_init__(self) -> None:
        """Validate and normalize fields."""
        if not self.symbol:
            raise ValueError("symbol is required")
        if not self.currency:
            raise ValueError("currency is required")
        if not self.price.is_finite() or self.price <= 0:
            raise ValueError(f"price must be positive, got {self.price}")
        object.__setattr__(self, "symbol", self.symbol.strip().upper())
        object.__setattr__(self, "currency", self.currency.strip().upper())


@dataclass(frozen=True)
class TickerOption:
    symbol: str
    label: str


@dataclass(frozen=True)
class TickerGroup:
    """A named group of ticker suggestions (e.g. "Global ETFs")."""

    group: str
    options: tuple[TickerOption, ...] = field(default_factory=tuple)


# =============================================================================
# ABSTRACT BASE CLASS
# =============================================================================

class MarketDataProvider(ABC):
    """
    Abstract base class for market data providers.

    Raises (all methods):
        ProviderUnavailableError: Network error, server error, not configured
        RateLimitError: Provider quota exceeded
        MalformedResponseError: Answer received but unusable
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Unique identifier for this provider.

        Used for logging and error messages.
        """
        pass

    @abstractmethod
    def get_quote(self, symbol: str) -> MarketQuote:
        """Fetch the latest price, currency and name for a ticker."""
        pass

    @abstractmethod
    def get_exchange_rates(self, base_currency: str) -> dict[str, Decimal]:
        """
        Fetch rates for base_currency against each quoted currency.

        Returns:
            Mapping code -> "1 base = X code" for USD, EUR and GBP
        """
        pass

    @abstractmethod
    def get_ticker_catalog(self) -> list[TickerGroup]:
        """Fetch a grouped list of popular tickers."""
        pass


# =============================================================================
# CATALOG SERIALIZATION
# =============================================================================

def parse_ticker_catalog(data: Any, provider: str = "cache") -> list[TickerGroup]:
    """
    Build TickerGroups from decoded catalog JSON.

    Accepts the provider's shape: [{"group": ..., "options": [{"value", "label"}]}].

    Raises:
        MalformedResponseError: Shape does not match or no groups
    """
    if not isinstance(data, list) or not data:
        raise MalformedResponseError(provider, "catalog is not a non-empty list")

    groups: list[TickerGroup] = []
    try:
        for item in data:
            options = tuple(
                TickerOption(symbol=str(option["value"]).strip().upper(), label=str(option["label"]))
                for option in item["options"]
            )
            groups.append(TickerGroup(group=str(item["group"]), options=options))
    except (KeyError, TypeError) as e:
        raise MalformedResponseError(provider, f"invalid catalog entry: {e}") from e
    return groups


def dump_ticker_catalog(groups: list[TickerGroup]) -> str:
    """Serialize a catalog in the same shape parse_ticker_catalog accepts."""
    return json.dumps([
        {
            "group": group.group,
            "options": [{"value": o.symbol, "label": o.label} for o in group.options],
        }
        for group in groups
    ])
