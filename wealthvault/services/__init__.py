# wealthvault/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive collaborators (stores, providers, converters) at construction
- Are easily testable via dependency injection

Usage:
    from wealthvault.services import CurrencyConverter, FXPolicy
    from wealthvault.services import ProjectionEngine, ValuationService
    from wealthvault.services import (
        HoldingNotFoundError,
        InvalidProjectionError,
        MarketDataError,
    )

Architecture:
    services/
    ├── __init__.py          # This file - main exports
    ├── exceptions.py        # Domain exceptions
    ├── constants.py         # Fallbacks, defaults, UI bounds, rate limits
    ├── protocols.py         # Store interfaces (Protocol classes)
    ├── currency.py          # Currency converter and FX policy
    ├── contributions.py     # Symbol-level monthly contributions
    ├── debounce.py          # Debounced writer
    ├── holdings_store.py    # SQL holdings + preference store
    ├── cache_store.py       # SQL payload cache (ticker catalog)
    ├── market_data/         # Provider interface, Gemini provider, fallbacks
    ├── portfolio/           # State, transitions, per-user session
    ├── projection/          # Compounding engine with crash shocks
    └── valuation/           # Per-lot and portfolio valuation, risk mix
"""

from wealthvault.services.contributions import ContributionTracker
from wealthvault.services.currency import CurrencyConverter, FXPolicy, convert
from wealthvault.services.exceptions import (
    FXRateError,
    HoldingNotFoundError,
    InvalidHoldingError,
    InvalidProjectionError,
    MalformedResponseError,
    MarketDataError,
    NotFoundError,
    PersistenceError,
    ProviderUnavailableError,
    RateLimitError,
    ServiceError,
    SymbolNotFoundError,
    UnknownCurrencyError,
    ValidationError,
)
from wealthvault.services.projection import ProjectionEngine
from wealthvault.services.valuation import PatternRiskClassifier, ValuationService

__all__ = [
    # Services
    "ContributionTracker",
    "CurrencyConverter",
    "FXPolicy",
    "convert",
    "ProjectionEngine",
    "ValuationService",
    "PatternRiskClassifier",
    # Exceptions
    "ServiceError",
    "ValidationError",
    "InvalidHoldingError",
    "InvalidProjectionError",
    "NotFoundError",
    "HoldingNotFoundError",
    "SymbolNotFoundError",
    "MarketDataError",
    "ProviderUnavailableError",
    "RateLimitError",
    "MalformedResponseError",
    "FXRateError",
    "UnknownCurrencyError",
    "PersistenceError",
]
