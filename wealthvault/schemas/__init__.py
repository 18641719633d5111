# wealthvault/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

This package contains all Pydantic schemas organized by domain:
- errors: Error response formats
- holdings: Lot CRUD, contributions, refresh and sync status
- market_data: Quotes, exchange rates, ticker catalog
- projection: Projection request and trajectory
- session: Mocked login and preferences
- validators: Reusable validation functions (ticker, currency, money)
- valuation: Portfolio valuation, risk mix, allocation
"""

from wealthvault.schemas.errors import ErrorDetail, ValidationErrorDetail
from wealthvault.schemas.holdings import (
    ContributionResponse,
    ContributionUpdate,
    GroupedHoldingsResponse,
    HoldingCreate,
    HoldingListResponse,
    HoldingResponse,
    HoldingUpdate,
    RefreshResponse,
    RemoveSymbolResponse,
    SymbolGroupResponse,
    SyncStatusResponse,
)
from wealthvault.schemas.market_data import (
    ExchangeRatesResponse,
    QuoteResponse,
    TickerCatalogResponse,
    TickerGroupResponse,
    TickerOptionResponse,
)
from wealthvault.schemas.projection import (
    ProjectionPointResponse,
    ProjectionRequest,
    ProjectionResponse,
    ScenarioRequest,
)
from wealthvault.schemas.session import (
    LoginResponse,
    LogoutResponse,
    PreferencesResponse,
    PreferencesUpdate,
    UserProfile,
)
from wealthvault.schemas.valuation import (
    AllocationEntryResponse,
    AllocationResponse,
    HoldingValuationResponse,
    PortfolioValuationResponse,
    RiskMixResponse,
)

__all__ = [
    "ErrorDetail",
    "ValidationErrorDetail",
    "HoldingCreate",
    "HoldingUpdate",
    "HoldingResponse",
    "HoldingListResponse",
    "ContributionUpdate",
    "ContributionResponse",
    "SymbolGroupResponse",
    "GroupedHoldingsResponse",
    "RemoveSymbolResponse",
    "RefreshResponse",
    "SyncStatusResponse",
    "QuoteResponse",
    "ExchangeRatesResponse",
    "TickerOptionResponse",
    "TickerGroupResponse",
    "TickerCatalogResponse",
    "ScenarioRequest",
    "ProjectionRequest",
    "ProjectionPointResponse",
    "ProjectionResponse",
    "UserProfile",
    "PreferencesResponse",
    "PreferencesUpdate",
    "LoginResponse",
    "LogoutResponse",
    "HoldingValuationResponse",
    "RiskMixResponse",
    "PortfolioValuationResponse",
    "AllocationEntryResponse",
    "AllocationResponse",
]
