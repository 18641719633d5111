# wealthvault/schemas/holdings.py
"""
Pydantic schemas for holdings (purchase lots).

These schemas define:
- What data clients must send (Create)
- What data clients can update (Update)
- What data the API returns (Response)

Validation layers:
- Field constraints: type, numeric limits
- Field validators: ticker normalization, contribution step
- Session: existence checks, lot invariants

IMPORTANT: All financial values use Decimal for precision.
Never use float for money!
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from wealthvault.schemas.valuation import HoldingValuationResponse
from wealthvault.schemas.validators import validate_contribution_step, validate_ticker
from wealthvault.services.constants import MAX_MONTHLY_CONTRIBUTION


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class HoldingCreate(BaseModel):
    """
    A new purchase lot.

    total_paid is in the user's current display currency and is stored
    as entered.
    """

    symbol: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Ticker symbol",
        examples=["VWRP", "AAPL"]
    )
    shares: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        description="Number of shares in this lot (must be positive)",
        examples=["10", "2.5"]
    )
    total_paid: Decimal = Field(
        ...,
        ge=0,
        max_digits=18,
        decimal_places=2,
        description="Total amount paid, in the display currency",
        examples=["1050.00"]
    )

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return validate_ticker(v)


class HoldingUpdate(BaseModel):
    """Edit one lot. At least one field must be provided."""

    shares: Decimal | None = Field(
        default=None,
        gt=0,
        max_digits=18,
        decimal_places=8,
    )
    total_paid: Decimal | None = Field(
        default=None,
        ge=0,
        max_digits=18,
        decimal_places=2,
    )

    @model_validator(mode="after")
    def require_a_change(self) -> "HoldingUpdate":
        if self.shares is None and self.total_paid is None:
            raise ValueError("Provide shares and/or total_paid")
        return self


class ContributionUpdate(BaseModel):
    """Symbol-level monthly contribution (slider: 0..2000, step 10)."""

    amount: Decimal = Field(
        ...,
        ge=0,
        le=MAX_MONTHLY_CONTRIBUTION,
        description="Monthly amount in the display currency",
        examples=["250"]
    )

    @field_validator("amount")
    @classmethod
    def check_step(cls, v: Decimal) -> Decimal:
        return validate_contribution_step(v)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class HoldingResponse(BaseModel):
    """One lot as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    symbol: str
    shares: Decimal
    total_paid: Decimal
    current_price: Decimal
    native_price: Decimal | None = None
    original_currency: str | None = None
    purchase_date: datetime | None = None
    last_updated: datetime | None = None
    monthly_contribution: Decimal


class HoldingListResponse(BaseModel):
    user_id: str
    display_currency: str
    holdings: list[HoldingResponse]
    count: int


class SymbolGroupResponse(BaseModel):
    """All lots of one symbol with exact sums."""

    symbol: str
    lot_count: int
    shares: Decimal
    total_paid: Decimal
    market_value: Decimal
    gain_loss: Decimal
    monthly_contribution: Decimal
    risk_bucket: str
    lots: list[HoldingValuationResponse]


class GroupedHoldingsResponse(BaseModel):
    display_currency: str
    groups: list[SymbolGroupResponse]


class RemoveSymbolResponse(BaseModel):
    symbol: str
    removed: int = Field(..., description="Number of lots removed")


class ContributionResponse(BaseModel):
    symbol: str
    amount: Decimal
    total_monthly_contribution: Decimal


class RefreshResponse(BaseModel):
    """
    Outcome of a refresh-all run.

    skipped=True means another refresh was already running and nothing
    changed.
    """

    skipped: bool
    refreshed: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    rates_updated: bool = False
    refreshed_at: datetime | None = None
    exchange_rates: dict[str, Decimal] = Field(default_factory=dict)


class SyncStatusResponse(BaseModel):
    """State of the durable copy. The store may lag the session briefly."""

    loaded: bool
    load_error: str | None = None
    last_saved_at: datetime | None = None
    last_error: str | None = None
    pending_write: bool = False
