# wealthvault/schemas/valuation.py
"""
Pydantic schemas for portfolio valuation.

These schemas handle:
- Per-lot valuation in the display currency
- Portfolio totals and gain/loss
- Risk mix (growth vs stable)
- Per-symbol allocation

Monetary values are rounded to cents; percentages are not rounded.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class HoldingValuationResponse(BaseModel):
    """One lot valued in the display currency."""

    holding_id: str
    symbol: str
    shares: Decimal
    total_paid: Decimal
    display_price: Decimal = Field(..., description="Price converted to the display currency")
    market_value: Decimal
    gain_loss: Decimal
    gain_loss_pct: Decimal | None = Field(
        default=None,
        description="Gain/loss as percent of amount paid (null when nothing was paid)"
    )
    avg_cost_per_share: Decimal
    risk_bucket: str
    native_price: Decimal | None = None
    original_currency: str
    monthly_contribution: Decimal


class RiskMixResponse(BaseModel):
    """Growth vs stable split. Percentages are fractions of 1."""

    growth_value: Decimal
    stable_value: Decimal
    growth_pct: Decimal
    stable_pct: Decimal


class PortfolioValuationResponse(BaseModel):
    display_currency: str
    total_value: Decimal
    total_paid: Decimal
    total_gain_loss: Decimal
    total_gain_loss_pct: Decimal | None = None
    monthly_contribution: Decimal = Field(..., description="Sum over distinct symbols")
    risk_mix: RiskMixResponse
    holdings: list[HoldingValuationResponse]
    holding_count: int
    exchange_rates: dict[str, Decimal]


class AllocationEntryResponse(BaseModel):
    symbol: str
    market_value: Decimal
    percentage: Decimal = Field(..., description="Percent of total value (0..100)")
    risk_bucket: str


class AllocationResponse(BaseModel):
    display_currency: str
    total_value: Decimal
    entries: list[AllocationEntryResponse]
    risk_mix: RiskMixResponse
