# wealthvault/services/valuation/types.py
"""
Internal data types for the Valuation Service.

These dataclasses are used internally by the valuation calculators.
They are NOT Pydantic schemas - those are defined in
wealthvault/schemas/valuation.py for API serialization.

Design Principles:
- Immutable value objects (frozen=True)
- Decimal for ALL financial values, unrounded; rounding is a display concern
- Optional fields use None, not sentinel values

Type Hierarchy:
    HoldingValuation    - One lot valued in the display currency
    RiskMix             - Growth vs stable split of market value
    PortfolioValuation  - Complete portfolio valuation
    SymbolGroup         - Lots of one symbol aggregated for display
    AllocationEntry     - One symbol's share of total value
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from wealthvault.services.valuation.classifiers import RiskBucket


@dataclass(frozen=True)
class HoldingValuation:
    """
    One lot valued in the display currency.

    Attributes:
        holding_id: Lot identifier
        symbol: Ticker
        shares: Shares in the lot
        total_paid: As entered, never converted
        display_price: valuation price converted to the display currency
        market_value: shares × display_price
        gain_loss: market_value - total_paid
        gain_loss_pct: gain_loss / total_paid × 100 (None when nothing was paid)
        avg_cost_per_share: total_paid / shares
        risk_bucket: STABLE or GROWTH
        native_price: Price in original_currency, when known
        original_currency: Currency the valuation price was quoted in
        monthly_contribution: Symbol-level contribution mirrored on the lot
    """

    holding_id: str
    symbol: str
    shares: Decimal
    total_paid: Decimal
    display_price: Decimal
    market_value: Decimal
    gain_loss: Decimal
    gain_loss_pct: Decimal | None
    avg_cost_per_share: Decimal
    risk_bucket: RiskBucket
    native_price: Decimal | None
    original_currency: str
    monthly_contribution: Decimal


@dataclass(frozen=True)
class RiskMix:
    """
    Growth vs stable split of market value.

    Percentages are fractions of 1. For an empty portfolio both are 0.
    """

    growth_value: Decimal
    stable_value: Decimal
    growth_pct: Decimal
    stable_pct: Decimal

    @classmethod
    def empty(cls) -> RiskMix:
        """Mix of a portfolio with no market value: 0 / 0."""
        zero = Decimal("0")
        return cls(growth_value=zero, stable_value=zero, growth_pct=zero, stable_pct=zero)

    @classmethod
    def all_growth(cls) -> RiskMix:
        """Default when the engine is called without portfolio data."""
        return cls(
            growth_value=Decimal("0"),
            stable_value=Decimal("0"),
            growth_pct=Decimal("1"),
            stable_pct=Decimal("0"),
        )


@dataclass(frozen=True)
class SymbolGroup:
    """All lots of one symbol. Sums are exact; nothing is rounded here."""

    symbol: str
    lots: tuple[HoldingValuation, ...]
    shares: Decimal
    total_paid: Decimal
    market_value: Decimal
    gain_loss: Decimal
    monthly_contribution: Decimal
    risk_bucket: RiskBucket

    @property
    def lot_count(self) -> int:
        return len(self.lots)


@dataclass(frozen=True)
class AllocationEntry:
    symbol: str
    market_value: Decimal
    percentage: Decimal
    risk_bucket: RiskBucket


@dataclass(frozen=True)
class PortfolioValuation:
    """
    Complete portfolio valuation in one display currency.

    Attributes:
        display_currency: Currency of every value below
        holdings: Per-lot valuations, in lot order
        total_value: Σ market_value
        total_paid: Σ total_paid
        total_gain_loss: total_value - total_paid
        total_gain_loss_pct: None when total_paid is 0
        risk_mix: Growth/stable split
        monthly_contribution: Σ over distinct symbols
    """

    display_currency: str
    holdings: tuple[HoldingValuation, ...] = field(default_factory=tuple)
    total_value: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    total_gain_loss: Decimal = Decimal("0")
    total_gain_loss_pct: Decimal | None = None
    risk_mix: RiskMix = field(default_factory=RiskMix.empty)
    monthly_contribution: Decimal = Decimal("0")

    @property
    def holding_count(self) -> int:
        return len(self.holdings)
