# wealthvault/routers/_mappers.py
"""
Mapper functions (internal types -> Pydantic schemas).

Money is rounded to cents here and nowhere else; the services keep full
precision.
"""

from wealthvault.schemas.holdings import HoldingResponse, SymbolGroupResponse
from wealthvault.schemas.validators import money, optional_money
from wealthvault.schemas.valuation import (
    AllocationEntryResponse,
    HoldingValuationResponse,
    RiskMixResponse,
)
from wealthvault.services.portfolio.types import Holding
from wealthvault.services.valuation.types import (
    AllocationEntry,
    HoldingValuation,
    RiskMix,
    SymbolGroup,
)


def map_holding(holding: Holding) -> HoldingResponse:
    return HoldingResponse(
        id=holding.id,
        symbol=holding.symbol,
        shares=holding.shares,
        total_paid=money(holding.total_paid),
        current_price=holding.current_price,
        native_price=holding.native_price,
        original_currency=holding.original_currency,
        purchase_date=holding.purchase_date,
        last_updated=holding.last_updated,
        monthly_contribution=money(holding.monthly_contribution),
    )


def map_holding_valuation(valuation: HoldingValuation) -> HoldingValuationResponse:
    return HoldingValuationResponse(
        holding_id=valuation.holding_id,
        symbol=valuation.symbol,
        shares=valuation.shares,
        total_paid=money(valuation.total_paid),
        display_price=money(valuation.display_price),
        market_value=money(valuation.market_value),
        gain_loss=money(valuation.gain_loss),
        gain_loss_pct=optional_money(valuation.gain_loss_pct),
        avg_cost_per_share=money(valuation.avg_cost_per_share),
        risk_bucket=valuation.risk_bucket.value,
        native_price=valuation.native_price,
        original_currency=valuation.original_currency,
        monthly_contribution=money(valuation.monthly_contribution),
    )


def map_risk_mix(mix: RiskMix) -> RiskMixResponse:
    return RiskMixResponse(
        growth_value=money(mix.growth_value),
        stable_value=money(mix.stable_value),
        growth_pct=mix.growth_pct,
        stable_pct=mix.stable_pct,
    )


def map_symbol_group(group: SymbolGroup) -> SymbolGroupResponse:
    return SymbolGroupResponse(
        symbol=group.symbol,
        lot_count=group.lot_count,
        shares=group.shares,
        total_paid=money(group.total_paid),
        market_value=money(group.market_value),
        gain_loss=money(group.gain_loss),
        monthly_contribution=money(group.monthly_contribution),
        risk_bucket=group.risk_bucket.value,
        lots=[map_holding_valuation(lot) for lot in group.lots],
    )


def map_allocation_entry(entry: AllocationEntry) -> AllocationEntryResponse:
    return AllocationEntryResponse(
        symbol=entry.symbol,
        market_value=money(entry.market_value),
        percentage=entry.percentage,
        risk_bucket=entry.risk_bucket.value,
    )
