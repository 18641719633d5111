# wealthvault/routers/valuation.py
"""
Portfolio valuation endpoints.

- GET /valuation             - Totals, per-lot values and risk mix
- GET /valuation/allocation  - Per-symbol share of total value

Values are recomputed from the session state on every request, in the
caller's display currency with the session's current exchange rates.
"""

from fastapi import APIRouter, Depends

from wealthvault.dependencies import get_portfolio_session, get_valuation_service
from wealthvault.routers._mappers import (
    map_allocation_entry,
    map_holding_valuation,
    map_risk_mix,
)
from wealthvault.schemas.validators import money, optional_money
from wealthvault.schemas.valuation import AllocationResponse, PortfolioValuationResponse
from wealthvault.services.portfolio.session import PortfolioSession
from wealthvault.services.valuation import ValuationService

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/valuation",
    tags=["Valuation"],
)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "",
    response_model=PortfolioValuationResponse,
    summary="Get portfolio valuation",
    response_description="Portfolio totals with per-lot breakdown",
)
def get_portfolio_valuation(
        session: PortfolioSession = Depends(get_portfolio_session),
        service: ValuationService = Depends(get_valuation_service),
) -> PortfolioValuationResponse:
    """
    Value the portfolio in the display currency.

    Each lot is valued at its native price converted with the current
    rates (or its stored price when it was never priced). Amounts paid are
    shown as entered and are not converted when the display currency
    changes, so gain/loss mixes currencies after a switch.

    **Note:** Under the strict FX policy an unknown currency returns **400**.
    """
    state = session.state
    valuation = service.value_portfolio(state)

    return PortfolioValuationResponse(
        display_currency=valuation.display_currency,
        total_value=money(valuation.total_value),
        total_paid=money(valuation.total_paid),
        total_gain_loss=money(valuation.total_gain_loss),
        total_gain_loss_pct=optional_money(valuation.total_gain_loss_pct),
        monthly_contribution=money(valuation.monthly_contribution),
        risk_mix=map_risk_mix(valuation.risk_mix),
        holdings=[map_holding_valuation(h) for h in valuation.holdings],
        holding_count=valuation.holding_count,
        exchange_rates=dict(state.exchange_rates),
    )


@router.get(
    "/allocation",
    response_model=AllocationResponse,
    summary="Get allocation by symbol",
)
def get_allocation(
        session: PortfolioSession = Depends(get_portfolio_session),
        service: ValuationService = Depends(get_valuation_service),
) -> AllocationResponse:
    """Per-symbol market value and percent of total, largest first."""
    state = session.state
    valuation = service.value_portfolio(state)
    return AllocationResponse(
        display_currency=state.display_currency,
        total_value=money(valuation.total_value),
        entries=[map_allocation_entry(e) for e in service.allocation(state)],
        risk_mix=map_risk_mix(valuation.risk_mix),
    )
