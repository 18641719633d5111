# wealthvault/routers/holdings.py
"""
Holdings (purchase lot) endpoints.

All endpoints act on the caller's session (X-User-Id header):
- GET    /holdings                                 - Lots as stored
- GET    /holdings/grouped                         - Lots grouped by symbol, valued
- POST   /holdings                                 - Add a lot (priced by the provider)
- PATCH  /holdings/{id}                            - Edit shares / amount paid
- DELETE /holdings/{id}                            - Remove one lot
- DELETE /holdings/symbols/{symbol}                - Remove every lot of a symbol
- PUT    /holdings/symbols/{symbol}/contribution   - Set monthly contribution
- POST   /holdings/refresh                         - Re-price everything
- GET    /holdings/sync-status                     - State of the durable copy

Writes return immediately; persistence follows after a short debounce.
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from wealthvault.dependencies import get_portfolio_session, get_valuation_service
from wealthvault.middleware.rate_limit import RATE_LIMIT_MARKET_DATA, RATE_LIMIT_WRITE, limiter
from wealthvault.routers._mappers import map_holding, map_symbol_group
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
    SyncStatusResponse,
)
from wealthvault.services.contributions import ContributionTracker
from wealthvault.services.portfolio.session import PortfolioSession
from wealthvault.services.valuation import ValuationService

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/holdings",
    tags=["Holdings"],
)


# =============================================================================
# READ ENDPOINTS
# =============================================================================

@router.get(
    "",
    response_model=HoldingListResponse,
    summary="List holdings",
)
def list_holdings(
        session: PortfolioSession = Depends(get_portfolio_session),
) -> HoldingListResponse:
    """Every lot in insertion order, as stored (no conversion)."""
    state = session.state
    return HoldingListResponse(
        user_id=state.user_id,
        display_currency=state.display_currency,
        holdings=[map_holding(h) for h in state.holdings],
        count=len(state.holdings),
    )


@router.get(
    "/grouped",
    response_model=GroupedHoldingsResponse,
    summary="Holdings grouped by symbol",
)
def list_grouped_holdings(
        session: PortfolioSession = Depends(get_portfolio_session),
        service: ValuationService = Depends(get_valuation_service),
) -> GroupedHoldingsResponse:
    """
    Lots aggregated per symbol (symbols sorted), valued in the display currency.

    Group shares and amounts paid are exact sums of the lots.
    """
    state = session.state
    return GroupedHoldingsResponse(
        display_currency=state.display_currency,
        groups=[map_symbol_group(g) for g in service.group_by_symbol(state)],
    )


@router.get(
    "/sync-status",
    response_model=SyncStatusResponse,
    summary="Persistence status",
)
def get_sync_status(
        session: PortfolioSession = Depends(get_portfolio_session),
) -> SyncStatusResponse:
    """
    Report whether the stored copy is current.

    A load or save failure is reported here; the in-memory portfolio
    stays authoritative and nothing is retried automatically.
    """
    status_ = session.persistence_status()
    return SyncStatusResponse(
        loaded=status_.loaded,
        load_error=status_.load_error,
        last_saved_at=status_.last_saved_at,
        last_error=status_.last_error,
        pending_write=status_.pending_write,
    )


# =============================================================================
# WRITE ENDPOINTS
# =============================================================================

@router.post(
    "",
    response_model=HoldingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a holding",
)
@limiter.limit(RATE_LIMIT_WRITE)
def add_holding(
        request: Request,  # Required for rate limiting
        payload: HoldingCreate,
        session: PortfolioSession = Depends(get_portfolio_session),
) -> HoldingResponse:
    """
    Log a new purchase lot.

    The provider is asked for the current price. If it cannot answer, the
    lot is still created with a placeholder price of 1 USD; use
    POST /holdings/refresh later to re-price it.

    A new lot of a symbol you already hold inherits that symbol's monthly
    contribution.
    """
    holding = session.add_holding(payload.symbol, payload.shares, payload.total_paid)
    return map_holding(holding)


@router.patch(
    "/{holding_id}",
    response_model=HoldingResponse,
    summary="Edit a holding",
)
@limiter.limit(RATE_LIMIT_WRITE)
def edit_holding(
        request: Request,  # Required for rate limiting
        holding_id: str,
        payload: HoldingUpdate,
        session: PortfolioSession = Depends(get_portfolio_session),
) -> HoldingResponse:
    """Change shares and/or amount paid of one lot. Raises **404** if unknown."""
    holding = session.edit_holding(holding_id, shares=payload.shares, total_paid=payload.total_paid)
    return map_holding(holding)


@router.delete(
    "/{holding_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a holding",
)
@limiter.limit(RATE_LIMIT_WRITE)
def remove_holding(
        request: Request,  # Required for rate limiting
        holding_id: str,
        session: PortfolioSession = Depends(get_portfolio_session),
) -> None:
    """Remove one lot. Other lots, including lots of the same symbol, are untouched."""
    session.remove_holding(holding_id)


@router.delete(
    "/symbols/{symbol}",
    response_model=RemoveSymbolResponse,
    summary="Remove every lot of a symbol",
)
@limiter.limit(RATE_LIMIT_WRITE)
def remove_symbol(
        request: Request,  # Required for rate limiting
        symbol: str,
        session: PortfolioSession = Depends(get_portfolio_session),
) -> RemoveSymbolResponse:
    normalized = symbol.strip().upper()
    removed = session.remove_symbol(normalized)
    return RemoveSymbolResponse(symbol=normalized, removed=removed)


@router.put(
    "/symbols/{symbol}/contribution",
    response_model=ContributionResponse,
    summary="Set a symbol's monthly contribution",
)
@limiter.limit(RATE_LIMIT_WRITE)
def set_contribution(
        request: Request,  # Required for rate limiting
        symbol: str,
        payload: ContributionUpdate,
        session: PortfolioSession = Depends(get_portfolio_session),
) -> ContributionResponse:
    """
    Set the recurring monthly amount for a symbol (0..2000, step 10).

    The amount applies to the symbol as a whole, not per lot.
    """
    normalized = symbol.strip().upper()
    session.set_contribution(normalized, payload.amount)
    return ContributionResponse(
        symbol=normalized,
        amount=payload.amount,
        total_monthly_contribution=ContributionTracker(session.state.holdings).total(),
    )


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Refresh all prices and exchange rates",
)
@limiter.limit(RATE_LIMIT_MARKET_DATA)
def refresh_prices(
        request: Request,  # Required for rate limiting
        session: PortfolioSession = Depends(get_portfolio_session),
) -> RefreshResponse:
    """
    Re-price every symbol and refresh exchange rates for the display currency.

    If a refresh is already running for you, returns at once with
    `skipped: true`. Symbols the provider cannot price keep their previous
    price and are listed in `failed`.
    """
    result = session.refresh_prices()
    return RefreshResponse(
        skipped=result.skipped,
        refreshed=list(result.refreshed),
        failed=list(result.failed),
        rates_updated=result.rates_updated,
        refreshed_at=result.refreshed_at,
        exchange_rates=dict(session.state.exchange_rates),
    )
