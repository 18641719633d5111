# wealthvault/routers/market_data.py
"""
Market data endpoints.

- GET /market-data/quote/{symbol}     - Raw provider quote (errors surface)
- GET /market-data/exchange-rates     - Rates for a base currency (fallback on failure)
- GET /market-data/tickers            - Ticker catalog (cached)

Only the quote endpoint reports provider failures to the client; the
others answer with documented fallback values.
"""

from fastapi import APIRouter, Depends, Query, Request

from wealthvault.config import settings
from wealthvault.dependencies import get_market_data_service
from wealthvault.middleware.rate_limit import RATE_LIMIT_MARKET_DATA, limiter
from wealthvault.schemas.market_data import (
    ExchangeRatesResponse,
    QuoteResponse,
    TickerCatalogResponse,
    TickerGroupResponse,
    TickerOptionResponse,
)
from wealthvault.schemas.validators import validate_currency
from wealthvault.services.constants import FALLBACK_EXCHANGE_RATES
from wealthvault.services.market_data import MarketDataService

router = APIRouter(
    prefix="/market-data",
    tags=["Market Data"],
)


@router.get(
    "/quote/{symbol}",
    response_model=QuoteResponse,
    summary="Look up a quote",
)
@limiter.limit(RATE_LIMIT_MARKET_DATA)
def get_quote(
        request: Request,  # Required for rate limiting
        symbol: str,
        service: MarketDataService = Depends(get_market_data_service),
) -> QuoteResponse:
    """
    Ask the provider for the current price of a ticker.

    Raises **503** if the provider is unavailable, **429** if its quota is
    exhausted and **502** if its answer is unusable.
    """
    quote = service.get_quote(symbol.strip().upper())
    return QuoteResponse(
        symbol=quote.symbol,
        price=quote.price,
        currency=quote.currency,
        name=quote.name,
        provider=service.provider_name,
    )


@router.get(
    "/exchange-rates",
    response_model=ExchangeRatesResponse,
    summary="Get exchange rates",
)
@limiter.limit(RATE_LIMIT_MARKET_DATA)
def get_exchange_rates(
        request: Request,  # Required for rate limiting
        base: str = Query(
            default=settings.default_display_currency,
            min_length=3,
            max_length=3,
            pattern="^[A-Za-z]{3}$",
            description="Base currency (ISO 4217)",
        ),
        service: MarketDataService = Depends(get_market_data_service),
) -> ExchangeRatesResponse:
    """Rates as "1 base = X code". On provider failure every rate is 1 and `fallback` is true."""
    base_currency = validate_currency(base)
    rates = service.try_fetch_exchange_rates(base_currency)
    return ExchangeRatesResponse(
        base_currency=base_currency,
        rates=rates if rates is not None else dict(FALLBACK_EXCHANGE_RATES),
        fallback=rates is None,
    )


@router.get(
    "/tickers",
    response_model=TickerCatalogResponse,
    summary="Get the ticker catalog",
)
@limiter.limit(RATE_LIMIT_MARKET_DATA)
def get_ticker_catalog(
        request: Request,  # Required for rate limiting
        service: MarketDataService = Depends(get_market_data_service),
) -> TickerCatalogResponse:
    """
    Grouped ticker suggestions.

    Served from cache after the first successful fetch; a fixed fallback
    list is served if the provider fails and nothing is cached.
    """
    groups = service.get_ticker_catalog()
    return TickerCatalogResponse(
        groups=[
            TickerGroupResponse(
                group=group.group,
                options=[TickerOptionResponse(symbol=o.symbol, label=o.label) for o in group.options],
            )
            for group in groups
        ]
    )
