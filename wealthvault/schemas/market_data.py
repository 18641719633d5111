# wealthvault/schemas/market_data.py
"""Pydantic schemas for market data lookups."""

from decimal import Decimal

from pydantic import BaseModel, Field


class QuoteResponse(BaseModel):
    symbol: str
    price: Decimal
    currency: str
    name: str
    provider: str


class ExchangeRatesResponse(BaseModel):
    """
    Rates for base_currency against each quoted currency.

    fallback=True means the provider failed and every rate is 1.
    """

    base_currency: str
    rates: dict[str, Decimal]
    fallback: bool = Field(default=False)


class TickerOptionResponse(BaseModel):
    symbol: str
    label: str


class TickerGroupResponse(BaseModel):
    group: str
    options: list[TickerOptionResponse]


class TickerCatalogResponse(BaseModel):
    groups: list[TickerGroupResponse]
