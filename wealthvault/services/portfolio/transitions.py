# wealthvault/services/portfolio/transitions.py
"""
Pure state transitions for the portfolio session.

Every function takes a VaultState and returns a new one; nothing here
touches the store, the provider or a clock. The session applies these
under its lock and schedules persistence afterwards.

Transitions:
    add_lot             - Append a lot (inherits the symbol's contribution)
    edit_lot            - Change shares and/or amount paid of one lot
    remove_lot          - Drop one lot by id
    remove_symbol       - Drop every lot of a symbol
    set_contribution    - Set the symbol-level monthly contribution
    set_display_currency
    apply_refresh       - Apply fetched quotes and rates in one step
    replace_holdings    - Swap in a loaded snapshot
"""

import secrets
import string
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from wealthvault.services.constants import HOLDING_ID_PREFIX, HOLDING_ID_SUFFIX_LENGTH
from wealthvault.services.currency import CurrencyConverter, normalize_currency
from wealthvault.services.exceptions import (
    HoldingNotFoundError,
    InvalidHoldingError,
    SymbolNotFoundError,
)
from wealthvault.services.portfolio.types import Holding, PriceUpdate, VaultState

_BASE36 = string.digits + string.ascii_uppercase


def new_holding_id(now: datetime) -> str:
    """TX-<epoch ms>-<4 random base36 chars>, upper-case."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(HOLDING_ID_SUFFIX_LENGTH))
    return f"{HOLDING_ID_PREFIX}-{int(now.timestamp() * 1000)}-{suffix}"


def validate_lot_input(symbol: str | None, shares: Decimal | None, total_paid: Decimal | None) -> str:
    """
    Check user input for a new lot and return the normalized symbol.

    Runs before any provider call so a bad request never costs a lookup.

    Raises:
        InvalidHoldingError: Missing symbol, shares or amount; shares <= 0; paid < 0
    """
    symbol = (symbol or "").strip().upper()
    if not symbol:
        raise InvalidHoldingError("Symbol is required", field="symbol")
    if shares is None:
        raise InvalidHoldingError("Shares are required", field="shares")
    if total_paid is None:
        raise InvalidHoldingError("Amount paid is required", field="total_paid")
    if shares <= 0:
        raise InvalidHoldingError("Shares must be greater than zero", field="shares")
    if total_paid < 0:
        raise InvalidHoldingError("Amount paid cannot be negative", field="total_paid")
    return symbol


def build_lot(
        state: VaultState,
        *,
        symbol: str,
        shares: Decimal,
        total_paid: Decimal,
        native_price: Decimal,
        currency: str,
        converter: CurrencyConverter,
        now: datetime,
        holding_id: str | None = None,
) -> Holding:
    """
    Create a validated lot priced from a (possibly fallback) quote.

    current_price is the quote converted into the display currency with
    the state's current rates.

    Raises:
        InvalidHoldingError: Missing symbol, shares <= 0 or paid < 0
    """
    symbol = validate_lot_input(symbol, shares, total_paid)

    existing = state.lots_for(symbol)
    contribution = max((lot.monthly_contribution for lot in existing), default=Decimal("0"))
    currency = normalize_currency(currency)

    return Holding(
        id=holding_id or new_holding_id(now),
        symbol=symbol,
        shares=shares,
        total_paid=total_paid,
        current_price=converter.convert(native_price, currency, state.display_currency, state.exchange_rates),
        native_price=native_price,
        original_currency=currency,
        purchase_date=now,
        last_updated=now,
        monthly_contribution=contribution,
    )


def add_lot(state: VaultState, holding: Holding) -> VaultState:
    if state.find(holding.id) is not None:
        raise InvalidHoldingError(f"Holding {holding.id} already exists", field="id")
    return replace(state, holdings=state.holdings + (holding,))


def edit_lot(
        state: VaultState,
        holding_id: str,
        *,
        shares: Decimal | None = None,
        total_paid: Decimal | None = None,
        now: datetime | None = None,
) -> VaultState:
    """
    Change shares and/or amount paid of one lot. Other lots are untouched.

    Raises:
        HoldingNotFoundError: No lot with holding_id
        InvalidHoldingError: New values violate the lot invariants
    """
    target = state.find(holding_id)
    if target is None:
        raise HoldingNotFoundError(holding_id)

    changes: dict = {}
    if shares is not None:
        changes["shares"] = shares
    if total_paid is not None:
        changes["total_paid"] = total_paid
    if not changes:
        return state
    if now is not None:
        changes["last_updated"] = now

    updated = replace(target, **changes)
    return replace(
        state,
        holdings=tuple(updated if h.id == holding_id else h for h in state.holdings),
    )


def remove_lot(state: VaultState, holding_id: str) -> VaultState:
    if state.find(holding_id) is None:
        raise HoldingNotFoundError(holding_id)
    return replace(state, holdings=tuple(h for h in state.holdings if h.id != holding_id))


def remove_symbol(state: VaultState, symbol: str) -> VaultState:
    symbol = symbol.strip().upper()
    if not state.lots_for(symbol):
        raise SymbolNotFoundError(symbol)
    return replace(state, holdings=tuple(h for h in state.holdings if h.symbol != symbol))


def set_contribution(state: VaultState, symbol: str, amount: Decimal) -> VaultState:
    """
    Write the monthly contribution to every lot of symbol.

    Raises:
        SymbolNotFoundError: No lots for symbol
        InvalidHoldingError: amount < 0
    """
    symbol = symbol.strip().upper()
    if not state.lots_for(symbol):
        raise SymbolNotFoundError(symbol)
    return replace(
        state,
        holdings=tuple(
            replace(h, monthly_contribution=amount) if h.symbol == symbol else h
            for h in state.holdings
        ),
    )


def set_display_currency(state: VaultState, currency: str) -> VaultState:
    """total_paid values are kept as entered, in whatever currency that was."""
    return replace(state, display_currency=normalize_currency(currency))


def apply_refresh(
        state: VaultState,
        updates: Mapping[str, PriceUpdate],
        rates: Mapping[str, Decimal] | None,
        converter: CurrencyConverter,
        now: datetime,
) -> VaultState:
    """
    Apply a refresh in a single transition.

    rates replaces the rate table when given; None keeps the current one.
    Lots whose symbol has no update keep their previous prices. Updated
    lots are re-priced with the new table.
    """
    new_rates = dict(rates) if rates is not None else dict(state.exchange_rates)

    def refreshed(holding: Holding) -> Holding:
        update = updates.get(holding.symbol)
        if update is None:
            return holding
        return replace(
            holding,
            native_price=update.native_price,
            original_currency=update.currency,
            current_price=converter.convert(
                update.native_price, update.currency, state.display_currency, new_rates
            ),
            last_updated=now,
        )

    return replace(
        state,
        holdings=tuple(refreshed(h) for h in state.holdings),
        exchange_rates=new_rates,
        rates_updated_at=now if rates is not None else state.rates_updated_at,
    )


def replace_holdings(state: VaultState, holdings: list[Holding]) -> VaultState:
    return replace(state, holdings=tuple(holdings))
