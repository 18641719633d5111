# wealthvault/services/portfolio/types.py
"""
Data types owned by the portfolio session.

These dataclasses are the domain model. They are NOT Pydantic schemas;
API serialization lives in wealthvault/schemas/holdings.py.

Design Principles:
- Immutable (frozen=True); transitions build new instances
- Decimal for ALL monetary values and share counts
- Validation happens in __post_init__, so an invalid lot cannot exist

Type Hierarchy:
    Holding            - One purchase lot
    VaultState         - The whole per-user application state
    PriceUpdate        - Enrichment result for one symbol during refresh
    RefreshResult      - Outcome of a "refresh all prices" run
    PersistenceStatus  - Last known state of the durable copy
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any

from wealthvault.services.exceptions import InvalidHoldingError

_ZERO = Decimal("0")


def _to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise InvalidHoldingError(f"{field_name} is not a number: {value!r}", field=field_name) from e
    if not result.is_finite():
        raise InvalidHoldingError(f"{field_name} must be finite", field=field_name)
    return result


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


# =============================================================================
# HOLDING
# =============================================================================

@dataclass(frozen=True)
class Holding:
    """
    One purchase lot of a symbol.

    Attributes:
        id: Opaque unique identifier (TX-<epoch ms>-<suffix>)
        symbol: Upper-case ticker
        shares: Shares in this lot (> 0)
        total_paid: Amount paid, in the display currency at entry time.
            Never re-converted when the display currency changes.
        current_price: Converted price snapshot from the last enrichment
        native_price: Price in original_currency, when known
        original_currency: Currency of native_price; None means the
            display currency
        purchase_date: When the lot was logged
        last_updated: Last enrichment or edit
        monthly_contribution: Symbol-level recurring amount, mirrored
            on every lot of the symbol
    """

    id: str
    symbol: str
    shares: Decimal
    total_paid: Decimal
    current_price: Decimal
    native_price: Decimal | None = None
    original_currency: str | None = None
    purchase_date: datetime | None = None
    last_updated: datetime | None = None
    monthly_contribution: Decimal = _ZERO

    def __post_init__(self) -> None:
        symbol = (self.symbol or "").strip().upper()
        if not symbol:
            raise InvalidHoldingError("Symbol is required", field="symbol")
        object.__setattr__(self, "symbol", symbol)

        shares = _to_decimal(self.shares, "shares")
        if shares <= _ZERO:
            raise InvalidHoldingError("Shares must be greater than zero", field="shares")
        object.__setattr__(self, "shares", shares)

        total_paid = _to_decimal(self.total_paid, "total_paid")
        if total_paid < _ZERO:
            raise InvalidHoldingError("Amount paid cannot be negative", field="total_paid")
        object.__setattr__(self, "total_paid", total_paid)

        object.__setattr__(self, "current_price", _to_decimal(self.current_price, "current_price"))

        if self.native_price is not None:
            native_price = _to_decimal(self.native_price, "native_price")
            if native_price <= _ZERO:
                raise InvalidHoldingError("Native price must be positive", field="native_price")
            object.__setattr__(self, "native_price", native_price)

        if self.original_currency is not None:
            object.__setattr__(self, "original_currency", self.original_currency.strip().upper() or None)

        contribution = _to_decimal(self.monthly_contribution, "monthly_contribution")
        if contribution < _ZERO:
            raise InvalidHoldingError("Monthly contribution cannot be negative", field="monthly_contribution")
        object.__setattr__(self, "monthly_contribution", contribution)

    @property
    def valuation_price(self) -> Decimal:
        """Native price when enriched, otherwise the stored snapshot."""
        return self.native_price if self.native_price is not None else self.current_price

    @property
    def avg_cost_per_share(self) -> Decimal:
        return self.total_paid / self.shares

    def currency_or(self, display_currency: str) -> str:
        """Currency of valuation_price; absent means the display currency."""
        return self.original_currency or display_currency

    # -------------------------------------------------------------------------
    # Store serialization (decimals as strings, datetimes as ISO-8601)
    # -------------------------------------------------------------------------

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "shares": str(self.shares),
            "total_paid": str(self.total_paid),
            "current_price": str(self.current_price),
            "native_price": str(self.native_price) if self.native_price is not None else None,
            "original_currency": self.original_currency,
            "purchase_date": self.purchase_date.isoformat() if self.purchase_date else None,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "monthly_contribution": str(self.monthly_contribution),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Holding:
        """
        Rebuild a lot from its stored form.

        Raises:
            InvalidHoldingError: The record violates a lot invariant
            KeyError: A required field is missing
        """
        return cls(
            id=record["id"],
            symbol=record["symbol"],
            shares=record["shares"],
            total_paid=record["total_paid"],
            current_price=record.get("current_price") or record["total_paid"],
            native_price=record.get("native_price"),
            original_currency=record.get("original_currency"),
            purchase_date=_parse_datetime(record.get("purchase_date")),
            last_updated=_parse_datetime(record.get("last_updated")),
            monthly_contribution=record.get("monthly_contribution") or _ZERO,
        )


# =============================================================================
# APPLICATION STATE
# =============================================================================

@dataclass(frozen=True)
class VaultState:
    """
    Complete per-user state. Replaced wholesale by every transition.

    Attributes:
        user_id: Persistence key
        display_currency: Currency all values are shown in
        holdings: Lots in insertion order
        exchange_rates: Rate table used for conversion (read-only view)
        rates_updated_at: When the rate table last came from the provider
    """

    user_id: str
    display_currency: str
    holdings: tuple[Holding, ...] = ()
    exchange_rates: Mapping[str, Decimal] = field(default_factory=dict)
    rates_updated_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "holdings", tuple(self.holdings))
        object.__setattr__(self, "exchange_rates", MappingProxyType(dict(self.exchange_rates)))

    def find(self, holding_id: str) -> Holding | None:
        for holding in self.holdings:
            if holding.id == holding_id:
                return holding
        return None

    def lots_for(self, symbol: str) -> list[Holding]:
        symbol = symbol.strip().upper()
        return [h for h in self.holdings if h.symbol == symbol]

    @property
    def symbols(self) -> list[str]:
        """Distinct symbols in first-seen order."""
        return list(dict.fromkeys(h.symbol for h in self.holdings))


# =============================================================================
# REFRESH & PERSISTENCE
# =============================================================================

@dataclass(frozen=True)
class PriceUpdate:
    """Fresh quote for one symbol, applied to every lot of that symbol."""

    symbol: str
    native_price: Decimal
    currency: str


@dataclass(frozen=True)
class RefreshResult:
    """
    Outcome of a refresh-all run.

    skipped is True when another refresh was already in flight; nothing
    was fetched or changed in that case.
    """

    skipped: bool
    refreshed: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()
    rates_updated: bool = False
    refreshed_at: datetime | None = None


@dataclass(frozen=True)
class PersistenceStatus:
    """Last known state of the durable copy of a session."""

    loaded: bool
    load_error: str | None = None
    last_saved_at: datetime | None = None
    last_error: str | None = None
    pending_write: bool = False
