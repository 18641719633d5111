# wealthvault/services/portfolio/session.py
"""
Portfolio session: the per-user controller.

A session owns one immutable VaultState and is the only writer to it.
Every mutation is a pure transition from transitions.py applied under
the session lock, followed by a debounced write of the full snapshot.

Ownership rules:
- The in-memory state is authoritative for the life of the session.
  The store may lag it by up to the debounce delay.
- A failed load starts the session empty and is reported through
  persistence_status(); a failed write is logged and reported the same
  way. Nothing is retried automatically.
- refresh_prices() is mutually exclusive: a second call while one is in
  flight returns immediately with skipped=True.

SessionManager keeps one session per user id and flushes all of them on
shutdown.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from decimal import Decimal

from wealthvault.services.currency import CurrencyConverter, normalize_currency
from wealthvault.services.debounce import DebouncedWriter
from wealthvault.services.exceptions import InvalidHoldingError, PersistenceError
from wealthvault.services.market_data.service import MarketDataService, fallback_quote
from wealthvault.services.portfolio import transitions
from wealthvault.services.portfolio.types import (
    Holding,
    PersistenceStatus,
    PriceUpdate,
    RefreshResult,
    VaultState,
)
from wealthvault.services.protocols import HoldingsStore, PreferenceStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PortfolioSession:
    """
    One user's working copy of their portfolio.

    Thread-safe: request handlers, the debounce timer and refresh workers
    may all touch a session concurrently.
    """

    def __init__(
            self,
            user_id: str,
            store: HoldingsStore,
            market_data: MarketDataService,
            converter: CurrencyConverter,
            display_currency: str,
            exchange_rates: dict[str, Decimal],
            debounce_seconds: float,
            max_workers: int = 8,
            supported_currencies: list[str] | None = None,
            preferences: PreferenceStore | None = None,
            clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._preferences = preferences
        self._market_data = market_data
        self._converter = converter
        self._max_workers = max_workers
        self._supported = [c.upper() for c in supported_currencies] if supported_currencies else None
        self._clock = clock

        self._lock = threading.RLock()
        self._refresh_lock = threading.Lock()
        self._state = VaultState(
            user_id=user_id,
            display_currency=normalize_currency(display_currency),
            exchange_rates=exchange_rates,
        )

        self._loaded = False
        self._load_error: str | None = None
        self._last_saved_at: datetime | None = None
        self._last_error: str | None = None

        self._writer = DebouncedWriter(debounce_seconds, self.persist_now, name=user_id)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def user_id(self) -> str:
        return self._state.user_id

    @property
    def state(self) -> VaultState:
        with self._lock:
            return self._state

    def _apply(self, transition: Callable[[VaultState], VaultState], persist: bool = True) -> VaultState:
        with self._lock:
            self._state = transition(self._state)
            state = self._state
        if persist and self._loaded:
            self._writer.submit()
        return state

    # =========================================================================
    # LOAD & PERSIST
    # =========================================================================

    def load(self) -> None:
        """
        Read the user's lots from the store.

        On failure the session stays empty and is not written back, so the
        stored record survives until a load succeeds. The error is kept for
        persistence_status().
        """
        try:
            holdings = self._store.get_holdings(self.user_id)
        except PersistenceError as e:
            logger.error(f"Failed to load holdings for user {self.user_id}: {e}")
            with self._lock:
                self._load_error = str(e)
                self._loaded = False
            return

        self._apply(lambda s: transitions.replace_holdings(s, holdings), persist=False)
        with self._lock:
            self._loaded = True
            self._load_error = None
            self._last_saved_at = self._clock()
        logger.info(f"Loaded {len(holdings)} holdings for user {self.user_id}")

    def persist_now(self) -> None:
        """Write the current snapshot. Failures are recorded, not raised."""
        snapshot = self.state
        try:
            self._store.save_holdings(self.user_id, list(snapshot.holdings))
        except PersistenceError as e:
            logger.error(f"Failed to save holdings for user {self.user_id}: {e}")
            with self._lock:
                self._last_error = str(e)
            return

        with self._lock:
            self._last_saved_at = self._clock()
            self._last_error = None

    def flush(self) -> bool:
        return self._writer.flush()

    def persistence_status(self) -> PersistenceStatus:
        with self._lock:
            return PersistenceStatus(
                loaded=self._loaded,
                load_error=self._load_error,
                last_saved_at=self._last_saved_at,
                last_error=self._last_error,
                pending_write=self._writer.has_pending,
            )

    # =========================================================================
    # HOLDINGS
    # =========================================================================

    def add_holding(self, symbol: str, shares: Decimal, total_paid: Decimal) -> Holding:
        """
        Price a new lot from the provider and append it.

        Input is validated before the provider is called. When the
        provider cannot price the symbol the lot is still created with the
        fallback quote (1 USD).

        Raises:
            InvalidHoldingError: Missing symbol, shares <= 0 or paid < 0
        """
        symbol = transitions.validate_lot_input(symbol, shares, total_paid)

        quote = self._market_data.fetch_price(symbol)
        if quote is None:
            logger.info(f"Adding {symbol} with fallback price")
            quote = fallback_quote(symbol)

        now = self._clock()
        with self._lock:
            holding = transitions.build_lot(
                self._state,
                symbol=symbol,
                shares=shares,
                total_paid=total_paid,
                native_price=quote.price,
                currency=quote.currency,
                converter=self._converter,
                now=now,
            )
            self._apply(lambda s: transitions.add_lot(s, holding))

        logger.info(f"Added holding {holding.id} ({symbol} x {shares}) for user {self.user_id}")
        return holding

    def edit_holding(
            self,
            holding_id: str,
            shares: Decimal | None = None,
            total_paid: Decimal | None = None,
    ) -> Holding:
        now = self._clock()
        state = self._apply(
            lambda s: transitions.edit_lot(s, holding_id, shares=shares, total_paid=total_paid, now=now)
        )
        return state.find(holding_id)

    def remove_holding(self, holding_id: str) -> None:
        self._apply(lambda s: transitions.remove_lot(s, holding_id))
        logger.info(f"Removed holding {holding_id} for user {self.user_id}")

    def remove_symbol(self, symbol: str) -> int:
        """Remove every lot of symbol. Returns how many lots were removed."""
        with self._lock:
            removed = len(self._state.lots_for(symbol))
            self._apply(lambda s: transitions.remove_symbol(s, symbol))
        logger.info(f"Removed {removed} lots of {symbol} for user {self.user_id}")
        return removed

    def set_contribution(self, symbol: str, amount: Decimal) -> None:
        self._apply(lambda s: transitions.set_contribution(s, symbol, amount))

    def set_display_currency(self, currency: str) -> VaultState:
        """
        Switch display currency and store the preference.

        Amounts paid are not converted. A preference write failure is
        logged; the session keeps the new currency.

        Raises:
            InvalidHoldingError: Currency not supported
        """
        currency = normalize_currency(currency)
        if self._supported is not None and currency not in self._supported:
            raise InvalidHoldingError(
                f"Unsupported display currency {currency}. Supported: {', '.join(self._supported)}",
                field="display_currency",
            )

        state = self._apply(lambda s: transitions.set_display_currency(s, currency), persist=False)
        if self._preferences is not None:
            try:
                self._preferences.save_display_currency(self.user_id, currency)
            except PersistenceError as e:
                logger.error(f"Failed to save display currency for user {self.user_id}: {e}")
                with self._lock:
                    self._last_error = str(e)
        return state

    # =========================================================================
    # REFRESH
    # =========================================================================

    def refresh_prices(self) -> RefreshResult:
        """
        Re-price every symbol and refresh exchange rates.

        Rates and quotes are fetched concurrently, then applied in one
        transition. Symbols the provider cannot price keep their old
        prices; if rates cannot be fetched the current table is kept.
        """
        if not self._refresh_lock.acquire(blocking=False):
            logger.info(f"Refresh already running for user {self.user_id}, skipping")
            return RefreshResult(skipped=True)

        try:
            snapshot = self.state
            symbols = snapshot.symbols
            base_currency = snapshot.display_currency

            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                rates_future = pool.submit(self._market_data.try_fetch_exchange_rates, base_currency)
                quote_futures = {symbol: pool.submit(self._market_data.fetch_price, symbol) for symbol in symbols}
                rates = rates_future.result()
                quotes = {symbol: future.result() for symbol, future in quote_futures.items()}

            updates = {
                symbol: PriceUpdate(symbol=symbol, native_price=quote.price, currency=quote.currency)
                for symbol, quote in quotes.items()
                if quote is not None
            }
            failed = tuple(symbol for symbol, quote in quotes.items() if quote is None)
            now = self._clock()

            self._apply(lambda s: transitions.apply_refresh(s, updates, rates, self._converter, now))

            logger.info(
                f"Refreshed {len(updates)}/{len(symbols)} symbols for user {self.user_id}"
                f"{'' if rates is not None else ' (exchange rates unchanged)'}"
            )
            return RefreshResult(
                skipped=False,
                refreshed=tuple(updates),
                failed=failed,
                rates_updated=rates is not None,
                refreshed_at=now,
            )
        finally:
            self._refresh_lock.release()


class SessionManager:
    """
    One PortfolioSession per user id, created and loaded on first use.

    Usage:
        manager = SessionManager(session_factory=...)
        session = manager.get("user-1")
        ...
        manager.shutdown()   # flush every pending write
    """

    def __init__(self, factory: Callable[[str], PortfolioSession]) -> None:
        self._factory = factory
        self._sessions: dict[str, PortfolioSession] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> PortfolioSession:
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                session = self._factory(user_id)
                session.load()
                self._sessions[user_id] = session
            return session

    def end(self, user_id: str) -> bool:
        """Flush and forget a user's session. Returns False if none existed."""
        with self._lock:
            session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        session.flush()
        return True

    def shutdown(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.flush()
        logger.info(f"Flushed {len(sessions)} sessions on shutdown")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
