# wealthvault/services/holdings_store.py
"""
SQLAlchemy-backed holdings store.

One HoldingsRecord row per user holds the complete list of lots as JSON.
Writes replace the list; reads rebuild Holding objects and reject records
that violate lot invariants.

Sessions are opened per call from a session factory rather than taken
from a request, because debounced writes run on timer threads outside
any request scope.

Usage:
    store = SqlHoldingsStore(SessionLocal)
    store.save_holdings("user-1", holdings)
    holdings = store.get_holdings("user-1")
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wealthvault.models import HoldingsRecord, UserPreference
from wealthvault.services.exceptions import InvalidHoldingError, PersistenceError
from wealthvault.services.portfolio.types import Holding

logger = logging.getLogger(__name__)


class SqlHoldingsStore:
    """Holdings and display-currency preference, keyed by user id."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    # =========================================================================
    # HOLDINGS
    # =========================================================================

    def get_holdings(self, user_id: str) -> list[Holding]:
        """
        Load a user's lots. Returns [] when no record exists.

        Raises:
            PersistenceError: The store cannot be read or the record is corrupt
        """
        try:
            with self._session_factory() as db:
                record = db.get(HoldingsRecord, user_id)
                raw = list(record.holdings or []) if record is not None else []
        except SQLAlchemyError as e:
            raise PersistenceError(user_id, "read", str(e)) from e

        try:
            holdings = [Holding.from_record(item) for item in raw]
        except (InvalidHoldingError, KeyError, TypeError, ValueError) as e:
            raise PersistenceError(user_id, "read", f"corrupt holdings record: {e}") from e

        logger.debug(f"Loaded {len(holdings)} holdings for user {user_id}")
        return holdings

    def save_holdings(self, user_id: str, holdings: list[Holding]) -> None:
        """
        Overwrite the user's record with a full snapshot.

        Raises:
            PersistenceError: The write failed (nothing is committed)
        """
        payload = [h.to_record() for h in holdings]
        try:
            with self._session_factory() as db:
                record = db.get(HoldingsRecord, user_id)
                if record is None:
                    db.add(HoldingsRecord(user_id=user_id, holdings=payload))
                else:
                    record.holdings = payload
                    record.last_updated = datetime.now(timezone.utc)
                db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(user_id, "write", str(e)) from e

        logger.debug(f"Saved {len(holdings)} holdings for user {user_id}")

    def delete_holdings(self, user_id: str) -> None:
        try:
            with self._session_factory() as db:
                db.execute(delete(HoldingsRecord).where(HoldingsRecord.user_id == user_id))
                db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(user_id, "delete", str(e)) from e

        logger.info(f"Deleted holdings record for user {user_id}")

    # =========================================================================
    # PREFERENCES
    # =========================================================================

    def get_display_currency(self, user_id: str) -> str | None:
        try:
            with self._session_factory() as db:
                return db.scalar(
                    select(UserPreference.display_currency).where(UserPreference.user_id == user_id)
                )
        except SQLAlchemyError as e:
            raise PersistenceError(user_id, "read", str(e)) from e

    def save_display_currency(self, user_id: str, currency: str) -> None:
        try:
            with self._session_factory() as db:
                preference = db.get(UserPreference, user_id)
                if preference is None:
                    db.add(UserPreference(user_id=user_id, display_currency=currency))
                else:
                    preference.display_currency = currency
                db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(user_id, "write", str(e)) from e
