# wealthvault/services/protocols.py
"""
Protocol interfaces for service dependency injection.

Using typing.Protocol enables structural subtyping:
- The SQL implementations satisfy these without inheriting from them
- Test doubles work without explicit inheritance
- The session and market data service depend only on these shapes
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from wealthvault.services.portfolio.types import Holding


class HoldingsStore(Protocol):
    """
    Durable per-user holdings record.

    save_holdings overwrites the whole list; there is no partial update.
    Implementations raise PersistenceError on failure.
    """

    def get_holdings(self, user_id: str) -> list[Holding]:
        ...

    def save_holdings(self, user_id: str, holdings: list[Holding]) -> None:
        ...

    def delete_holdings(self, user_id: str) -> None:
        ...


class PreferenceStore(Protocol):
    """Interface required by the session manager for the display currency."""

    def get_display_currency(self, user_id: str) -> str | None:
        ...

    def save_display_currency(self, user_id: str, currency: str) -> None:
        ...


class PayloadCache(Protocol):
    """Keyed text cache used for the ticker catalog. Entries never expire."""

    def get(self, key: str) -> str | None:
        ...

    def put(self, key: str, payload: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...
