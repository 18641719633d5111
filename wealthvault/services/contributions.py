# wealthvault/services/contributions.py
"""
Symbol-level monthly contributions.

Contributions are stored on each lot but belong to the symbol: every lot
of a symbol carries the same value. Totals are taken per distinct symbol,
never per lot, so a symbol with three lots is counted once.

Lots written before the mirroring rule may disagree; the largest value
on the symbol's lots is taken as the symbol's value.
"""

from collections.abc import Iterable
from decimal import Decimal

from wealthvault.services.portfolio.types import Holding

_ZERO = Decimal("0")


class ContributionTracker:
    """Reads per-symbol contributions off a collection of lots."""

    def __init__(self, holdings: Iterable[Holding]) -> None:
        by_symbol: dict[str, Decimal] = {}
        for holding in holdings:
            current = by_symbol.get(holding.symbol, _ZERO)
            by_symbol[holding.symbol] = max(current, holding.monthly_contribution)
        self._by_symbol = by_symbol

    def by_symbol(self) -> dict[str, Decimal]:
        return dict(self._by_symbol)

    def for_symbol(self, symbol: str) -> Decimal:
        return self._by_symbol.get(symbol.strip().upper(), _ZERO)

    def total(self) -> Decimal:
        """Sum of contributions over distinct symbols."""
        return sum(self._by_symbol.values(), _ZERO)


def total_monthly_contribution(holdings: Iterable[Holding]) -> Decimal:
    return ContributionTracker(holdings).total()
