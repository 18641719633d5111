# wealthvault/services/valuation/classifiers.py
"""
Risk classification strategies.

A classifier maps a ticker to one of two buckets. The default rule is a
substring heuristic over a token list, not an asset-class taxonomy: any
symbol containing BOND, GILT, GOLD, CASH, VAGS, IGLT or VGOV counts as
stable, everything else as growth.

Swap the strategy by passing another RiskClassifier to ValuationService.
"""

import enum
from collections.abc import Iterable
from typing import Protocol


class RiskBucket(str, enum.Enum):
    GROWTH = "growth"
    STABLE = "stable"


class RiskClassifier(Protocol):
    def classify(self, symbol: str) -> RiskBucket:
        ...


class PatternRiskClassifier:
    """Stable when the symbol contains any token (case-insensitive)."""

    def __init__(self, stable_tokens: Iterable[str]) -> None:
        self._tokens = tuple(token.upper() for token in stable_tokens if token)

    @property
    def tokens(self) -> tuple[str, ...]:
        return self._tokens

    def classify(self, symbol: str) -> RiskBucket:
        upper = symbol.upper()
        if any(token in upper for token in self._tokens):
            return RiskBucket.STABLE
        return RiskBucket.GROWTH
