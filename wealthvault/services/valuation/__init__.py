# wealthvault/services/valuation/__init__.py
"""
Valuation package: per-lot and portfolio values, risk mix, grouping.

Usage:
    from wealthvault.services.valuation import ValuationService, PatternRiskClassifier
"""

from wealthvault.services.valuation.calculators import (
    AllocationCalculator,
    HoldingsGrouper,
    HoldingValueCalculator,
    RiskMixCalculator,
)
from wealthvault.services.valuation.classifiers import (
    PatternRiskClassifier,
    RiskBucket,
    RiskClassifier,
)
from wealthvault.services.valuation.service import ValuationService
from wealthvault.services.valuation.types import (
    AllocationEntry,
    HoldingValuation,
    PortfolioValuation,
    RiskMix,
    SymbolGroup,
)

__all__ = [
    "ValuationService",
    "HoldingValueCalculator",
    "RiskMixCalculator",
    "HoldingsGrouper",
    "AllocationCalculator",
    "RiskBucket",
    "RiskClassifier",
    "PatternRiskClassifier",
    "HoldingValuation",
    "PortfolioValuation",
    "RiskMix",
    "SymbolGroup",
    "AllocationEntry",
]
