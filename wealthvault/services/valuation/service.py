# wealthvault/services/valuation/service.py
"""
Valuation Service - orchestrates the calculators over a VaultState.

Valuation is recomputed from scratch on every call; nothing is cached
and nothing is mutated.

Usage:
    service = ValuationService(CurrencyConverter(), PatternRiskClassifier(tokens))
    valuation = service.value_portfolio(state)
    print(valuation.total_value, valuation.risk_mix.stable_pct)
"""

import logging
from decimal import Decimal

from wealthvault.services.contributions import ContributionTracker
from wealthvault.services.currency import CurrencyConverter
from wealthvault.services.portfolio.types import VaultState
from wealthvault.services.valuation.calculators import (
    AllocationCalculator,
    HoldingsGrouper,
    HoldingValueCalculator,
    RiskMixCalculator,
)
from wealthvault.services.valuation.classifiers import RiskClassifier
from wealthvault.services.valuation.types import (
    AllocationEntry,
    PortfolioValuation,
    SymbolGroup,
)

logger = logging.getLogger(__name__)


class ValuationService:
    """
    Values a portfolio state in its display currency.

    Raises:
        UnknownCurrencyError: Only with a strict converter and a missing rate
    """

    def __init__(self, converter: CurrencyConverter, classifier: RiskClassifier) -> None:
        self._value_calc = HoldingValueCalculator(converter, classifier)
        self._risk_calc = RiskMixCalculator()
        self._grouper = HoldingsGrouper()
        self._allocation_calc = AllocationCalculator()

    def value_portfolio(self, state: VaultState) -> PortfolioValuation:
        valuations = tuple(
            self._value_calc.calculate(holding, state.display_currency, state.exchange_rates)
            for holding in state.holdings
        )

        total_value = sum((v.market_value for v in valuations), Decimal("0"))
        total_paid = sum((v.total_paid for v in valuations), Decimal("0"))
        total_gain_loss = total_value - total_paid

        logger.debug(
            f"Valued {len(valuations)} holdings for user {state.user_id}: "
            f"{total_value} {state.display_currency}"
        )

        return PortfolioValuation(
            display_currency=state.display_currency,
            holdings=valuations,
            total_value=total_value,
            total_paid=total_paid,
            total_gain_loss=total_gain_loss,
            total_gain_loss_pct=(total_gain_loss / total_paid * 100) if total_paid else None,
            risk_mix=self._risk_calc.calculate(valuations),
            monthly_contribution=ContributionTracker(state.holdings).total(),
        )

    def group_by_symbol(self, state: VaultState) -> list[SymbolGroup]:
        return self._grouper.group(self.value_portfolio(state).holdings)

    def allocation(self, state: VaultState) -> list[AllocationEntry]:
        valuation = self.value_portfolio(state)
        return self._allocation_calc.calculate(
            self._grouper.group(valuation.holdings), valuation.total_value
        )
