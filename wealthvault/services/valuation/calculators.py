# wealthvault/services/valuation/calculators.py
"""
Valuation calculators.

Each calculator follows the Single Responsibility Principle:
- HoldingValueCalculator: Values one lot in the display currency
- RiskMixCalculator: Splits market value into growth and stable buckets
- HoldingsGrouper: Aggregates lots by symbol
- AllocationCalculator: Each symbol's share of total value

Design Principles:
- Stateless apart from injected collaborators
- Receives all dependencies explicitly
- Returns structured result objects
- Uses Decimal for ALL financial calculations, no rounding

Usage:
    value_calc = HoldingValueCalculator(CurrencyConverter())
    valuation = value_calc.calculate(holding, "GBP", rates)
"""

from collections.abc import Iterable
from decimal import Decimal

from wealthvault.services.currency import CurrencyConverter, ExchangeRates
from wealthvault.services.portfolio.types import Holding
from wealthvault.services.valuation.classifiers import RiskBucket, RiskClassifier
from wealthvault.services.valuation.types import (
    AllocationEntry,
    HoldingValuation,
    RiskMix,
    SymbolGroup,
)

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def _safe_pct(part: Decimal, whole: Decimal) -> Decimal | None:
    if whole == _ZERO:
        return None
    return part / whole * _HUNDRED


# =============================================================================
# HOLDING VALUE CALCULATOR
# =============================================================================

class HoldingValueCalculator:
    """
    Values one lot in the display currency.

    display_price = convert(native_price ?? current_price,
                            original_currency ?? display_currency,
                            display_currency, rates)
    """

    def __init__(self, converter: CurrencyConverter, classifier: RiskClassifier) -> None:
        self._converter = converter
        self._classifier = classifier

    def calculate(
            self,
            holding: Holding,
            display_currency: str,
            rates: ExchangeRates,
    ) -> HoldingValuation:
        currency = holding.currency_or(display_currency)
        display_price = self._converter.convert(
            holding.valuation_price, currency, display_currency, rates
        )
        market_value = holding.shares * display_price
        gain_loss = market_value - holding.total_paid

        return HoldingValuation(
            holding_id=holding.id,
            symbol=holding.symbol,
            shares=holding.shares,
            total_paid=holding.total_paid,
            display_price=display_price,
            market_value=market_value,
            gain_loss=gain_loss,
            gain_loss_pct=_safe_pct(gain_loss, holding.total_paid),
            avg_cost_per_share=holding.avg_cost_per_share,
            risk_bucket=self._classifier.classify(holding.symbol),
            native_price=holding.native_price,
            original_currency=currency,
            monthly_contribution=holding.monthly_contribution,
        )


# =============================================================================
# RISK MIX CALCULATOR
# =============================================================================

class RiskMixCalculator:
    """
    Growth/stable split of market value.

    Denominator is growth + stable, replaced by 1 when the sum is zero, so
    an empty portfolio yields 0 / 0 rather than an error.
    """

    def calculate(self, valuations: Iterable[HoldingValuation]) -> RiskMix:
        growth = _ZERO
        stable = _ZERO
        for valuation in valuations:
            if valuation.risk_bucket is RiskBucket.STABLE:
                stable += valuation.market_value
            else:
                growth += valuation.market_value

        total = growth + stable
        denominator = total if total != _ZERO else _ONE
        return RiskMix(
            growth_value=growth,
            stable_value=stable,
            growth_pct=growth / denominator,
            stable_pct=stable / denominator,
        )


# =============================================================================
# GROUPING & ALLOCATION
# =============================================================================

class HoldingsGrouper:
    """Aggregates lots by symbol, symbols sorted alphabetically."""

    def group(self, valuations: Iterable[HoldingValuation]) -> list[SymbolGroup]:
        lots_by_symbol: dict[str, list[HoldingValuation]] = {}
        for valuation in valuations:
            lots_by_symbol.setdefault(valuation.symbol, []).append(valuation)

        groups = []
        for symbol in sorted(lots_by_symbol):
            lots = lots_by_symbol[symbol]
            market_value = sum((lot.market_value for lot in lots), _ZERO)
            total_paid = sum((lot.total_paid for lot in lots), _ZERO)
            groups.append(SymbolGroup(
                symbol=symbol,
                lots=tuple(lots),
                shares=sum((lot.shares for lot in lots), _ZERO),
                total_paid=total_paid,
                market_value=market_value,
                gain_loss=market_value - total_paid,
                monthly_contribution=max(lot.monthly_contribution for lot in lots),
                risk_bucket=lots[0].risk_bucket,
            ))
        return groups


class AllocationCalculator:
    """Per-symbol share of total value, largest first."""

    def calculate(self, groups: Iterable[SymbolGroup], total_value: Decimal) -> list[AllocationEntry]:
        entries = [
            AllocationEntry(
                symbol=group.symbol,
                market_value=group.market_value,
                percentage=_safe_pct(group.market_value, total_value) or _ZERO,
                risk_bucket=group.risk_bucket,
            )
            for group in groups
        ]
        entries.sort(key=lambda entry: (-entry.market_value, entry.symbol))
        return entries
