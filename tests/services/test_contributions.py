# tests/services/test_contributions.py
"""Unit tests for symbol-level contribution totals."""

from decimal import Decimal

from wealthvault.services.contributions import ContributionTracker, total_monthly_contribution
from tests.conftest import create_holding


class TestContributionTracker:
    """Contributions belong to symbols, not lots."""

    def test_symbol_with_several_lots_counted_once(self):
        holdings = [
            create_holding(symbol="VWRP", holding_id="a", monthly_contribution="300"),
            create_holding(symbol="VWRP", holding_id="b", monthly_contribution="300"),
            create_holding(symbol="VWRP", holding_id="c", monthly_contribution="300"),
        ]
        assert total_monthly_contribution(holdings) == Decimal("300")

    def test_sums_across_symbols(self):
        holdings = [
            create_holding(symbol="VWRP", holding_id="a", monthly_contribution="300"),
            create_holding(symbol="AAPL", holding_id="b", monthly_contribution="50"),
            create_holding(symbol="VAGS", holding_id="c"),
        ]
        tracker = ContributionTracker(holdings)

        assert tracker.total() == Decimal("350")
        assert tracker.by_symbol() == {
            "VWRP": Decimal("300"),
            "AAPL": Decimal("50"),
            "VAGS": Decimal("0"),
        }

    def test_disagreeing_lots_use_largest_value(self):
        holdings = [
            create_holding(symbol="VWRP", holding_id="a", monthly_contribution="100"),
            create_holding(symbol="VWRP", holding_id="b", monthly_contribution="250"),
        ]
        assert ContributionTracker(holdings).for_symbol("vwrp") == Decimal("250")

    def test_unknown_symbol_is_zero(self):
        assert ContributionTracker([]).for_symbol("NVDA") == Decimal("0")

    def test_empty(self):
        assert total_monthly_contribution([]) == Decimal("0")
