# tests/services/test_currency.py
"""
Unit tests for currency conversion.

Test Coverage:
- Conversion formula amount / rates[A] * rates[B]
- Same-currency identity
- Lenient vs strict handling of unknown codes
"""

from decimal import Decimal

import pytest

from wealthvault.services.currency import CurrencyConverter, FXPolicy, convert, normalize_currency
from wealthvault.services.exceptions import UnknownCurrencyError

RATES = {"GBP": Decimal("1"), "USD": Decimal("1.25"), "EUR": Decimal("1.18")}


class TestConvert:
    """Tests for CurrencyConverter.convert."""

    def test_same_currency_returns_amount_unchanged(self):
        """No arithmetic is done for A -> A."""
        amount = Decimal("123.456789")
        assert CurrencyConverter().convert(amount, "USD", "USD", RATES) is amount

    def test_usd_to_gbp(self):
        assert convert(Decimal("125"), "USD", "GBP", RATES) == Decimal("100")

    def test_gbp_to_eur(self):
        assert convert(Decimal("100"), "GBP", "EUR", RATES) == Decimal("118")

    def test_cross_rate_goes_through_unit_of_account(self):
        """USD -> EUR divides by the USD rate then multiplies by the EUR rate."""
        result = convert(Decimal("125"), "USD", "EUR", RATES)
        assert result == Decimal("125") / Decimal("1.25") * Decimal("1.18")

    def test_codes_are_case_insensitive(self):
        assert convert(Decimal("125"), "usd", " gbp ", RATES) == Decimal("100")

    def test_zero_amount(self):
        assert convert(Decimal("0"), "USD", "GBP", RATES) == Decimal("0")


class TestRoundTrip:
    """A -> B -> A returns the starting amount when both codes have rates."""

    TOLERANCE = Decimal("1e-20")

    @pytest.mark.parametrize("source, target", [
        ("USD", "EUR"),
        ("EUR", "USD"),
        ("GBP", "USD"),
        ("EUR", "GBP"),
    ])
    @pytest.mark.parametrize("amount", ["0.01", "123.45", "98765.4321", "1000000"])
    def test_round_trip(self, source, target, amount):
        value = Decimal(amount)
        back = convert(convert(value, source, target, RATES), target, source, RATES)
        assert abs(back - value) <= self.TOLERANCE * max(Decimal("1"), value)

    def test_round_trip_without_unit_currency(self):
        """No code in the table sits at 1; conversion still inverts cleanly."""
        rates = {"USD": Decimal("0.0067"), "CHF": Decimal("0.0059"), "ZAR": Decimal("0.1234")}
        converter = CurrencyConverter(FXPolicy.STRICT)
        value = Decimal("2500.75")

        for source, target in [("USD", "CHF"), ("CHF", "ZAR"), ("ZAR", "USD")]:
            there = converter.convert(value, source, target, rates)
            back = converter.convert(there, target, source, rates)
            assert abs(back - value) <= self.TOLERANCE * value


class TestUnknownCurrencyPolicy:
    """Missing rates: multiplier 1 when lenient, error when strict."""

    def test_lenient_uses_multiplier_one_for_unknown_source(self):
        converter = CurrencyConverter(FXPolicy.LENIENT)
        assert converter.convert(Decimal("50"), "JPY", "USD", RATES) == Decimal("62.5")

    def test_lenient_uses_multiplier_one_for_unknown_target(self):
        converter = CurrencyConverter(FXPolicy.LENIENT)
        assert converter.convert(Decimal("125"), "USD", "CHF", RATES) == Decimal("100")

    def test_lenient_treats_zero_rate_as_missing(self):
        rates = {**RATES, "CHF": Decimal("0")}
        assert convert(Decimal("10"), "CHF", "GBP", rates) == Decimal("10")

    def test_strict_raises_for_unknown_code(self):
        converter = CurrencyConverter(FXPolicy.STRICT)
        with pytest.raises(UnknownCurrencyError) as exc_info:
            converter.convert(Decimal("50"), "JPY", "GBP", RATES)

        assert exc_info.value.currency == "JPY"
        assert exc_info.value.known == ["EUR", "GBP", "USD"]

    def test_strict_allows_same_currency_without_rate(self):
        """Identity conversion never looks at the table."""
        converter = CurrencyConverter(FXPolicy.STRICT)
        assert converter.convert(Decimal("5"), "JPY", "JPY", {}) == Decimal("5")

    def test_policy_accepts_string_value(self):
        assert CurrencyConverter("strict").policy is FXPolicy.STRICT


def test_normalize_currency():
    assert normalize_currency(" eur ") == "EUR"
