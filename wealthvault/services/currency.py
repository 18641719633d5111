# wealthvault/services/currency.py
"""
Currency conversion through a shared rate table.

=============================================================================
RATE TABLE CONVENTION
=============================================================================

Every rate is a multiplier against one implicit unit of account:

    rates = {"GBP": 1, "USD": 1.25, "EUR": 1.18}

    Meaning: 1 unit = 1 GBP = 1.25 USD = 1.18 EUR

Conversion formula (A → B):

    amount_B = amount_A ÷ rates[A] × rates[B]

The table is not guaranteed to be triangulated; whatever the provider
returned is treated as sharing one unit of account.

=============================================================================
UNKNOWN CODES
=============================================================================

The policy is chosen when the converter is built:

    LENIENT  - a missing (or zero) rate is treated as 1
    STRICT   - a missing (or zero) rate raises UnknownCurrencyError

Usage:
    converter = CurrencyConverter(policy=FXPolicy.LENIENT)
    gbp = converter.convert(Decimal("100"), "USD", "GBP", rates)
"""

import enum
import logging
from collections.abc import Mapping
from decimal import Decimal

from wealthvault.services.exceptions import UnknownCurrencyError

logger = logging.getLogger(__name__)

ExchangeRates = Mapping[str, Decimal]

_ONE = Decimal("1")


class FXPolicy(str, enum.Enum):
    LENIENT = "lenient"
    STRICT = "strict"


def normalize_currency(code: str) -> str:
    """Upper-case and trim a currency code."""
    return code.strip().upper()


class CurrencyConverter:
    """
    Converts amounts between currencies using a caller-supplied rate table.

    Stateless apart from the policy; safe to share between sessions.
    """

    def __init__(self, policy: FXPolicy = FXPolicy.LENIENT) -> None:
        self._policy = FXPolicy(policy)

    @property
    def policy(self) -> FXPolicy:
        return self._policy

    def convert(
            self,
            amount: Decimal,
            from_code: str,
            to_code: str,
            rates: ExchangeRates,
    ) -> Decimal:
        """
        Convert amount from one currency to another.

        Same currency returns the input unchanged (no arithmetic, so no
        rounding drift).

        Raises:
            UnknownCurrencyError: STRICT policy and a code has no rate
        """
        source = normalize_currency(from_code)
        target = normalize_currency(to_code)

        if source == target:
            return amount

        return amount / self.rate_for(source, rates) * self.rate_for(target, rates)

    def rate_for(self, code: str, rates: ExchangeRates) -> Decimal:
        """Return the multiplier for code, applying the unknown-code policy."""
        rate = rates.get(normalize_currency(code))
        if rate:
            return rate

        if self._policy is FXPolicy.STRICT:
            raise UnknownCurrencyError(code, sorted(rates))

        logger.debug(f"No rate for {code}, using 1")
        return _ONE


def convert(
        amount: Decimal,
        from_code: str,
        to_code: str,
        rates: ExchangeRates,
        policy: FXPolicy = FXPolicy.LENIENT,
) -> Decimal:
    """Functional shortcut for CurrencyConverter(policy).convert(...)."""
    return CurrencyConverter(policy).convert(amount, from_code, to_code, rates)
