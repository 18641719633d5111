# wealthvault/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas.

This module provides:
- Ticker validation and normalization
- Currency code validation
- Contribution step validation
- Money rounding for responses

These validators ensure consistent input handling across all schemas.
"""

import re
from decimal import ROUND_HALF_UP, Decimal

from wealthvault.services.constants import CONTRIBUTION_STEP

# =============================================================================
# CONSTANTS
# =============================================================================

# Ticker: 1-20 chars, alphanumeric + dots, dashes and carets (for indices like ^FTSE)
TICKER_PATTERN = re.compile(r'^[\^]?[A-Z0-9][A-Z0-9.\-]{0,19}$')
TICKER_MAX_LENGTH = 20

# Currency: ISO 4217 format (3 uppercase letters)
CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}$')

MONEY_QUANTUM = Decimal("0.01")


# =============================================================================
# TICKER VALIDATION
# =============================================================================

def validate_ticker(value: str) -> str:
    """
    Validate and normalize a ticker symbol.

    Valid formats:
    - Standard tickers: AAPL, VWRP
    - With dots: BRK.B, VUSA.L
    - Indices with caret: ^FTSE

    Raises:
        ValueError: If ticker format is invalid
    """
    if not value:
        raise ValueError("Ticker cannot be empty")

    normalized = value.strip().upper()

    if len(normalized) > TICKER_MAX_LENGTH:
        raise ValueError(f"Ticker too long (max {TICKER_MAX_LENGTH} characters)")

    if not TICKER_PATTERN.match(normalized):
        raise ValueError(f"Invalid ticker format: '{value}'")

    return normalized


# =============================================================================
# CURRENCY VALIDATION
# =============================================================================

def validate_currency(value: str) -> str:
    """
    Validate and normalize a currency code (ISO 4217 shape only).

    Raises:
        ValueError: If the code is not three letters
    """
    if not value:
        raise ValueError("Currency code cannot be empty")

    normalized = value.strip().upper()

    if not CURRENCY_PATTERN.match(normalized):
        raise ValueError(f"Invalid currency code: '{value}'. Must be 3 letters (ISO 4217)")

    return normalized


# =============================================================================
# CONTRIBUTIONS
# =============================================================================

def validate_contribution_step(value: Decimal) -> Decimal:
    """Contribution must be a whole multiple of the slider step."""
    if value % CONTRIBUTION_STEP != 0:
        raise ValueError(f"Contribution must be a multiple of {CONTRIBUTION_STEP}")
    return value


# =============================================================================
# RESPONSE FORMATTING
# =============================================================================

def money(value: Decimal) -> Decimal:
    """Round a monetary amount to cents for display."""
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def optional_money(value: Decimal | None) -> Decimal | None:
    return money(value) if value is not None else None
