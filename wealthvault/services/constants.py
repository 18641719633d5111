# wealthvault/services/constants.py
"""
Centralized constants for WealthVault services.

Single source of truth for fallback values, UI bounds and rate limits.
Values that operators may want to tune live in config.Settings instead.

Usage:
    from wealthvault.services.constants import (
        FALLBACK_EXCHANGE_RATES,
        MAX_MONTHLY_CONTRIBUTION,
    )
"""

from decimal import Decimal


# =============================================================================
# CURRENCY
# =============================================================================

# Rate table a new session starts with, before any provider refresh.
# Anchored to GBP: 1 GBP = 1.25 USD = 1.18 EUR.
INITIAL_EXCHANGE_RATES: dict[str, Decimal] = {
    "GBP": Decimal("1"),
    "USD": Decimal("1.25"),
    "EUR": Decimal("1.18"),
}

# Returned when the provider cannot produce a rate table
FALLBACK_EXCHANGE_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("1"),
    "GBP": Decimal("1"),
}

# Quote currencies requested from the provider for every base currency
QUOTED_CURRENCIES: tuple[str, ...] = ("USD", "EUR", "GBP")

CURRENCY_SYMBOLS: dict[str, str] = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
}


# =============================================================================
# MARKET DATA FALLBACKS
# =============================================================================

# Used when a quote lookup fails so a new lot is still valid
FALLBACK_PRICE: Decimal = Decimal("1")
FALLBACK_QUOTE_CURRENCY: str = "USD"

# Served when the ticker catalog cannot be fetched and nothing is cached.
# (group, [(symbol, label), ...])
FALLBACK_TICKER_CATALOG: list[tuple[str, list[tuple[str, str]]]] = [
    ("Global Equity", [
        ("VWRP", "VWRP - Vanguard FTSE All-World"),
        ("SWDA", "SWDA - iShares Core MSCI World"),
    ]),
    ("US Equity", [
        ("VUSA", "VUSA - Vanguard S&P 500"),
        ("AAPL", "AAPL - Apple Inc."),
        ("TBLA", "TBLA - Taboola.com Ltd."),
    ]),
    ("Bonds", [
        ("VAGS", "VAGS - Vanguard Global Agg Bond"),
    ]),
]

# Key under which a successfully fetched catalog is cached (never expires)
TICKER_CATALOG_CACHE_KEY: str = "vault_global_tickers_v3"


# =============================================================================
# CONTRIBUTIONS (UI bounds, enforced by request schemas only)
# =============================================================================

MAX_MONTHLY_CONTRIBUTION: Decimal = Decimal("2000")
CONTRIBUTION_STEP: Decimal = Decimal("10")


# =============================================================================
# PROJECTION DEFAULTS
# =============================================================================

DEFAULT_ANNUAL_RETURN_RATE: Decimal = Decimal("7")
DEFAULT_PROJECTION_YEARS: int = 25
MAX_PROJECTION_YEARS: int = 100
MONTHS_PER_YEAR: int = 12

DEFAULT_CRASH_FREQUENCY: int = 10
DEFAULT_CRASH_SEVERITY: Decimal = Decimal("20")
DEFAULT_RISK_SPLIT: Decimal = Decimal("80")


# =============================================================================
# HOLDING IDENTIFIERS
# =============================================================================

HOLDING_ID_PREFIX: str = "TX"
HOLDING_ID_SUFFIX_LENGTH: int = 4


# =============================================================================
# MOCKED IDENTITY
# =============================================================================

DEMO_USER_ID: str = "google_user_isa_vault_777"
DEMO_USER_NAME: str = "Alex Investor"
DEMO_USER_EMAIL: str = "alex@investor.com"
DEMO_USER_PICTURE: str = "https://api.dicebear.com/7.x/avataaars/svg?seed=Alex"


# =============================================================================
# RATE LIMITING
# =============================================================================
# Format: "X/period" where period is second, minute, hour, or day

# Default for read endpoints
RATE_LIMIT_DEFAULT: str = "100/minute"

# Holding mutations
RATE_LIMIT_WRITE: str = "60/minute"

# Endpoints that call the market data provider (quota protection)
RATE_LIMIT_MARKET_DATA: str = "10/minute"

# Health checks (monitoring systems poll frequently)
RATE_LIMIT_HEALTH: str = "300/minute"
