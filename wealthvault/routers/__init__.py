# wealthvault/routers/__init__.py
"""
API routers.

- holdings: Lot CRUD, contributions, refresh, sync status
- valuation: Portfolio valuation and allocation
- projection: Compounding projection with crash scenarios
- market_data: Quotes, exchange rates, ticker catalog
- session: Mocked login and preferences
"""

from wealthvault.routers import holdings, market_data, projection, session, valuation

__all__ = ["holdings", "market_data", "projection", "session", "valuation"]
