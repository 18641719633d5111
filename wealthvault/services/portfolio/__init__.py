# wealthvault/services/portfolio/__init__.py
"""
Portfolio state package.

types.py and transitions.py are pure; session.py adds locking,
persistence and provider calls on top of them and is imported by path
(wealthvault.services.portfolio.session).
"""

from wealthvault.services.portfolio.types import (
    Holding,
    PersistenceStatus,
    PriceUpdate,
    RefreshResult,
    VaultState,
)

__all__ = [
    "Holding",
    "VaultState",
    "PriceUpdate",
    "RefreshResult",
    "PersistenceStatus",
]
