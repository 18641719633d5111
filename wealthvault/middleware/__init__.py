# wealthvault/middleware/__init__.py
"""
ASGI middleware: correlation ID tracking and rate limiting.

Usage:
    from wealthvault.middleware import CorrelationIdMiddleware, limiter

    app.add_middleware(CorrelationIdMiddleware)
    app.state.limiter = limiter
"""

from wealthvault.middleware.correlation import CorrelationIdMiddleware
from wealthvault.middleware.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_WRITE,
    RATE_LIMIT_MARKET_DATA,
    RATE_LIMIT_HEALTH,
)

__all__ = [
    "CorrelationIdMiddleware",
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_MARKET_DATA",
    "RATE_LIMIT_HEALTH",
]
