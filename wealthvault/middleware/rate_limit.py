# wealthvault/middleware/rate_limit.py
"""
Rate limiting for API protection.

Uses slowapi to protect the market data provider's quota (every quote,
FX and catalog lookup is a paid generative-AI call) and to keep one
client from starving others.

Key by: Client IP address (X-Forwarded-For only from trusted proxies)
Storage: In-memory (single-instance deployment)

Usage:
    from wealthvault.middleware.rate_limit import limiter, RATE_LIMIT_MARKET_DATA

    @router.post("/refresh")
    @limiter.limit(RATE_LIMIT_MARKET_DATA)
    def refresh(request: Request):
        ...
"""

import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from wealthvault.config import settings
from wealthvault.services.constants import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_HEALTH,
    RATE_LIMIT_MARKET_DATA,
    RATE_LIMIT_WRITE,
)

logger = logging.getLogger(__name__)

# Seconds reported in Retry-After when a limit is hit
DEFAULT_RETRY_AFTER_SECONDS = 60


def _is_trusted_proxy(request: Request) -> bool:
    """Check if the immediate client is a proxy whose forwarded headers we trust."""
    if settings.trust_proxy_headers:
        return True
    return get_remote_address(request) in settings.trusted_proxy_ips


def _get_client_ip(request: Request) -> str:
    """
    Extract the client IP address.

    Forwarded headers are only honoured from trusted proxies so that a
    client cannot pick its own rate-limit bucket.
    """
    if _is_trusted_proxy(request):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    return get_remote_address(request)


limiter = Limiter(
    key_func=_get_client_ip,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Return a 429 in the standard error format with a Retry-After header."""
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"

    logger.warning(f"Rate limit exceeded for {_get_client_ip(request)}: {limit_info}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "RateLimitError",
            "message": f"Too many requests. {limit_info}",
            "details": {"retry_after": DEFAULT_RETRY_AFTER_SECONDS},
        },
        headers={"Retry-After": str(DEFAULT_RETRY_AFTER_SECONDS)},
    )


__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_MARKET_DATA",
    "RATE_LIMIT_HEALTH",
]
