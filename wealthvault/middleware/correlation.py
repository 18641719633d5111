# wealthvault/middleware/correlation.py
"""
Correlation ID middleware for request tracing.

For each request the middleware:
1. Takes the correlation ID from X-Correlation-ID, then X-Request-ID,
   or generates a UUID4
2. Stores it in the request context (picked up by the logging filter)
3. Echoes it in the X-Correlation-ID response header
"""

import logging
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from wealthvault.utils.context import (
    clear_correlation_id,
    clear_user_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Manages correlation IDs for request tracing."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        correlation_id = self._get_correlation_id(request)
        set_correlation_id(correlation_id)

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_correlation_id()
            clear_user_id()

    def _get_correlation_id(self, request: Request) -> str:
        correlation_id = request.headers.get(CORRELATION_ID_HEADER)
        if correlation_id:
            return correlation_id

        correlation_id = request.headers.get(REQUEST_ID_HEADER)
        if correlation_id:
            return correlation_id

        return str(uuid.uuid4())
