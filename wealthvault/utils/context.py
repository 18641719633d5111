# wealthvault/utils/context.py
"""
Request context for log correlation.

Holds request-scoped values in contextvars so they propagate through
async/await calls and into the threads FastAPI runs sync endpoints in:
- Correlation ID (set by CorrelationIdMiddleware)
- User ID (set by the identity dependency once the header is read)

Usage:
    from wealthvault.utils.context import get_correlation_id, set_user_id

    set_user_id("google_user_isa_vault_777")
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)


# =============================================================================
# CORRELATION ID
# =============================================================================

def get_correlation_id() -> str | None:
    """Return the current request's correlation ID, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)


# =============================================================================
# USER ID
# =============================================================================

def get_user_id() -> str | None:
    """Return the user the current request acts for, or None."""
    return _user_id_var.get()


def set_user_id(user_id: str) -> None:
    _user_id_var.set(user_id)


def clear_user_id() -> None:
    _user_id_var.set(None)
