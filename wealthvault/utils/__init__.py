# wealthvault/utils/__init__.py
"""
Cross-cutting utilities: logging setup and request context.

Usage:
    from wealthvault.utils import setup_logging, get_logger
    from wealthvault.utils import get_correlation_id, set_correlation_id
"""

from wealthvault.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
    get_user_id,
    set_user_id,
    clear_user_id,
)
from wealthvault.utils.logging import setup_logging, get_logger

__all__ = [
    "setup_logging",
    "get_logger",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "get_user_id",
    "set_user_id",
    "clear_user_id",
]
