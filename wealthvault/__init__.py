# wealthvault/__init__.py
"""WealthVault: personal investment tracker API."""

__version__ = "0.1.0"
