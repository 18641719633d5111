# wealthvault/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
Global handlers in main.py map them to HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidHoldingError
    │   └── InvalidProjectionError
    ├── NotFoundError
    │   ├── HoldingNotFoundError
    │   └── SymbolNotFoundError
    ├── MarketDataError
    │   ├── ProviderUnavailableError
    │   ├── RateLimitError
    │   └── MalformedResponseError
    ├── FXRateError
    │   └── UnknownCurrencyError
    └── PersistenceError
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when programmatic input validation fails.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidHoldingError(ValidationError):
    """
    Raised when a lot cannot be created or edited from the given input.

    Raised before any provider call, so no partial lot ever exists.
    """


class InvalidProjectionError(ValidationError):
    """Raised for projection inputs outside the engine's domain (e.g. years < 1)."""


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Holding")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class HoldingNotFoundError(NotFoundError):
    """Raised when no lot with the given id exists in the session."""

    def __init__(self, holding_id: str) -> None:
        self.holding_id = holding_id
        super().__init__(
            f"Holding {holding_id} not found",
            resource_type="Holding",
            resource_id=holding_id,
        )


class SymbolNotFoundError(NotFoundError):
    """Raised when a symbol-level operation names a symbol with no lots."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(
            f"No holdings for symbol {symbol}",
            resource_type="Symbol",
            resource_id=symbol,
        )


# =============================================================================
# MARKET DATA PROVIDER ERRORS
# =============================================================================


class MarketDataError(ServiceError):
    """
    Base exception for market data provider failures.

    The market data service recovers from all of these with documented
    fallback values; they only reach clients through the raw quote endpoint.

    Attributes:
        provider: Name of the provider that failed
    """

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message)


class ProviderUnavailableError(MarketDataError):
    """
    Raised when the provider cannot be reached or is not configured.

    Examples:
    - Network timeout
    - Server errors (500, 502, 503)
    - Missing API key
    """

    def __init__(self, provider: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Provider '{provider}' is unavailable: {reason}", provider=provider)


class RateLimitError(MarketDataError):
    """
    Raised when the provider's quota has been exceeded.

    Attributes:
        retry_after: Seconds to wait before retrying (if provided by the API)
    """

    def __init__(self, provider: str, retry_after: int | None = None) -> None:
        message = f"Rate limit exceeded for provider '{provider}'"
        if retry_after:
            message += f" (retry after {retry_after}s)"
        self.retry_after = retry_after
        super().__init__(message, provider=provider)


class MalformedResponseError(MarketDataError):
    """
    Raised when the provider answers but the payload is unusable.

    Examples:
    - Text that is not JSON
    - JSON missing required fields
    - Non-positive or non-finite prices
    """

    def __init__(self, provider: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Provider '{provider}' returned a malformed payload: {reason}", provider=provider)


# =============================================================================
# FX ERRORS
# =============================================================================


class FXRateError(ServiceError):
    """Base exception for currency conversion errors."""


class UnknownCurrencyError(FXRateError):
    """
    Raised by the strict conversion policy when a code has no rate.

    The lenient policy never raises this; it uses a multiplier of 1.
    """

    def __init__(self, currency: str, known: list[str]) -> None:
        self.currency = currency
        self.known = known
        super().__init__(
            f"No exchange rate for currency '{currency}'. Known: {', '.join(known) or 'none'}"
        )


# =============================================================================
# PERSISTENCE ERRORS
# =============================================================================


class PersistenceError(ServiceError):
    """
    Raised when the holdings store cannot read or write a record.

    Attributes:
        user_id: Owner of the record
        operation: "read", "write" or "delete"
    """

    def __init__(self, user_id: str, operation: str, reason: str) -> None:
        self.user_id = user_id
        self.operation = operation
        self.reason = reason
        super().__init__(f"Holdings store {operation} failed for user '{user_id}': {reason}")


__all__ = [
    "ServiceError",
    "ValidationError",
    "InvalidHoldingError",
    "InvalidProjectionError",
    "NotFoundError",
    "HoldingNotFoundError",
    "SymbolNotFoundError",
    "MarketDataError",
    "ProviderUnavailableError",
    "RateLimitError",
    "MalformedResponseError",
    "FXRateError",
    "UnknownCurrencyError",
    "PersistenceError",
]
