# wealthvault/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application (tables created on startup,
  pending session writes flushed on shutdown)
- Registers global exception handlers
- Registers all routers
- Defines global endpoints (health checks)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

from wealthvault.config import settings
from wealthvault.database import check_database_health, init_db
from wealthvault.dependencies import get_market_data_provider, get_session_manager
from wealthvault.middleware import (
    RATE_LIMIT_HEALTH,
    CorrelationIdMiddleware,
    SlowAPIMiddleware,
    limiter,
    rate_limit_exceeded_handler,
)
from wealthvault.routers import holdings, market_data, projection, session, valuation
from wealthvault.schemas.errors import ErrorDetail, ValidationErrorDetail
from wealthvault.services.exceptions import (
    FXRateError,
    MalformedResponseError,
    MarketDataError,
    NotFoundError,
    PersistenceError,
    ProviderUnavailableError,
    RateLimitError,
    ServiceError,
    UnknownCurrencyError,
    ValidationError,
)
from wealthvault.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.app_name} started ({settings.environment})")
    yield
    get_session_manager().shutdown()
    logger.info(f"{settings.app_name} stopped")


# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Personal investment tracker with multi-currency valuation and growth projections",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================
# Origins are configured via CORS_ORIGINS environment variable

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# =============================================================================
# MIDDLEWARE (order matters: last added = first executed)
# =============================================================================

# Attach limiter to app state (required by slowapi)
app.state.limiter = limiter

app.add_middleware(SlowAPIMiddleware)

# Extracts/generates correlation IDs and adds them to response headers
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# These handlers catch service-layer exceptions and convert them to
# consistent HTTP responses. Starlette picks the handler registered for
# the closest class in the exception's MRO.
# =============================================================================

app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


def _error_response(status_code: int, exc: ServiceError, details: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorDetail(
            error=type(exc).__name__,
            message=str(exc),
            details=details,
        ).model_dump(),
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle unknown holding ids and symbols (404)."""
    logger.warning(f"Not found: {exc}")
    return _error_response(
        404,
        exc,
        {"resource_type": exc.resource_type, "resource_id": exc.resource_id},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle domain validation errors (400)."""
    logger.warning(f"Validation error: {exc}")
    return _error_response(400, exc, {"field": exc.field} if exc.field else None)


@app.exception_handler(FXRateError)
async def fx_rate_error_handler(request: Request, exc: FXRateError) -> JSONResponse:
    """Handle conversion failures, e.g. missing rates under the strict FX policy (400)."""
    logger.warning(f"FX error: {exc}")
    details = None
    if isinstance(exc, UnknownCurrencyError):
        details = {"currency": exc.currency, "known": exc.known}
    return _error_response(400, exc, details)


@app.exception_handler(ProviderUnavailableError)
async def provider_unavailable_handler(request: Request, exc: ProviderUnavailableError) -> JSONResponse:
    """Handle market data provider unavailable (503)."""
    logger.error(f"Provider unavailable: {exc}")
    return _error_response(503, exc)


@app.exception_handler(RateLimitError)
async def provider_rate_limit_handler(request: Request, exc: RateLimitError) -> JSONResponse:
    """Handle provider quota exceeded (429)."""
    logger.warning(f"Provider rate limit exceeded: {exc}")
    return _error_response(429, exc, {"retry_after": exc.retry_after} if exc.retry_after else None)


@app.exception_handler(MalformedResponseError)
async def malformed_response_handler(request: Request, exc: MalformedResponseError) -> JSONResponse:
    """Handle unusable provider answers (502)."""
    logger.error(f"Malformed provider response: {exc}")
    return _error_response(502, exc)


@app.exception_handler(MarketDataError)
async def market_data_error_handler(request: Request, exc: MarketDataError) -> JSONResponse:
    """Handle other provider errors (502)."""
    logger.error(f"Market data error: {exc}")
    return _error_response(502, exc)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Handle store errors that reach a request (503)."""
    logger.error(f"Persistence error: {exc}")
    return _error_response(503, exc, {"operation": exc.operation})


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return _error_response(500, exc)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle all HTTPExceptions with consistent error format.

    Converts FastAPI's default {"detail": "..."} format to our standard
    ErrorDetail format for API consistency.
    """
    error_types = {
        400: "BadRequestError",
        401: "UnauthorizedError",
        403: "ForbiddenError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        409: "ConflictError",
        422: "ValidationError",
        429: "RateLimitError",
        500: "InternalServerError",
        503: "ServiceUnavailableError",
    }
    error_type = error_types.get(exc.status_code, "HTTPError")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorDetail(
            error=error_type,
            message=str(exc.detail) if exc.detail else "An error occurred",
            details=None,
        ).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Convert the default 422 validation error to our ValidationErrorDetail format."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(
            error="ValidationError",
            message="Request validation failed",
            details=errors,
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log with traceback, answer 500 without internals."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorDetail(
            error="InternalServerError",
            message="An unexpected error occurred",
            details=None,
        ).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(session.router)  # /session/*
app.include_router(holdings.router)  # /holdings/*
app.include_router(valuation.router)  # /valuation/*
app.include_router(projection.router)  # /projection
app.include_router(market_data.router)  # /market-data/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def root(request: Request):
    """API root - returns basic application info."""
    return {
        "message": f"Welcome to {settings.app_name}!",
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(request: Request):
    """
    Health check endpoint.

    **Response Status Codes:**
    - 200: Store reachable (provider configuration is reported, not required)
    - 503: Store unreachable - do not route traffic here
    """
    checks = {"database": {**check_database_health(), "critical": True}}

    provider = get_market_data_provider()
    checks["market_data"] = {
        "status": "configured" if settings.is_provider_configured else "unconfigured",
        "provider": provider.name,
        "critical": False,
    }

    healthy = checks["database"]["status"] == "healthy"
    overall_status = "healthy" if healthy and settings.is_provider_configured else "degraded"
    response_data = {
        "status": overall_status if healthy else "unhealthy",
        "sessions": len(get_session_manager()),
        "checks": checks,
    }

    if not healthy:
        return JSONResponse(status_code=503, content=response_data)
    return response_data
