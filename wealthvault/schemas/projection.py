# wealthvault/schemas/projection.py
"""
Pydantic schemas for portfolio projections.

By default a projection starts from the caller's current portfolio value
and total monthly contribution; both can be overridden for what-if runs.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from wealthvault.schemas.valuation import RiskMixResponse
from wealthvault.services.constants import (
    DEFAULT_ANNUAL_RETURN_RATE,
    DEFAULT_CRASH_FREQUENCY,
    DEFAULT_CRASH_SEVERITY,
    DEFAULT_PROJECTION_YEARS,
    DEFAULT_RISK_SPLIT,
    MAX_PROJECTION_YEARS,
)


class ScenarioRequest(BaseModel):
    """Scheduled crash shocks (UI: frequency 2..25, severity 5..60, split step 5)."""

    active: bool = False
    crash_frequency: int = Field(
        default=DEFAULT_CRASH_FREQUENCY,
        ge=1,
        le=MAX_PROJECTION_YEARS,
        description="Years between shocks"
    )
    crash_severity: Decimal = Field(
        default=DEFAULT_CRASH_SEVERITY,
        ge=0,
        le=100,
        description="Percent drop of a full shock"
    )
    risk_split: Decimal = Field(
        default=DEFAULT_RISK_SPLIT,
        ge=0,
        le=100,
        description="Percent of the shock borne by growth holdings"
    )


class ProjectionRequest(BaseModel):
    annual_return_rate: Decimal = Field(
        default=DEFAULT_ANNUAL_RETURN_RATE,
        ge=-100,
        le=100,
        description="Expected annual return in percent (UI range -15..20)",
        examples=["7", "-5"]
    )
    years: int = Field(
        default=DEFAULT_PROJECTION_YEARS,
        ge=1,
        le=MAX_PROJECTION_YEARS,
        description="Horizon in years (UI range 1..50)"
    )
    scenario: ScenarioRequest = Field(default_factory=ScenarioRequest)
    current_value: Decimal | None = Field(
        default=None,
        ge=0,
        description="Starting value; defaults to the portfolio's current value"
    )
    monthly_contribution: Decimal | None = Field(
        default=None,
        ge=0,
        description="Monthly deposit; defaults to the portfolio's total contribution"
    )


class ProjectionPointResponse(BaseModel):
    year: int
    principal: Decimal
    total_value: Decimal
    contributions: Decimal


class ProjectionResponse(BaseModel):
    display_currency: str
    current_value: Decimal
    monthly_contribution: Decimal
    annual_return_rate: Decimal
    years: int
    risk_mix: RiskMixResponse
    points: list[ProjectionPointResponse]
    crash_years: list[int]
    final_value: Decimal
    total_contributions: Decimal
    total_outlay: Decimal = Field(..., description="Starting value plus all contributions")
    simulated_profit: Decimal = Field(..., description="Final value minus total outlay")
