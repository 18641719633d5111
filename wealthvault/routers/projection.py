# wealthvault/routers/projection.py
"""
Projection endpoint.

POST /projection runs the compounding engine from the caller's current
portfolio: starting value = total market value, monthly deposit = sum
of symbol contributions, crash impact weighted by the portfolio's risk
mix. Starting value and deposit can be overridden for what-if runs.
"""

import logging

from fastapi import APIRouter, Depends

from wealthvault.dependencies import (
    get_portfolio_session,
    get_projection_engine,
    get_valuation_service,
)
from wealthvault.routers._mappers import map_risk_mix
from wealthvault.schemas.projection import (
    ProjectionPointResponse,
    ProjectionRequest,
    ProjectionResponse,
)
from wealthvault.schemas.validators import money
from wealthvault.services.portfolio.session import PortfolioSession
from wealthvault.services.projection import ProjectionEngine, ProjectionParams, ScenarioConfig
from wealthvault.services.valuation import ValuationService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/projection",
    tags=["Projection"],
)


@router.post(
    "",
    response_model=ProjectionResponse,
    summary="Project portfolio value",
    response_description="Year-by-year trajectory with summary figures",
)
def run_projection(
        payload: ProjectionRequest,
        session: PortfolioSession = Depends(get_portfolio_session),
        valuation_service: ValuationService = Depends(get_valuation_service),
        engine: ProjectionEngine = Depends(get_projection_engine),
) -> ProjectionResponse:
    """
    Project the portfolio `years` ahead.

    Growth compounds monthly at the rate equivalent to `annual_return_rate`.
    With an active scenario, a shock is applied at the end of every
    `crash_frequency`-th year. Every point carries the starting value as
    `principal`. Values are whole currency units and never negative.

    The result has `years + 1` points (year 0 is today).
    """
    valuation = valuation_service.value_portfolio(session.state)
    current_value = payload.current_value if payload.current_value is not None else valuation.total_value
    monthly = (
        payload.monthly_contribution
        if payload.monthly_contribution is not None
        else valuation.monthly_contribution
    )

    result = engine.run(
        current_value=current_value,
        monthly_contribution=monthly,
        params=ProjectionParams(annual_return_rate=payload.annual_return_rate, years=payload.years),
        scenario=ScenarioConfig(
            active=payload.scenario.active,
            crash_frequency=payload.scenario.crash_frequency,
            crash_severity=payload.scenario.crash_severity,
            risk_split=payload.scenario.risk_split,
        ),
        mix=valuation.risk_mix,
    )

    return ProjectionResponse(
        display_currency=valuation.display_currency,
        current_value=money(current_value),
        monthly_contribution=money(monthly),
        annual_return_rate=payload.annual_return_rate,
        years=payload.years,
        risk_mix=map_risk_mix(valuation.risk_mix),
        points=[
            ProjectionPointResponse(
                year=p.year,
                principal=money(p.principal),
                total_value=money(p.total_value),
                contributions=money(p.contributions),
            )
            for p in result.points
        ],
        crash_years=list(result.crash_years),
        final_value=money(result.final_value),
        total_contributions=money(result.total_contributions),
        total_outlay=money(result.total_outlay),
        simulated_profit=money(result.simulated_profit),
    )
