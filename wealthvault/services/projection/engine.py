# wealthvault/services/projection/engine.py
"""
Compounding projection engine with scheduled crash shocks.

=============================================================================
ALGORITHM
=============================================================================

    year 0:  {principal: V, total: V, contributions: 0}

    monthly_rate = (1 + annual_rate/100) ** (1/12) - 1

    for year in 1..N:
        repeat 12 times:
            total = total × (1 + monthly_rate) + contribution
            contributions += contribution
        if scenario.active and year % crash_frequency == 0:
            total = total × (1 - impact%/100)
        emit {principal: V, total: max(0, round(total)), contributions: round(contributions)}

Rounding applies to emitted points only; the running total keeps full
precision between years. Rounding is half-up to whole currency units.

The engine is deterministic: the same inputs give the same trajectory.
Arithmetic runs in a local Decimal context with extra precision so the
fractional power does not lose digits over long horizons.

Usage:
    result = ProjectionEngine().run(
        current_value=Decimal("10000"),
        monthly_contribution=Decimal("250"),
        params=ProjectionParams(annual_return_rate=Decimal("7"), years=25),
    )
    print(result.final_value)
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from wealthvault.services.constants import MAX_PROJECTION_YEARS, MONTHS_PER_YEAR
from wealthvault.services.exceptions import InvalidProjectionError
from wealthvault.services.projection.types import (
    ProjectionDataPoint,
    ProjectionParams,
    ProjectionResult,
    ScenarioConfig,
)
from wealthvault.services.valuation.types import RiskMix

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")
_WHOLE = Decimal("1")

_PRECISION = 60


def monthly_rate_for(annual_return_rate: Decimal) -> Decimal:
    """Monthly rate that compounds to annual_return_rate over 12 months."""
    base = _ONE + annual_return_rate / _HUNDRED
    if base == _ZERO:
        return -_ONE
    return base ** (_ONE / Decimal(MONTHS_PER_YEAR)) - _ONE


def shock_impact_pct(scenario: ScenarioConfig, mix: RiskMix) -> Decimal:
    """Percent drop applied in a crash year, weighted by the risk mix."""
    severity = scenario.crash_severity
    split = scenario.risk_split
    return (
        mix.growth_pct * severity * (split / _HUNDRED)
        + mix.stable_pct * severity * ((_HUNDRED - split) / _HUNDRED)
    )


def _round_whole(value: Decimal) -> Decimal:
    return value.quantize(_WHOLE, rounding=ROUND_HALF_UP)


class ProjectionEngine:
    """
    Pure projection over Decimal inputs.

    Raises:
        InvalidProjectionError: years < 1 (or above the supported maximum),
            annual rate below -100, negative value or contribution,
            crash_frequency < 1, severity or split outside 0..100
    """

    def run(
            self,
            current_value: Decimal,
            monthly_contribution: Decimal,
            params: ProjectionParams,
            scenario: ScenarioConfig | None = None,
            mix: RiskMix | None = None,
    ) -> ProjectionResult:
        scenario = scenario or ScenarioConfig()
        mix = mix if mix is not None else RiskMix.all_growth()
        self._validate(current_value, monthly_contribution, params, scenario)

        points = [ProjectionDataPoint(
            year=0,
            principal=current_value,
            total_value=current_value,
            contributions=_ZERO,
        )]
        crash_years: list[int] = []

        try:
            with localcontext() as ctx:
                ctx.prec = _PRECISION
                running_total = current_value
                running_contributions = _ZERO

                for year in range(1, params.years + 1):
                    growth = _ONE + monthly_rate_for(params.annual_return_rate)
                    for _ in range(MONTHS_PER_YEAR):
                        running_total = running_total * growth + monthly_contribution
                        running_contributions += monthly_contribution

                    if scenario.is_crash_year(year):
                        impact = shock_impact_pct(scenario, mix)
                        running_total = running_total * (_ONE - impact / _HUNDRED)
                        crash_years.append(year)

                    points.append(ProjectionDataPoint(
                        year=year,
                        principal=current_value,
                        total_value=max(_ZERO, _round_whole(running_total)),
                        contributions=_round_whole(running_contributions),
                    ))
        except InvalidOperation as e:
            raise InvalidProjectionError(f"Projection inputs out of range: {e}") from e

        logger.debug(
            f"Projected {params.years} years at {params.annual_return_rate}%: "
            f"{current_value} -> {points[-1].total_value} ({len(crash_years)} shocks)"
        )

        return ProjectionResult(
            points=tuple(points),
            monthly_contribution=monthly_contribution,
            params=params,
            scenario=scenario,
            crash_years=tuple(crash_years),
        )

    def project(
            self,
            current_value: Decimal,
            monthly_contribution: Decimal,
            params: ProjectionParams,
            scenario: ScenarioConfig | None = None,
            mix: RiskMix | None = None,
    ) -> list[ProjectionDataPoint]:
        """Trajectory only: years + 1 points."""
        return list(self.run(current_value, monthly_contribution, params, scenario, mix).points)

    @staticmethod
    def _validate(
            current_value: Decimal,
            monthly_contribution: Decimal,
            params: ProjectionParams,
            scenario: ScenarioConfig,
    ) -> None:
        if params.years < 1:
            raise InvalidProjectionError("Projection horizon must be at least 1 year", field="years")
        if params.years > MAX_PROJECTION_YEARS:
            raise InvalidProjectionError(
                f"Projection horizon cannot exceed {MAX_PROJECTION_YEARS} years", field="years"
            )
        if params.annual_return_rate < -_HUNDRED:
            raise InvalidProjectionError(
                "Annual return rate cannot be below -100%", field="annual_return_rate"
            )
        if current_value < _ZERO:
            raise InvalidProjectionError("Current value cannot be negative", field="current_value")
        if monthly_contribution < _ZERO:
            raise InvalidProjectionError(
                "Monthly contribution cannot be negative", field="monthly_contribution"
            )
        if scenario.crash_frequency < 1:
            raise InvalidProjectionError("Crash frequency must be at least 1 year", field="crash_frequency")
        if not _ZERO <= scenario.crash_severity <= _HUNDRED:
            raise InvalidProjectionError("Crash severity must be between 0 and 100", field="crash_severity")
        if not _ZERO <= scenario.risk_split <= _HUNDRED:
            raise InvalidProjectionError("Risk split must be between 0 and 100", field="risk_split")


def project(
        current_value: Decimal,
        monthly_contribution: Decimal,
        params: ProjectionParams,
        scenario: ScenarioConfig | None = None,
        mix: RiskMix | None = None,
) -> list[ProjectionDataPoint]:
    """Functional shortcut for ProjectionEngine().project(...)."""
    return ProjectionEngine().project(current_value, monthly_contribution, params, scenario, mix)
