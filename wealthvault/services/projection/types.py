# wealthvault/services/projection/types.py
"""
Data types for the projection engine.

Type Hierarchy:
    ProjectionParams     - Growth assumptions (annual rate, horizon)
    ScenarioConfig       - Scheduled crash shocks
    ProjectionDataPoint  - One year of the trajectory
    ProjectionResult     - Full trajectory plus summary figures
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from wealthvault.services.constants import (
    DEFAULT_ANNUAL_RETURN_RATE,
    DEFAULT_CRASH_FREQUENCY,
    DEFAULT_CRASH_SEVERITY,
    DEFAULT_PROJECTION_YEARS,
    DEFAULT_RISK_SPLIT,
)


@dataclass(frozen=True)
class ProjectionParams:
    """
    Attributes:
        annual_return_rate: Percent per year; may be negative, not below -100
        years: Horizon in whole years (>= 1)
    """

    annual_return_rate: Decimal = DEFAULT_ANNUAL_RETURN_RATE
    years: int = DEFAULT_PROJECTION_YEARS


@dataclass(frozen=True)
class ScenarioConfig:
    """
    Scheduled market shocks.

    When active, a shock hits at the end of every year that is a multiple
    of crash_frequency. Its size depends on the portfolio's risk mix:

        impact% = growth_pct × severity × split/100
                + stable_pct × severity × (100 - split)/100

    Attributes:
        active: Shocks are applied only when True
        crash_frequency: Years between shocks (>= 1)
        crash_severity: Percent drop of a full shock
        risk_split: Percent of the shock borne by growth holdings (0..100)
    """

    active: bool = False
    crash_frequency: int = DEFAULT_CRASH_FREQUENCY
    crash_severity: Decimal = DEFAULT_CRASH_SEVERITY
    risk_split: Decimal = DEFAULT_RISK_SPLIT

    def is_crash_year(self, year: int) -> bool:
        return self.active and year > 0 and year % self.crash_frequency == 0


@dataclass(frozen=True)
class ProjectionDataPoint:
    """
    Attributes:
        year: 0..years
        principal: Starting value restated at every point
        total_value: Simulated value, whole units, never negative
        contributions: Cumulative deposits through this year, whole units
    """

    year: int
    principal: Decimal
    total_value: Decimal
    contributions: Decimal


@dataclass(frozen=True)
class ProjectionResult:
    """
    Trajectory plus summary.

    total_outlay is what the user puts in (starting value plus deposits);
    simulated_profit is what the simulation adds on top of it.
    """

    points: tuple[ProjectionDataPoint, ...]
    monthly_contribution: Decimal
    params: ProjectionParams
    scenario: ScenarioConfig = field(default_factory=ScenarioConfig)
    crash_years: tuple[int, ...] = ()

    @property
    def final_point(self) -> ProjectionDataPoint:
        return self.points[-1]

    @property
    def final_value(self) -> Decimal:
        return self.final_point.total_value

    @property
    def total_contributions(self) -> Decimal:
        return self.final_point.contributions

    @property
    def total_outlay(self) -> Decimal:
        return self.final_point.principal + self.total_contributions

    @property
    def simulated_profit(self) -> Decimal:
        return self.final_value - self.total_outlay
