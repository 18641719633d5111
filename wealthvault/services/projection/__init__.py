# wealthvault/services/projection/__init__.py
"""Projection engine package."""

from wealthvault.services.projection.engine import (
    ProjectionEngine,
    monthly_rate_for,
    project,
    shock_impact_pct,
)
from wealthvault.services.projection.types import (
    ProjectionDataPoint,
    ProjectionParams,
    ProjectionResult,
    ScenarioConfig,
)

__all__ = [
    "ProjectionEngine",
    "project",
    "monthly_rate_for",
    "shock_impact_pct",
    "ProjectionParams",
    "ScenarioConfig",
    "ProjectionDataPoint",
    "ProjectionResult",
]
