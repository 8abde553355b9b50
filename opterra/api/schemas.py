"""
API Schemas - Request/Response Contracts

Unit records are validated through the ForensicInputs tagged union, so a
malformed record or an unknown fuel type fails with 422 before any engine
code runs.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from opterra.physics import OpterraMetrics, ProjectedHealth
from opterra.physics.aging import DEFAULT_TREND_MONTHS
from opterra.rules import Issue, Recommendation
from opterra.taxonomy import ForensicInputs


class AssessmentRequest(BaseModel):
    """A unit record plus the reference date for the forecast."""
    inputs: ForensicInputs
    as_of: Optional[date] = Field(None, description="Defaults to today")


class ProjectionRequest(BaseModel):
    inputs: ForensicInputs
    months: List[int] = Field(
        default_factory=lambda: list(DEFAULT_TREND_MONTHS),
        description="Horizons in months",
        min_length=1,
        max_length=120,
    )


class IssuesResponse(BaseModel):
    verdict: Recommendation
    issues: List[Issue]


class ProjectionResponse(BaseModel):
    metrics: OpterraMetrics
    trend: List[ProjectedHealth]


class ScenarioSummary(BaseModel):
    name: str
    description: str
    fuel_type: str


class ScenarioDetail(ScenarioSummary):
    inputs: Dict[str, Any]
