"""
Opterra Engine - Single Entry Point for a Unit Assessment

inputs -> metrics -> issues -> verdict -> finance -> maintenance

Pure deterministic logic. Same inputs and as-of date = Same result.
"""

import logging
from datetime import date
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, Field

from opterra.finance import (
    FinancialForecast,
    HardWaterTax,
    calculate_financial_forecast,
    calculate_hard_water_tax,
)
from opterra.maintenance import MaintenanceSchedule, calculate_maintenance_schedule
from opterra.physics import (
    LocationAssessment,
    OpterraMetrics,
    ProjectedHealth,
    calculate_health,
    project_trend,
)
from opterra.physics.aging import DEFAULT_TREND_MONTHS
from opterra.rules import (
    InfrastructureIssue,
    Issue,
    Recommendation,
    build_context,
    build_verdict,
    detect_infrastructure_issues,
    detect_issues,
)
from opterra.taxonomy import ForensicInputs, parse_inputs


logger = logging.getLogger(__name__)


class OpterraResult(BaseModel):
    """Everything known about one unit on one date."""
    as_of: date
    inputs: ForensicInputs
    metrics: OpterraMetrics
    verdict: Recommendation
    issues: List[Issue] = Field(default_factory=list)
    location: LocationAssessment
    hard_water_tax: HardWaterTax
    financial: FinancialForecast
    infrastructure_issues: List[InfrastructureIssue] = Field(default_factory=list)
    maintenance: MaintenanceSchedule


def calculate_opterra_risk(inputs: Any, as_of: Optional[date] = None) -> OpterraResult:
    """
    Assess one water heater.

    Args:
        inputs: A validated record or a raw mapping (fuel_type selects the variant)
        as_of: Reference date for the replacement forecast; defaults to today

    Returns:
        OpterraResult

    Raises:
        pydantic.ValidationError: If a mapping fails validation
    """
    record = parse_inputs(inputs)
    as_of = as_of or date.today()

    metrics = calculate_health(record)
    ctx = build_context(record, metrics)
    issues = detect_issues(record, metrics)
    verdict = build_verdict(ctx, issues)
    infrastructure = detect_infrastructure_issues(record)

    logger.debug(
        f"[Engine] {record.fuel_type.value} age={record.calendar_age} "
        f"bio_age={metrics.bio_age} fail_prob={metrics.fail_prob} "
        f"issues={len(issues)} verdict={verdict.action.value}:{verdict.title}"
    )

    return OpterraResult(
        as_of=as_of,
        inputs=record,
        metrics=metrics,
        verdict=verdict,
        issues=issues,
        location=ctx.location,
        hard_water_tax=calculate_hard_water_tax(record, metrics),
        financial=calculate_financial_forecast(record, metrics, verdict, infrastructure, as_of),
        infrastructure_issues=infrastructure,
        maintenance=calculate_maintenance_schedule(record, metrics, verdict, infrastructure),
    )


def project(
    metrics: OpterraMetrics,
    months: Sequence[int] = DEFAULT_TREND_MONTHS,
) -> List[ProjectedHealth]:
    """Forward health trend for an assessed unit."""
    return project_trend(
        bio_age=metrics.bio_age,
        aging_rate=metrics.aging_rate,
        eta=metrics.weibull_eta,
        months=months,
    )
