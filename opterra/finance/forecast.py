"""
Financial Forecast - Replacement Date, Budget and Upgrade Path

Pure function of (inputs, metrics, verdict, infrastructure issues, as_of).
The as-of date is the only time input.
"""

import calendar
from datetime import date
from typing import List

from opterra.physics import OpterraMetrics
from opterra.rules import ActionType, InfrastructureIssue, Recommendation
from opterra.taxonomy import UnitInputs
from .schemas import BudgetUrgency, FinancialForecast
from .tiers import current_tier, like_for_like_cost, quote_all_tiers, upgrade_tier


INFLATION_RATE = 0.03
COST_BAND = 0.10

# Years until target -> urgency (first match wins)
URGENCY_THRESHOLDS = (
    (0.0, BudgetUrgency.IMMEDIATE),
    (1.0, BudgetUrgency.HIGH),
    (3.0, BudgetUrgency.MED),
)

RECOMMENDATIONS = {
    BudgetUrgency.IMMEDIATE: "Replace Now",
    BudgetUrgency.HIGH: "Budget for Replacement This Year",
    BudgetUrgency.MED: "Start a Replacement Fund",
    BudgetUrgency.LOW: "Save for Future",
}


def add_months(start: date, months: int) -> date:
    """Calendar month arithmetic, clamping the day to the target month's length."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def budget_urgency(years_until_target: float) -> BudgetUrgency:
    for limit, urgency in URGENCY_THRESHOLDS:
        if years_until_target <= limit:
            return urgency
    return BudgetUrgency.LOW


def is_replacement_urgent(metrics: OpterraMetrics, verdict: Recommendation) -> bool:
    """Replacement is due now: an urgent REPLACE verdict or no years left."""
    urgent_replace = verdict.action == ActionType.REPLACE and verdict.urgent
    return urgent_replace or metrics.years_left_current <= 0


def calculate_financial_forecast(
    inputs: UnitInputs,
    metrics: OpterraMetrics,
    verdict: Recommendation,
    infrastructure_issues: List[InfrastructureIssue],
    as_of: date,
) -> FinancialForecast:
    """
    Build the replacement budget plan.

    Args:
        inputs: Unit record
        metrics: Physics output
        verdict: Unit recommendation
        infrastructure_issues: Open infrastructure findings, bundled into quotes
        as_of: Reference date

    Returns:
        FinancialForecast with tier quotes
    """
    if is_replacement_urgent(metrics, verdict):
        months = 0
    else:
        months = max(0, int(round(metrics.years_left_current * 12)))

    target = add_months(as_of, months)
    urgency = budget_urgency(months / 12.0)

    base = like_for_like_cost(inputs)
    inflated = base * (1.0 + INFLATION_RATE) ** (months / 12.0)

    current = current_tier(inputs)
    upgrade = upgrade_tier(inputs)
    upgrade_cost = None
    value_prop = None
    if upgrade.tier != current.tier:
        upgrade_cost = upgrade.base_cost - current.base_cost
        value_prop = (
            f"{upgrade.label}: +{upgrade.warranty_years - current.warranty_years} years "
            f"of warranty and about {upgrade.expected_life - current.expected_life} more "
            f"years of service for ${upgrade_cost:,}"
        )

    return FinancialForecast(
        target_replacement_date=target,
        months_until_target=months,
        like_for_like_cost=base,
        est_replacement_cost=round(inflated),
        est_replacement_cost_min=round(inflated * (1.0 - COST_BAND)),
        est_replacement_cost_max=round(inflated * (1.0 + COST_BAND)),
        monthly_budget=round(base / max(1, months)),
        budget_urgency=urgency,
        recommendation=RECOMMENDATIONS[urgency],
        current_tier=current,
        upgrade_tier=upgrade if upgrade.tier != current.tier else None,
        upgrade_cost=upgrade_cost,
        upgrade_value_prop=value_prop,
        quotes=quote_all_tiers(inputs, infrastructure_issues),
    )
