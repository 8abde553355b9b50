"""
Infrastructure Catalog - Code Violations and Upgrade Opportunities

Infrastructure issues are plumbing defects around the heater, priced
separately from the unit and bundled into replacement quotes by tier.
"""

from typing import Dict, List

from opterra.physics.constants import HARD_WATER_GPG, PSI_CODE_MAX, PSI_DESIGN, PSI_ELEVATED
from opterra.taxonomy import (
    ExpansionTankStatus,
    UnitInputs,
    has_storage_tank,
    is_closed_loop,
    needs_expansion_tank,
    resolve_hardness,
)
from .schemas import InfrastructureCategory, InfrastructureIssue


SOFTENER_SERVICE_GPG = 10.0    # Softener present but effective hardness above this
SOFTENER_FAILED_GPG = 15.0

# id -> (category, title, description, cost_min, cost_max)
INFRASTRUCTURE_CATALOG = {
    "exp_tank_required": (
        InfrastructureCategory.VIOLATION, "Thermal Expansion Tank Required",
        "Closed-loop system without a working expansion tank. Required by code.",
        250, 400,
    ),
    "exp_tank_replace": (
        InfrastructureCategory.INFRASTRUCTURE, "Replace Expansion Tank",
        "The existing expansion tank is waterlogged and no longer absorbs expansion.",
        250, 400,
    ),
    "prv_failed": (
        InfrastructureCategory.VIOLATION, "Replace Failed PRV",
        "The installed PRV is not holding pressure under the code limit.",
        350, 550,
    ),
    "prv_critical": (
        InfrastructureCategory.VIOLATION, "PRV Required",
        "House pressure exceeds the code limit with no regulator installed.",
        350, 550,
    ),
    "prv_recommended": (
        InfrastructureCategory.INFRASTRUCTURE, "PRV Recommended",
        "Elevated house pressure. A regulator protects the heater and fixtures.",
        350, 550,
    ),
    "softener_service": (
        InfrastructureCategory.INFRASTRUCTURE, "Service Water Softener",
        "The softener is not bringing hardness down. Resin or valve service needed.",
        200, 350,
    ),
    "softener_replace": (
        InfrastructureCategory.OPTIMIZATION, "Replace Water Softener",
        "The softener has effectively stopped working.",
        2200, 3000,
    ),
    "prv_longevity": (
        InfrastructureCategory.OPTIMIZATION, "PRV for Longevity",
        "Pressure is within code, but a regulator at 60 PSI extends unit life.",
        350, 550,
    ),
    "softener_new": (
        InfrastructureCategory.OPTIMIZATION, "Install Water Softener",
        "Hard water is scaling the heater and every fixture in the house.",
        2400, 3200,
    ),
}


def _make_issue(issue_id: str) -> InfrastructureIssue:
    category, title, description, cost_min, cost_max = INFRASTRUCTURE_CATALOG[issue_id]
    return InfrastructureIssue(
        id=issue_id,
        category=category,
        title=title,
        description=description,
        cost_min=cost_min,
        cost_max=cost_max,
    )


def detect_infrastructure_issues(inputs: UnitInputs) -> List[InfrastructureIssue]:
    """
    Find priced infrastructure defects for a unit.

    Args:
        inputs: Any unit record

    Returns:
        Issues in catalog order
    """
    found: List[str] = []
    psi = inputs.house_psi
    waterlogged = (
        is_closed_loop(inputs)
        and inputs.has_exp_tank
        and inputs.exp_tank_status == ExpansionTankStatus.WATERLOGGED
    )

    if has_storage_tank(inputs.fuel_type):
        if waterlogged:
            found.append("exp_tank_replace")
        elif needs_expansion_tank(inputs):
            found.append("exp_tank_required")

    if psi > PSI_CODE_MAX:
        found.append("prv_failed" if inputs.has_prv else "prv_critical")
    elif not inputs.has_prv and psi >= PSI_ELEVATED:
        found.append("prv_recommended")
    elif not inputs.has_prv and psi > PSI_DESIGN:
        found.append("prv_longevity")

    hardness = resolve_hardness(inputs)
    if inputs.has_softener:
        if hardness.effective_gpg > SOFTENER_FAILED_GPG:
            found.append("softener_replace")
        elif hardness.effective_gpg >= SOFTENER_SERVICE_GPG:
            found.append("softener_service")
    elif hardness.street_gpg > HARD_WATER_GPG:
        found.append("softener_new")

    order = list(INFRASTRUCTURE_CATALOG)
    return [_make_issue(issue_id) for issue_id in sorted(found, key=order.index)]


def calculate_issue_costs(issues: List[InfrastructureIssue]) -> Dict[str, int]:
    """Summed cost band for a set of issues."""
    low = sum(issue.cost_min for issue in issues)
    high = sum(issue.cost_max for issue in issues)
    return {"low": low, "high": high, "median": (low + high) // 2}


def issues_by_category(
    issues: List[InfrastructureIssue],
) -> Dict[InfrastructureCategory, List[InfrastructureIssue]]:
    grouped: Dict[InfrastructureCategory, List[InfrastructureIssue]] = {
        category: [] for category in InfrastructureCategory
    }
    for issue in issues:
        grouped[issue.category].append(issue)
    return grouped
