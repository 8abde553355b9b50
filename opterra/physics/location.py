"""
Location Risk Classifier - Install Location to Damage Potential

Risk levels:
    1 LOW       exterior / unfinished garage or crawlspace
    2 MODERATE  finished garage, unfinished basement
    3 ELEVATED  main living area, finished basement
    4 HIGH      attic / upper floor with a drain pan
    5 EXTREME   attic / upper floor without a drain pan

A storage unit on a closed loop without a working expansion tank is at
least HIGH wherever it sits.
"""

from typing import Dict, List, Tuple

from opterra.taxonomy import (
    LocationType,
    UnitInputs,
    has_storage_tank,
    needs_expansion_tank,
)
from .constants import LOCATION_CRITICAL, LOCATION_ELEVATED
from .schemas import LocationAssessment


RISK_LEVEL_INFO: Dict[int, Tuple[str, str]] = {
    1: ("LOW", "green"),
    2: ("MODERATE", "blue"),
    3: ("ELEVATED", "yellow"),
    4: ("HIGH", "orange"),
    5: ("EXTREME", "red"),
}

ELEVATED_LOCATIONS = frozenset({LocationType.ATTIC, LocationType.UPPER_FLOOR})

# Violation codes
NO_DRAIN_PAN_ELEVATED = "NO_DRAIN_PAN_ELEVATED"
UNPROTECTED_CLOSED_LOOP = "UNPROTECTED_CLOSED_LOOP"


def base_location_risk(inputs: UnitInputs) -> int:
    """Damage potential of a leak at this location, before plumbing faults."""
    location = inputs.location
    if location in ELEVATED_LOCATIONS:
        return 4 if inputs.has_drain_pan else 5
    if location == LocationType.MAIN_LIVING:
        return 3
    if location == LocationType.BASEMENT:
        return 3 if inputs.is_finished_area else 2
    if location in (LocationType.GARAGE, LocationType.CRAWLSPACE):
        return 2 if inputs.is_finished_area else 1
    return 1


def classify_location(inputs: UnitInputs) -> LocationAssessment:
    """
    Classify installation risk.

    Args:
        inputs: Any unit record

    Returns:
        LocationAssessment with level 1-5 and violation codes
    """
    level = base_location_risk(inputs)
    violations: List[str] = []

    if inputs.location in ELEVATED_LOCATIONS and not inputs.has_drain_pan:
        violations.append(NO_DRAIN_PAN_ELEVATED)

    if has_storage_tank(inputs.fuel_type) and needs_expansion_tank(inputs):
        violations.append(UNPROTECTED_CLOSED_LOOP)
        level = max(level, LOCATION_CRITICAL)

    label, color = RISK_LEVEL_INFO[level]
    return LocationAssessment(
        risk_level=level,
        label=label,
        color=color,
        is_critical=level >= LOCATION_CRITICAL,
        is_elevated=level == LOCATION_ELEVATED,
        violations=violations,
    )
