"""
Stress Factor Calculator - Raw Conditions to Aging Multipliers

Each adverse condition maps to one independent multiplier. The composite is
a product, so it is non-decreasing in every factor and exactly 1.0 under
textbook-normal conditions.

Constraints:
- Pressure regime boundaries are shared with the issue rules
- Every factor is >= its neutral value except temp/usage (floor 0.9)
- Total is capped at MAX_STRESS_CAP
"""

from typing import Dict

from opterra.taxonomy import (
    UnitInputs,
    has_storage_tank,
    is_tankless,
    needs_expansion_tank,
)
from .constants import (
    CIRC_PUMP_STRESS,
    CLOSED_LOOP_STRESS,
    GALLONS_PER_PERSON,
    GPM_PER_PERSON,
    MAX_STRESS_CAP,
    PSI_CODE_MAX,
    PSI_CURVE_SPAN,
    PSI_BUFFER_STRESS,
    PSI_DESIGN,
    PSI_ELEVATED,
    PSI_EXPLOSION,
    PSI_EXPLOSION_STRESS,
    PSI_VIOLATION_STRESS,
    TEMP_STRESS,
    UNDERSIZING_CEILING,
    UNDERSIZING_SLOPE,
    USAGE_STRESS,
)
from .schemas import PressureRegime, StressFactors


# Stress factor -> label used when it dominates
STRESSOR_LABELS: Dict[str, str] = {
    "pressure": "High Pressure",
    "loop": "Thermal Expansion",
    "temp": "High Temperature",
    "circ": "Recirculation Pump",
    "usage_intensity": "Heavy Usage",
    "undersizing": "Undersized Unit",
}
NORMAL_WEAR = "Normal Wear"


def pressure_regime(psi: float) -> PressureRegime:
    """
    Classify house pressure. The >150 branch is checked before >80.

    Args:
        psi: Static house pressure

    Returns:
        PressureRegime
    """
    if psi > PSI_EXPLOSION:
        return PressureRegime.EXPLOSION
    if psi > PSI_CODE_MAX:
        return PressureRegime.VIOLATION
    if psi >= PSI_ELEVATED:
        return PressureRegime.ELEVATED
    return PressureRegime.NOMINAL


def pressure_stress(psi: float) -> float:
    """
    Buffer-zone pressure curve.

    1.0 up to 60 PSI, a gentle quadratic to 1.5 at 80 PSI, a steeper
    quadratic through the violation regime, then a flat jump past 150 PSI.
    """
    regime = pressure_regime(psi)
    if regime == PressureRegime.EXPLOSION:
        return PSI_EXPLOSION_STRESS
    if psi <= PSI_DESIGN:
        return 1.0
    if psi <= PSI_CODE_MAX:
        return 1.0 + PSI_BUFFER_STRESS * ((psi - PSI_DESIGN) / PSI_CURVE_SPAN) ** 2
    base = 1.0 + PSI_BUFFER_STRESS
    return base + PSI_VIOLATION_STRESS * ((psi - PSI_CODE_MAX) / PSI_CURVE_SPAN) ** 2


def undersizing_stress(demand: float, capacity: float, ceiling: float) -> float:
    """Penalty for a unit that cycles harder than its size allows."""
    if capacity <= 0 or demand <= capacity:
        return 1.0
    ratio = demand / capacity
    return min(ceiling, 1.0 + UNDERSIZING_SLOPE * (ratio - 1.0))


def _demand_and_capacity(inputs: UnitInputs) -> tuple[float, float]:
    if is_tankless(inputs.fuel_type):
        return inputs.people_count * GPM_PER_PERSON[inputs.usage_type], inputs.rated_flow_gpm
    return inputs.people_count * GALLONS_PER_PERSON[inputs.usage_type], inputs.tank_capacity


def _has_circulation(inputs: UnitInputs) -> bool:
    if is_tankless(inputs.fuel_type):
        return inputs.has_circ_pump or inputs.has_recirculation_loop
    return inputs.has_circ_pump


def calculate_stress_factors(inputs: UnitInputs, relieve_pressure: bool = False) -> StressFactors:
    """
    Compute all stress multipliers for a unit.

    Args:
        inputs: Any unit record
        relieve_pressure: Model a PRV + expansion tank install (pressure and
            loop stress neutral). Used for the optimized-life projection.

    Returns:
        StressFactors with the composite total
    """
    pressure = 1.0 if relieve_pressure else pressure_stress(inputs.house_psi)

    loop = 1.0
    if not relieve_pressure and has_storage_tank(inputs.fuel_type) and needs_expansion_tank(inputs):
        loop = CLOSED_LOOP_STRESS

    temp = TEMP_STRESS[inputs.temp_setting]
    usage = USAGE_STRESS[inputs.usage_type]
    circ = CIRC_PUMP_STRESS if _has_circulation(inputs) else 1.0

    demand, capacity = _demand_and_capacity(inputs)
    undersizing = undersizing_stress(demand, capacity, UNDERSIZING_CEILING[inputs.fuel_type])

    mechanical = pressure * loop * undersizing
    chemical = temp * usage
    total = min(MAX_STRESS_CAP, mechanical * chemical * circ)

    return StressFactors(
        pressure=round(pressure, 3),
        temp=temp,
        circ=circ,
        loop=loop,
        usage_intensity=usage,
        undersizing=round(undersizing, 3),
        mechanical=round(mechanical, 3),
        chemical=round(chemical, 3),
        total=round(total, 3),
    )


def primary_stressor(stress: StressFactors) -> str:
    """Label of the largest adverse factor, or NORMAL_WEAR when none exceed 1.0."""
    worst_name, worst_value = None, 1.0
    for name in STRESSOR_LABELS:
        value = getattr(stress, name)
        if value > worst_value:
            worst_name, worst_value = name, value
    return STRESSOR_LABELS[worst_name] if worst_name else NORMAL_WEAR
