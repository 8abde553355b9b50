"""
Aging & Failure Model - Biological Age, Weibull Failure Curve, Safe Mode

Calendar age times the stress multiplier gives a biological age; a Weibull
CDF over biological age gives the failure probability.

Constraints:
- bio_age >= calendar_age (aging rate floor of 1.0)
- fail_prob is capped at 99.0 unless there is physical evidence (99.9)
- health_score is a piecewise-linear, invertible map of fail_prob
- Tankless units pass through Safe Mode gates before the curve is consulted
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from opterra.taxonomy import (
    FlameRodStatus,
    FuelType,
    TanklessInputs,
    TanklessVentStatus,
    is_tank_body_breach,
)
from .constants import (
    COMPONENT_HEALTH_FAILING,
    ERROR_CODES_CHRONIC,
    ETA_SCALE_MAX,
    ETA_SCALE_MIN,
    EXPECTED_LIFE_BY_WARRANTY,
    HEALTH_CURVE_FAIL_PROB,
    HEALTH_CURVE_SCORE,
    HEALTHY_FAIL_PROB_MAX,
    HEALTHY_FAIL_PROB_MIN,
    MAX_BIO_AGE,
    REFERENCE_EXPECTED_LIFE,
    REPLACEMENT_FAIL_PROB,
    SAFE_MODE_CHRONIC_PROB,
    SAFE_MODE_COMPONENT_PROB,
    SAFE_MODE_DEAD_PROB,
    SAFE_MODE_DESCALE_CRITICAL_PROB,
    SAFE_MODE_DESCALE_DUE_PROB,
    SAFE_MODE_END_OF_LIFE_PROB,
    SAFE_MODE_ERROR_PROB,
    SAFE_MODE_LOCKOUT_PROB,
    SAFE_MODE_NEGLECTED_PROB,
    SAFE_MODE_NO_VALVES_PROB,
    SAFE_MODE_RUN_TO_FAILURE_PROB,
    STATISTICAL_FAIL_CAP,
    TANKLESS_MAX_SERVICE_AGE,
    TANKLESS_WEIBULL_ETA,
    WEIBULL_BETA,
    WEIBULL_ETA,
)
from .schemas import DescaleEstimate, DescaleStatus, ProjectedHealth, SafeModeGate

DEFAULT_TREND_MONTHS = (0, 6, 12, 24, 36, 60)


# ============================================================================
# Weibull Curve
# ============================================================================

def expected_life_for_warranty(warranty_years: float) -> float:
    """Service life implied by the manufacturer's warranty class."""
    for min_warranty, life in EXPECTED_LIFE_BY_WARRANTY:
        if warranty_years >= min_warranty:
            return life
    return EXPECTED_LIFE_BY_WARRANTY[-1][1]


def weibull_eta(warranty_years: float) -> float:
    """Characteristic life (bio-years), scaled by warranty class within bounds."""
    scale = expected_life_for_warranty(warranty_years) / REFERENCE_EXPECTED_LIFE
    scale = min(ETA_SCALE_MAX, max(ETA_SCALE_MIN, scale))
    return WEIBULL_ETA * scale


def failure_probability(bio_age: float, eta: float = WEIBULL_ETA) -> float:
    """
    Weibull CDF of biological age, in percent.

    Args:
        bio_age: Stress-adjusted age in years
        eta: Characteristic life

    Returns:
        Failure probability [0, STATISTICAL_FAIL_CAP]
    """
    if bio_age <= 0:
        return 0.0
    prob = 100.0 * (1.0 - math.exp(-((bio_age / eta) ** WEIBULL_BETA)))
    return min(STATISTICAL_FAIL_CAP, prob)


def bio_age_for_fail_prob(fail_prob: float, eta: float = WEIBULL_ETA) -> float:
    """Inverse of failure_probability on the open interval (0, 100)."""
    fraction = min(max(fail_prob, 0.0), 99.999) / 100.0
    return eta * (-math.log(1.0 - fraction)) ** (1.0 / WEIBULL_BETA)


def calculate_bio_age(calendar_age: float, aging_rate: float) -> float:
    return min(MAX_BIO_AGE, calendar_age * max(1.0, aging_rate))


def years_remaining(bio_age: float, aging_rate: float, eta: float) -> float:
    """
    Calendar years until the curve reaches REPLACEMENT_FAIL_PROB.

    Negative when the unit is already past that point.
    """
    target = bio_age_for_fail_prob(REPLACEMENT_FAIL_PROB, eta)
    return (target - bio_age) / max(1.0, aging_rate)


# ============================================================================
# Health Score
# ============================================================================

def health_score(fail_prob: float) -> int:
    """
    Display score [0, 100], 100 = new.

    Piecewise-linear: 0-10% maps to 100-80, 10-50% to 80-40, 50-100% to 40-0.
    """
    clamped = min(100.0, max(0.0, fail_prob))
    return int(round(float(np.interp(clamped, HEALTH_CURVE_FAIL_PROB, HEALTH_CURVE_SCORE))))


def health_score_to_fail_prob(score: float) -> float:
    """Inverse of health_score, exact at integer scores up to rounding."""
    clamped = min(100.0, max(0.0, score))
    return float(np.interp(clamped, HEALTH_CURVE_SCORE[::-1], HEALTH_CURVE_FAIL_PROB[::-1]))


# ============================================================================
# Projection
# ============================================================================

def project_future_health(
    bio_age: float,
    aging_rate: float,
    months_ahead: int,
    eta: float = WEIBULL_ETA,
) -> ProjectedHealth:
    """
    Extrapolate biological age and failure probability forward.

    Args:
        bio_age: Current biological age
        aging_rate: Bio-years per calendar year
        months_ahead: Horizon in months (>= 0)
        eta: Characteristic life of the unit

    Returns:
        ProjectedHealth at the horizon
    """
    months = max(0, int(months_ahead))
    future_bio = min(MAX_BIO_AGE, bio_age + max(1.0, aging_rate) * months / 12.0)
    prob = failure_probability(future_bio, eta)
    return ProjectedHealth(
        months_ahead=months,
        bio_age=round(future_bio, 2),
        fail_prob=round(prob, 1),
        health_score=health_score(round(prob, 1)),
    )


def project_trend(
    bio_age: float,
    aging_rate: float,
    eta: float = WEIBULL_ETA,
    months: Sequence[int] = DEFAULT_TREND_MONTHS,
) -> List[ProjectedHealth]:
    """
    Vectorized projection over a month series for trend charts.

    Produces the same values as project_future_health at each horizon.
    """
    horizon = np.maximum(np.asarray(months, dtype=np.float64), 0.0)
    future_bio = np.minimum(MAX_BIO_AGE, bio_age + max(1.0, aging_rate) * horizon / 12.0)
    probs = 100.0 * (1.0 - np.exp(-np.power(future_bio / eta, WEIBULL_BETA)))
    probs = np.minimum(STATISTICAL_FAIL_CAP, probs)
    probs = np.round(probs, 1)
    scores = np.round(np.interp(probs, HEALTH_CURVE_FAIL_PROB, HEALTH_CURVE_SCORE))

    return [
        ProjectedHealth(
            months_ahead=int(m),
            bio_age=round(float(b), 2),
            fail_prob=float(p),
            health_score=int(s),
        )
        for m, b, p, s in zip(horizon, future_bio, probs, scores)
    ]


# ============================================================================
# Tankless Safe Mode
# ============================================================================

@dataclass
class SafeModeResult:
    """Outcome of the Safe Mode gate cascade."""
    gate: SafeModeGate
    fail_prob: float
    reason: str


_DIRTY_PROBABILITY = {
    DescaleStatus.RUN_TO_FAILURE: SAFE_MODE_RUN_TO_FAILURE_PROB,
    DescaleStatus.LOCKOUT: SAFE_MODE_LOCKOUT_PROB,
    DescaleStatus.CRITICAL: SAFE_MODE_DESCALE_CRITICAL_PROB,
    DescaleStatus.DUE: SAFE_MODE_DESCALE_DUE_PROB,
}

_DIRTY_REASONS = {
    DescaleStatus.RUN_TO_FAILURE: "Run to Failure",
    DescaleStatus.LOCKOUT: "Scale Lockout",
    DescaleStatus.CRITICAL: "Descale Critical",
    DescaleStatus.DUE: "Descale Overdue",
    DescaleStatus.IMPOSSIBLE: "Descale Impossible",
}


def _component_failing(inputs: TanklessInputs) -> Optional[str]:
    if inputs.fuel_type == FuelType.TANKLESS_GAS:
        if inputs.flame_rod_status == FlameRodStatus.FAILING:
            return "Flame Sensor Failing"
        if inputs.igniter_health < COMPONENT_HEALTH_FAILING:
            return "Igniter Failing"
    elif inputs.element_health < COMPONENT_HEALTH_FAILING:
        return "Heating Element Failing"
    return None


def evaluate_safe_mode(
    inputs: TanklessInputs,
    descale: DescaleEstimate,
    bio_age: float,
) -> SafeModeResult:
    """
    Run the tankless gate cascade: DEAD -> DYING -> DIRTY -> HEALTHY.

    The first gate that matches decides the failure probability; only a
    HEALTHY unit is scored on the continuous curve.

    Args:
        inputs: Tankless record
        descale: Scale state from the consumable model
        bio_age: Stress-adjusted age

    Returns:
        SafeModeResult
    """
    # DEAD - physical failure
    if is_tank_body_breach(inputs):
        return SafeModeResult(SafeModeGate.DEAD, SAFE_MODE_DEAD_PROB, "Heat Exchanger Breach")
    if inputs.tankless_vent_status == TanklessVentStatus.BLOCKED:
        return SafeModeResult(SafeModeGate.DEAD, SAFE_MODE_DEAD_PROB, "Vent Obstruction")

    # DYING - electronics, age, ignition
    if inputs.error_code_count > ERROR_CODES_CHRONIC:
        return SafeModeResult(SafeModeGate.DYING, SAFE_MODE_CHRONIC_PROB, "Chronic System Errors")
    if inputs.calendar_age > TANKLESS_MAX_SERVICE_AGE:
        return SafeModeResult(SafeModeGate.DYING, SAFE_MODE_END_OF_LIFE_PROB, "End of Service Life")
    if inputs.error_code_count > 0:
        return SafeModeResult(SafeModeGate.DYING, SAFE_MODE_ERROR_PROB, "Active Error Codes")
    component = _component_failing(inputs)
    if component:
        return SafeModeResult(SafeModeGate.DYING, SAFE_MODE_COMPONENT_PROB, component)

    # DIRTY - scale and serviceability
    if descale.status != DescaleStatus.OPTIMAL:
        prob = _DIRTY_PROBABILITY.get(descale.scale_status, 0.0)
        if descale.scale_status == DescaleStatus.DUE and descale.never_descaled:
            prob = SAFE_MODE_NEGLECTED_PROB
        if descale.status == DescaleStatus.IMPOSSIBLE:
            prob = max(prob, SAFE_MODE_NO_VALVES_PROB)
        return SafeModeResult(SafeModeGate.DIRTY, prob, _DIRTY_REASONS[descale.status])

    # HEALTHY - continuous curve, kept below the DIRTY band
    prob = failure_probability(bio_age, TANKLESS_WEIBULL_ETA)
    prob = min(HEALTHY_FAIL_PROB_MAX, max(HEALTHY_FAIL_PROB_MIN, prob))
    return SafeModeResult(SafeModeGate.HEALTHY, prob, "Normal Wear")
