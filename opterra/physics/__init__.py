"""
Physics Module - Stress, Aging, Consumables and Location Risk

Public API:
- calculate_health: Full metrics for one unit
- calculate_stress_factors / pressure_regime: Stress multipliers
- failure_probability / health_score / health_score_to_fail_prob: Aging curve
- project_future_health / project_trend: Forward projection
- classify_sediment / classify_shield: Shared consumable bands
- classify_location: Install risk level 1-5
"""

from .aging import (
    SafeModeResult,
    bio_age_for_fail_prob,
    calculate_bio_age,
    evaluate_safe_mode,
    expected_life_for_warranty,
    failure_probability,
    health_score,
    health_score_to_fail_prob,
    project_future_health,
    project_trend,
    weibull_eta,
    years_remaining,
)
from .consumables import (
    classify_anode,
    classify_flush_status,
    classify_scale,
    classify_sediment,
    classify_shield,
    estimate_descale,
    estimate_sediment,
    estimate_shield,
    hybrid_efficiency,
)
from .health import calculate_health
from .location import classify_location
from .schemas import (
    AnodeStatus,
    DescaleEstimate,
    DescaleStatus,
    FlushStatus,
    LocationAssessment,
    OpterraMetrics,
    PressureRegime,
    ProjectedHealth,
    SafeModeGate,
    SedimentBand,
    SedimentEstimate,
    ShieldBand,
    ShieldEstimate,
    StressFactors,
)
from .stress import (
    calculate_stress_factors,
    pressure_regime,
    pressure_stress,
    primary_stressor,
)

__all__ = [
    "SafeModeResult",
    "bio_age_for_fail_prob",
    "calculate_bio_age",
    "evaluate_safe_mode",
    "expected_life_for_warranty",
    "failure_probability",
    "health_score",
    "health_score_to_fail_prob",
    "project_future_health",
    "project_trend",
    "weibull_eta",
    "years_remaining",
    "classify_anode",
    "classify_flush_status",
    "classify_scale",
    "classify_sediment",
    "classify_shield",
    "estimate_descale",
    "estimate_sediment",
    "estimate_shield",
    "hybrid_efficiency",
    "calculate_health",
    "classify_location",
    "AnodeStatus",
    "DescaleEstimate",
    "DescaleStatus",
    "FlushStatus",
    "LocationAssessment",
    "OpterraMetrics",
    "PressureRegime",
    "ProjectedHealth",
    "SafeModeGate",
    "SedimentBand",
    "SedimentEstimate",
    "ShieldBand",
    "ShieldEstimate",
    "StressFactors",
    "calculate_stress_factors",
    "pressure_regime",
    "pressure_stress",
    "primary_stressor",
]
