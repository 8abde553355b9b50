"""
Physics Constants - Shared Thresholds and Model Coefficients

Every classification boundary lives here exactly once. The stress curve, the
issue rules and the maintenance scheduler all import from this module so the
same number drives a badge, a due date and a failure-probability input.
"""

from opterra.taxonomy import FuelType, TempSetting, UsageType


# ============================================================================
# PRESSURE - Regime Boundaries (PSI)
# ============================================================================

PSI_DESIGN = 60.0           # At or below = no pressure stress
PSI_PRV_RECOMMENDED = 65.0  # >= this without a PRV: install one
PSI_ELEVATED = 70.0         # >= this = elevated regime
PSI_PRV_FAILED = 75.0       # > this with a PRV present: PRV not regulating
PSI_CODE_MAX = 80.0         # > this = code violation (plumbing code max)
PSI_THERMAL_SPIKE = 140.0   # Typical closed-loop expansion spike
PSI_EXPLOSION = 150.0       # > this = T&P relief territory

# Buffer-zone curve shape
PSI_CURVE_SPAN = 20.0           # PSI per quadratic unit
PSI_BUFFER_STRESS = 0.5         # Stress gained from PSI_DESIGN to PSI_CODE_MAX
PSI_VIOLATION_STRESS = 0.5      # Coefficient of the steeper post-80 quadratic
PSI_EXPLOSION_STRESS = 10.0     # Flat penalty past PSI_EXPLOSION


# ============================================================================
# STRESS - Multipliers
# ============================================================================

MAX_STRESS_CAP = 12.0

TEMP_STRESS = {
    TempSetting.LOW: 0.9,      # Floor; LOW trades stress for a bacterial flag
    TempSetting.NORMAL: 1.0,
    TempSetting.HOT: 1.75,     # Arrhenius-like: corrosion roughly doubles per +20F
}

USAGE_STRESS = {
    UsageType.LIGHT: 0.9,
    UsageType.NORMAL: 1.0,
    UsageType.HEAVY: 1.25,
}

CIRC_PUMP_STRESS = 1.4         # Constant turnover of fresh, oxygenated water
CLOSED_LOOP_STRESS = 1.5       # Thermal expansion with nowhere to go

# Demand sizing
GALLONS_PER_PERSON = {
    UsageType.LIGHT: 10.0,
    UsageType.NORMAL: 12.0,
    UsageType.HEAVY: 15.0,
}
GPM_PER_PERSON = {
    UsageType.LIGHT: 1.0,
    UsageType.NORMAL: 1.25,
    UsageType.HEAVY: 1.5,
}
UNDERSIZING_SLOPE = 0.5        # Stress per unit of demand/capacity overshoot
UNDERSIZING_CEILING = {
    FuelType.GAS: 1.3,
    FuelType.ELECTRIC: 1.5,    # Elements cycle hardest on recovery
    FuelType.HYBRID: 1.6,      # Falls back to resistance mode
    FuelType.TANKLESS_GAS: 1.3,
    FuelType.TANKLESS_ELECTRIC: 1.4,
}


# ============================================================================
# AGING - Weibull Failure Model
# ============================================================================

WEIBULL_ETA = 13.0             # Characteristic life (bio-years) of a 12-year tank
WEIBULL_BETA = 3.2             # Wear-out shape
TANKLESS_WEIBULL_ETA = 20.0
REFERENCE_EXPECTED_LIFE = 12.0
ETA_SCALE_MIN = 0.85
ETA_SCALE_MAX = 1.15

# Warranty length -> expected service life (years), highest match wins
EXPECTED_LIFE_BY_WARRANTY = (
    (15.0, 18.0),
    (12.0, 14.0),
    (9.0, 12.0),
    (0.0, 10.0),
)

MAX_BIO_AGE = 50.0
STATISTICAL_FAIL_CAP = 99.0    # The curve alone never claims certainty
BREACH_FAIL_PROB = 99.9        # Physical evidence: leak or rust
REPLACEMENT_FAIL_PROB = 50.0   # years_left counts down to this point

# Dominant overrides
BIO_AGE_CRITICAL = 20.0
FAIL_PROB_CRITICAL = 50.0
BIO_AGE_WARNING = 12.0

# Fragile tank: old enough that a flush may do more harm than good
LIMIT_AGE_FRAGILE = 10.0
LIMIT_FAILPROB_FRAGILE = 45.0
AGE_ANODE_LIMIT = 8.0          # Past this, a new anode is not worth the labor

# Health score piecewise-linear map: (fail_prob, health_score) breakpoints
HEALTH_CURVE_FAIL_PROB = (0.0, 10.0, 50.0, 100.0)
HEALTH_CURVE_SCORE = (100.0, 80.0, 40.0, 0.0)
# Integer rounding of the score over the steepest segment (0.8 pts per %)
HEALTH_ROUND_TRIP_TOLERANCE = 0.625


# ============================================================================
# TANKLESS - Safe Mode Gates
# ============================================================================

TANKLESS_MAX_SERVICE_AGE = 15.0
ERROR_CODES_CHRONIC = 10
COMPONENT_HEALTH_FAILING = 50.0

SAFE_MODE_DEAD_PROB = 99.9
SAFE_MODE_CHRONIC_PROB = 85.0
SAFE_MODE_END_OF_LIFE_PROB = 85.0
SAFE_MODE_ERROR_PROB = 45.0
SAFE_MODE_COMPONENT_PROB = 45.0
SAFE_MODE_LOCKOUT_PROB = 45.0
SAFE_MODE_RUN_TO_FAILURE_PROB = 40.0
SAFE_MODE_DESCALE_CRITICAL_PROB = 30.0
SAFE_MODE_NEGLECTED_PROB = 25.0
SAFE_MODE_NO_VALVES_PROB = 20.0
SAFE_MODE_DESCALE_DUE_PROB = 15.0
HEALTHY_FAIL_PROB_MIN = 1.0
HEALTHY_FAIL_PROB_MAX = 14.9

# Descale model
HARD_WATER_GPG = 10.0          # > this = hard water for scaling purposes
SCALE_ACCUMULATION = 0.8       # Score points per GPG-year
SCALE_SCORE_MAX = 100.0
SCALE_LOCKOUT = 60.0
SCALE_CRITICAL = 25.0
SCALE_DUE = 10.0
NEVER_DESCALED_DUE_AGE = 2.0
RUN_TO_FAILURE_AGE = 6.0       # Hard water, never descaled: scale has set
DESCALE_INTERVAL_HARD_MONTHS = 12
DESCALE_INTERVAL_MONTHS = 18
FLOW_LOSS_PER_SCALE_POINT = 0.5


# ============================================================================
# CONSUMABLES - Sediment
# ============================================================================

SEDIMENT_FACTOR = {            # lbs per GPG-year
    FuelType.GAS: 0.044,
    FuelType.ELECTRIC: 0.08,   # Lower elements trap more scale
    FuelType.HYBRID: 0.06,
}
USAGE_SEDIMENT = {
    UsageType.LIGHT: 0.8,
    UsageType.NORMAL: 1.0,
    UsageType.HEAVY: 1.3,
}
TEMP_SEDIMENT = {
    TempSetting.LOW: 0.8,
    TempSetting.NORMAL: 1.0,
    TempSetting.HOT: 1.75,     # Calcite solubility drops with temperature
}
FLUSH_EFFICIENCY = 0.5
HARDENED_FLUSH_EFFICIENCY = 0.05

# Bands (lbs). Shared by metrics, issues and scheduler.
SEDIMENT_ADVISORY = 2.0
SEDIMENT_SERVICE = 5.0         # >= service recommended
SEDIMENT_CRITICAL = 10.0
SEDIMENT_LOCKOUT = 15.0        # > lockout: flushing may dislodge a leak


# ============================================================================
# CONSUMABLES - Anode Shield
# ============================================================================

DEFAULT_ANODE_LIFE = 6.0       # Years, when warranty is unknown
DUAL_ANODE_FACTOR = 1.5
SOFTENER_BURN = 2.4            # Sodium-rich water is highly conductive
GALVANIC_BURN = 2.5
CIRC_PUMP_BURN = 1.25
CHLORAMINE_BURN = 1.2

# Bands (years). Shared by metrics, issues and scheduler.
SHIELD_DEPLETED = 0.0          # <= depleted
SHIELD_LOW = 2.0               # < low

ANODE_INSPECT_PERCENT = 50.0
ANODE_REPLACE_PERCENT = 75.0
ANODE_NAKED_PERCENT = 100.0


# ============================================================================
# HYBRID
# ============================================================================

HYBRID_FILTER_PENALTY = {"DIRTY": 15.0, "CLOGGED": 40.0}
HYBRID_ROOM_PENALTY = {"CLOSET_LOUVERED": 10.0, "CLOSET_SEALED": 30.0}
HYBRID_CONDENSATE_PENALTY = 5.0
COMPRESSOR_HEALTH_WARNING = 50.0


# ============================================================================
# LOCATION
# ============================================================================

LOCATION_CRITICAL = 4          # >= this = critical/high-risk location
LOCATION_ELEVATED = 3
