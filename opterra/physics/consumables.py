"""
Consumable Depletion Model - Sediment, Anode Shield, Tankless Scale

Sediment and anode life apply to storage units only. Tankless units track
heat-exchanger scale instead.

Constraints:
- Band boundaries (0, 2, 5, 15) come from constants and are reused verbatim
  by the issue rules and the maintenance scheduler
- Maintenance history is clamped into [0, calendar_age]
- Sediment bands classify the value rounded to one decimal
"""

import math
from typing import Dict, Optional

from opterra.taxonomy import (
    ConnectionType,
    HybridInputs,
    ResolvedHardness,
    SanitizerType,
    TankInputs,
    TanklessInputs,
)
from .constants import (
    ANODE_INSPECT_PERCENT,
    ANODE_NAKED_PERCENT,
    ANODE_REPLACE_PERCENT,
    CHLORAMINE_BURN,
    CIRC_PUMP_BURN,
    DEFAULT_ANODE_LIFE,
    DESCALE_INTERVAL_HARD_MONTHS,
    DESCALE_INTERVAL_MONTHS,
    DUAL_ANODE_FACTOR,
    FLOW_LOSS_PER_SCALE_POINT,
    FLUSH_EFFICIENCY,
    GALVANIC_BURN,
    HARD_WATER_GPG,
    HARDENED_FLUSH_EFFICIENCY,
    HYBRID_CONDENSATE_PENALTY,
    HYBRID_FILTER_PENALTY,
    HYBRID_ROOM_PENALTY,
    NEVER_DESCALED_DUE_AGE,
    RUN_TO_FAILURE_AGE,
    SCALE_ACCUMULATION,
    SCALE_CRITICAL,
    SCALE_DUE,
    SCALE_LOCKOUT,
    SCALE_SCORE_MAX,
    SEDIMENT_ADVISORY,
    SEDIMENT_CRITICAL,
    SEDIMENT_FACTOR,
    SEDIMENT_LOCKOUT,
    SEDIMENT_SERVICE,
    SHIELD_DEPLETED,
    SHIELD_LOW,
    SOFTENER_BURN,
    TEMP_SEDIMENT,
    USAGE_SEDIMENT,
)
from .schemas import (
    AnodeStatus,
    DescaleEstimate,
    DescaleStatus,
    FlushStatus,
    SedimentBand,
    SedimentEstimate,
    ShieldBand,
    ShieldEstimate,
)


def _years_since(event_years_ago: Optional[float], calendar_age: float) -> float:
    """Years since a maintenance event; never-done counts from install."""
    if event_years_ago is None:
        return calendar_age
    return min(max(event_years_ago, 0.0), calendar_age)


# ============================================================================
# Sediment
# ============================================================================

def classify_sediment(sediment_lbs: float) -> SedimentBand:
    """
    Three-band classification used everywhere sediment is surfaced.

    < 5 NORMAL, 5-15 inclusive SERVICE, > 15 LOCKOUT.
    """
    lbs = round(sediment_lbs, 1)
    if lbs > SEDIMENT_LOCKOUT:
        return SedimentBand.LOCKOUT
    if lbs >= SEDIMENT_SERVICE:
        return SedimentBand.SERVICE
    return SedimentBand.NORMAL


def classify_flush_status(sediment_lbs: float) -> FlushStatus:
    """Finer display label inside the three sediment bands."""
    lbs = round(sediment_lbs, 1)
    if lbs > SEDIMENT_LOCKOUT:
        return FlushStatus.LOCKOUT
    if lbs >= SEDIMENT_CRITICAL:
        return FlushStatus.CRITICAL
    if lbs >= SEDIMENT_SERVICE:
        return FlushStatus.DUE
    if lbs >= SEDIMENT_ADVISORY:
        return FlushStatus.ADVISORY
    return FlushStatus.OPTIMAL


def sediment_rate(inputs: TankInputs, hardness: ResolvedHardness) -> float:
    """Pounds of sediment deposited per year at current conditions."""
    return (
        hardness.effective_gpg
        * SEDIMENT_FACTOR[inputs.fuel_type]
        * USAGE_SEDIMENT[inputs.usage_type]
        * TEMP_SEDIMENT[inputs.temp_setting]
    )


def _months_until(threshold: float, current: float, rate: float) -> Optional[int]:
    if current >= threshold:
        return 0
    if rate <= 0:
        return None
    return int(math.ceil((threshold - current) / rate * 12.0))


def estimate_sediment(inputs: TankInputs, hardness: ResolvedHardness) -> SedimentEstimate:
    """
    Sediment load in the tank bottom.

    A flush removes FLUSH_EFFICIENCY of what had built up; deposits already
    past the lockout band have hardened and barely move. Annual maintenance
    without a recorded date implies a flush within the last year.

    Args:
        inputs: Storage unit record
        hardness: Resolved hardness

    Returns:
        SedimentEstimate with band, flush status and months to thresholds
    """
    rate = sediment_rate(inputs, hardness)
    age = inputs.calendar_age

    last_flush = inputs.last_flush_years_ago
    if last_flush is None and inputs.is_annually_maintained:
        last_flush = min(1.0, age)
    since_flush = _years_since(last_flush, age)

    at_flush = rate * (age - since_flush)
    efficiency = HARDENED_FLUSH_EFFICIENCY if at_flush > SEDIMENT_LOCKOUT else FLUSH_EFFICIENCY
    residual = at_flush * (1.0 - efficiency)
    lbs = round(residual + rate * since_flush, 2)

    return SedimentEstimate(
        sediment_lbs=lbs,
        sediment_rate=round(rate, 3),
        band=classify_sediment(lbs),
        flush_status=classify_flush_status(lbs),
        months_to_flush=_months_until(SEDIMENT_SERVICE, lbs, rate),
        months_to_lockout=_months_until(SEDIMENT_LOCKOUT, lbs, rate),
    )


# ============================================================================
# Anode Shield
# ============================================================================

def classify_shield(shield_life: float) -> ShieldBand:
    """<= 0 DEPLETED, < 2 LOW, else OK."""
    if shield_life <= SHIELD_DEPLETED:
        return ShieldBand.DEPLETED
    if shield_life < SHIELD_LOW:
        return ShieldBand.LOW
    return ShieldBand.OK


def classify_anode(depletion_percent: float) -> AnodeStatus:
    if depletion_percent >= ANODE_NAKED_PERCENT:
        return AnodeStatus.NAKED
    if depletion_percent >= ANODE_REPLACE_PERCENT:
        return AnodeStatus.REPLACE
    if depletion_percent >= ANODE_INSPECT_PERCENT:
        return AnodeStatus.INSPECT
    return AnodeStatus.PROTECTED


def anode_burn_factors(inputs: TankInputs, hardness: ResolvedHardness) -> Dict[str, float]:
    """Active consumption multipliers, keyed by cause."""
    factors: Dict[str, float] = {}
    if hardness.softener_active:
        factors["softener"] = SOFTENER_BURN
    if inputs.connection_type == ConnectionType.DIRECT_COPPER:
        factors["galvanic"] = GALVANIC_BURN
    if inputs.has_circ_pump:
        factors["recirculation"] = CIRC_PUMP_BURN
    if inputs.sanitizer_type == SanitizerType.CHLORAMINE:
        factors["chloramine"] = CHLORAMINE_BURN
    return factors


def estimate_shield(inputs: TankInputs, hardness: ResolvedHardness) -> ShieldEstimate:
    """
    Remaining sacrificial anode life.

    Design life follows the warranty class (longer warranties ship thicker
    or dual rods). Burn multipliers shorten it; the result clamps at zero.
    """
    design_life = inputs.warranty_years if inputs.warranty_years > 0 else DEFAULT_ANODE_LIFE
    if inputs.anode_count >= 2:
        design_life *= DUAL_ANODE_FACTOR

    factors = anode_burn_factors(inputs, hardness)
    burn_rate = math.prod(factors.values()) if factors else 1.0
    rod_life = design_life / burn_rate

    on_rod = _years_since(inputs.last_anode_replace_years_ago, inputs.calendar_age)
    shield = max(0.0, rod_life - on_rod)
    depletion = min(100.0, on_rod / rod_life * 100.0)

    return ShieldEstimate(
        shield_life=round(shield, 2),
        band=classify_shield(round(shield, 2)),
        anode_status=classify_anode(depletion),
        depletion_percent=round(depletion, 1),
        burn_rate=round(burn_rate, 3),
        burn_factors=factors,
    )


# ============================================================================
# Tankless Scale
# ============================================================================

def classify_scale(
    scale_score: float,
    effective_gpg: float,
    never_descaled: bool,
    calendar_age: float,
) -> DescaleStatus:
    """Scale-only status, before serviceability is considered."""
    hard = effective_gpg > HARD_WATER_GPG
    if hard and never_descaled and calendar_age > RUN_TO_FAILURE_AGE:
        return DescaleStatus.RUN_TO_FAILURE
    if scale_score > SCALE_LOCKOUT:
        return DescaleStatus.LOCKOUT
    if scale_score > SCALE_CRITICAL:
        return DescaleStatus.CRITICAL
    if hard and never_descaled and calendar_age > NEVER_DESCALED_DUE_AGE:
        return DescaleStatus.DUE
    if scale_score > SCALE_DUE:
        return DescaleStatus.DUE
    return DescaleStatus.OPTIMAL


def estimate_descale(inputs: TanklessInputs, hardness: ResolvedHardness) -> DescaleEstimate:
    """
    Heat exchanger scale state.

    An observed scale_buildup overrides the hardness x years estimate.
    Without isolation valves a descale pump cannot be connected, so any
    serviceable status becomes IMPOSSIBLE; lockout and run-to-failure are
    terminal either way.
    """
    never = inputs.last_descale_years_ago is None
    since = _years_since(inputs.last_descale_years_ago, inputs.calendar_age)

    if inputs.scale_buildup is not None:
        score = inputs.scale_buildup
    else:
        score = min(SCALE_SCORE_MAX, hardness.effective_gpg * since * SCALE_ACCUMULATION)

    scale_status = classify_scale(score, hardness.effective_gpg, never, inputs.calendar_age)
    status = scale_status
    terminal = (DescaleStatus.LOCKOUT, DescaleStatus.RUN_TO_FAILURE)
    if not inputs.has_isolation_valves and scale_status not in terminal:
        status = DescaleStatus.IMPOSSIBLE

    interval = DESCALE_INTERVAL_HARD_MONTHS if hardness.effective_gpg > HARD_WATER_GPG else DESCALE_INTERVAL_MONTHS
    months_to_due = int(round(interval - since * 12.0))
    if scale_status != DescaleStatus.OPTIMAL:
        months_to_due = min(months_to_due, 0)

    if inputs.flow_rate_gpm is not None and inputs.rated_flow_gpm > 0:
        flow_loss = (inputs.rated_flow_gpm - inputs.flow_rate_gpm) / inputs.rated_flow_gpm * 100.0
    else:
        flow_loss = score * FLOW_LOSS_PER_SCALE_POINT
    flow_loss = min(100.0, max(0.0, flow_loss))

    return DescaleEstimate(
        status=status,
        scale_status=scale_status,
        never_descaled=never,
        scale_score=round(score, 1),
        years_since_descale=round(since, 2),
        months_to_due=months_to_due,
        flow_degradation=round(flow_loss, 1),
    )


# ============================================================================
# Hybrid Efficiency
# ============================================================================

def hybrid_efficiency(inputs: HybridInputs) -> float:
    """Heat pump efficiency (%) after airflow, compressor and drainage losses."""
    efficiency = 100.0
    efficiency -= HYBRID_FILTER_PENALTY.get(inputs.air_filter_status.value, 0.0)
    efficiency -= HYBRID_ROOM_PENALTY.get(inputs.room_volume_type.value, 0.0)
    efficiency *= inputs.compressor_health / 100.0
    if not inputs.is_condensate_clear:
        efficiency -= HYBRID_CONDENSATE_PENALTY
    return round(min(100.0, max(0.0, efficiency)), 1)
