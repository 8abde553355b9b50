"""
Health Calculator - Orchestrates the Physics Layer for One Unit

inputs -> hardness -> stress -> bio age -> consumables -> fail prob -> metrics

Pure deterministic logic. Same input = Same output.
"""

import logging

from opterra.taxonomy import (
    TempSetting,
    UnitInputs,
    has_storage_tank,
    is_hybrid,
    is_tank_body_breach,
    is_tankless,
    needs_expansion_tank,
    resolve_hardness,
)
from .aging import (
    calculate_bio_age,
    evaluate_safe_mode,
    failure_probability,
    health_score,
    weibull_eta,
    years_remaining,
)
from .consumables import (
    estimate_descale,
    estimate_sediment,
    estimate_shield,
    hybrid_efficiency,
)
from .constants import (
    BREACH_FAIL_PROB,
    REPLACEMENT_FAIL_PROB,
    TANKLESS_WEIBULL_ETA,
)
from .location import classify_location
from .schemas import OpterraMetrics
from .stress import calculate_stress_factors, pressure_regime, primary_stressor


logger = logging.getLogger(__name__)


def calculate_health(inputs: UnitInputs) -> OpterraMetrics:
    """
    Compute every physics metric for a unit.

    Args:
        inputs: Validated record of any unit family

    Returns:
        OpterraMetrics
    """
    hardness = resolve_hardness(inputs)
    stress = calculate_stress_factors(inputs)
    relieved = calculate_stress_factors(inputs, relieve_pressure=True)
    aging_rate = max(1.0, stress.total)
    optimized_rate = max(1.0, relieved.total)
    bio_age = calculate_bio_age(inputs.calendar_age, aging_rate)
    location = classify_location(inputs)

    fields = {}

    if is_tankless(inputs.fuel_type):
        eta = TANKLESS_WEIBULL_ETA
        descale = estimate_descale(inputs, hardness)
        safe_mode = evaluate_safe_mode(inputs, descale, bio_age)
        fail_prob = safe_mode.fail_prob
        logger.debug(
            f"[SafeMode] {inputs.fuel_type.value} gate={safe_mode.gate.value} "
            f"fail_prob={fail_prob:.1f} ({safe_mode.reason})"
        )
        fields.update(
            safe_mode_gate=safe_mode.gate,
            safe_mode_reason=safe_mode.reason,
            descale_status=descale.status,
            scale_buildup_score=descale.scale_score,
            months_to_descale=descale.months_to_due,
            flow_degradation=descale.flow_degradation,
        )
    else:
        eta = weibull_eta(inputs.warranty_years)
        fail_prob = failure_probability(bio_age, eta)
        if inputs.visual_rust or is_tank_body_breach(inputs):
            fail_prob = BREACH_FAIL_PROB

        sediment = estimate_sediment(inputs, hardness)
        shield = estimate_shield(inputs, hardness)
        fields.update(
            sediment_lbs=sediment.sediment_lbs,
            sediment_rate=sediment.sediment_rate,
            sediment_band=sediment.band,
            flush_status=sediment.flush_status,
            months_to_flush=sediment.months_to_flush,
            months_to_lockout=sediment.months_to_lockout,
            shield_life=shield.shield_life,
            shield_band=shield.band,
            anode_status=shield.anode_status,
            anode_depletion_percent=shield.depletion_percent,
            anode_burn_rate=shield.burn_rate,
            anode_burn_factors=shield.burn_factors,
        )
        if is_hybrid(inputs.fuel_type):
            fields["hybrid_efficiency"] = hybrid_efficiency(inputs)

    fail_prob = round(fail_prob, 1)
    years_left = years_remaining(bio_age, aging_rate, eta)
    years_left_optimized = years_remaining(bio_age, optimized_rate, eta)
    if fail_prob >= REPLACEMENT_FAIL_PROB:
        # Gate or physical evidence already puts the unit past replacement
        years_left = min(years_left, 0.0)
        years_left_optimized = years_left

    return OpterraMetrics(
        bio_age=round(bio_age, 2),
        fail_prob=fail_prob,
        health_score=health_score(fail_prob),
        years_left_current=round(years_left, 1),
        years_left_optimized=round(years_left_optimized, 1),
        life_extension=round(max(0.0, years_left_optimized - years_left), 1),
        aging_rate=round(aging_rate, 3),
        optimized_rate=round(optimized_rate, 3),
        weibull_eta=round(eta, 3),
        effective_psi=inputs.house_psi,
        pressure_regime=pressure_regime(inputs.house_psi),
        is_transient_pressure=has_storage_tank(inputs.fuel_type) and needs_expansion_tank(inputs),
        effective_hardness_gpg=hardness.effective_gpg,
        street_hardness_gpg=hardness.street_gpg,
        stress_factors=stress,
        primary_stressor=primary_stressor(stress),
        risk_level=location.risk_level,
        bacterial_growth_warning=(
            has_storage_tank(inputs.fuel_type) and inputs.temp_setting == TempSetting.LOW
        ),
        **fields,
    )
