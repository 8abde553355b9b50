"""
Hard-Water Tax - Annual Cost of Untreated Hardness

Costs scale linearly with hardness above the soft-water baseline.
A home with a softener is PROTECTED; the loss it avoids is reported back.
"""

from opterra.physics import OpterraMetrics
from opterra.taxonomy import UnitInputs, is_hybrid, is_tankless, resolve_hardness
from .schemas import HardWaterRecommendation, HardWaterTax


SOFT_WATER_BASELINE_GPG = 3.5
CONSIDER_THRESHOLD_GPG = 7.0
RECOMMEND_THRESHOLD_GPG = 10.0

# USD per year per GPG above baseline
ENERGY_COST_PER_GPG = 9.0
TANKLESS_ENERGY_COST_PER_GPG = 12.0   # Scale on a heat exchanger costs more
APPLIANCE_COST_PER_GPG = 12.0
DETERGENT_COST_PER_GPG = 6.0
PLUMBING_COST_PER_GPG = 4.0

SOFTENER_INSTALL_COST = 2400
SOFTENER_LIFE_YEARS = 15
SOFTENER_SALT_PER_YEAR = 120

MAX_ELEMENT_BURNOUT_RISK = 95


def softener_annual_cost() -> int:
    return round(SOFTENER_INSTALL_COST / SOFTENER_LIFE_YEARS + SOFTENER_SALT_PER_YEAR)


def calculate_hard_water_tax(inputs: UnitInputs, metrics: OpterraMetrics) -> HardWaterTax:
    """
    Price the household cost of hard water.

    Args:
        inputs: Unit record (street hardness, softener)
        metrics: Physics output (sediment, for the hybrid burnout risk)

    Returns:
        HardWaterTax
    """
    hardness = resolve_hardness(inputs)
    street = hardness.street_gpg
    excess = max(0.0, street - SOFT_WATER_BASELINE_GPG)

    energy_rate = TANKLESS_ENERGY_COST_PER_GPG if is_tankless(inputs.fuel_type) else ENERGY_COST_PER_GPG
    energy = round(excess * energy_rate)
    appliance = round(excess * APPLIANCE_COST_PER_GPG)
    detergent = round(excess * DETERGENT_COST_PER_GPG)
    plumbing = round(excess * PLUMBING_COST_PER_GPG)
    total = energy + appliance + detergent + plumbing

    annual_cost = softener_annual_cost()
    net = total - annual_cost
    margin = total - SOFTENER_SALT_PER_YEAR
    payback = round(SOFTENER_INSTALL_COST / margin, 1) if margin > 0 else None

    burnout = None
    if is_hybrid(inputs.fuel_type):
        burnout = min(
            MAX_ELEMENT_BURNOUT_RISK,
            round(hardness.effective_gpg * 3 + metrics.sediment_lbs * 2),
        )

    protected_amount = None
    if inputs.has_softener:
        recommendation = HardWaterRecommendation.PROTECTED
        color = "green"
        protected_amount = total
        reason = f"Your softener prevents about ${total:,} a year in hard-water damage."
    elif street <= CONSIDER_THRESHOLD_GPG:
        recommendation = HardWaterRecommendation.NONE
        color = "green"
        reason = f"{street:.0f} GPG is moderate; a softener would not pay for itself."
    elif net > 0 and street > RECOMMEND_THRESHOLD_GPG:
        recommendation = HardWaterRecommendation.RECOMMEND
        color = "orange"
        reason = (
            f"{street:.0f} GPG water costs about ${total:,} a year; "
            f"a softener saves ${net:,} a year after its own costs."
        )
    else:
        recommendation = HardWaterRecommendation.CONSIDER
        color = "yellow"
        reason = f"{street:.0f} GPG water costs about ${total:,} a year. A softener is worth pricing."

    return HardWaterTax(
        hardness_gpg=street,
        has_softener=inputs.has_softener,
        energy_loss=energy,
        appliance_depreciation=appliance,
        detergent_overspend=detergent,
        plumbing_protection=plumbing,
        total_annual_loss=total,
        element_burnout_risk=burnout,
        softener_annual_cost=annual_cost,
        net_annual_savings=net,
        payback_years=payback,
        recommendation=recommendation,
        reason=reason,
        badge_color=color,
        protected_amount=protected_amount,
    )
