"""
Tiered Pricing - Equipment Classes and Bundled Replacement Quotes

Each tier bundles the open infrastructure issues of the categories it
includes: violations in every tier, infrastructure from Standard up,
optimizations from Professional up.
"""

from typing import Dict, FrozenSet, List, Tuple

from opterra.rules import (
    InfrastructureCategory,
    InfrastructureIssue,
    calculate_issue_costs,
)
from opterra.taxonomy import (
    FuelType,
    UnitInputs,
    VentingScenario,
    VentType,
    is_tankless,
)
from .schemas import QualityTier, TierProfile, TierQuote


# ============================================================================
# TIER TABLES
# ============================================================================

# tier -> (label, warranty, expected life, {fuel: base cost}, features)
_TANK_TIERS = {
    QualityTier.BUILDER: (
        "Builder Grade", 6, 10,
        {FuelType.GAS: 1400, FuelType.ELECTRIC: 1200, FuelType.HYBRID: 2800},
        ["Basic glass-lined tank", "Single anode rod", "Standard thermostat"],
    ),
    QualityTier.STANDARD: (
        "Standard", 9, 12,
        {FuelType.GAS: 1900, FuelType.ELECTRIC: 1600, FuelType.HYBRID: 3400},
        ["Premium glass lining", "Larger anode rod", "Self-cleaning dip tube"],
    ),
    QualityTier.PROFESSIONAL: (
        "Professional", 12, 14,
        {FuelType.GAS: 2600, FuelType.ELECTRIC: 2200, FuelType.HYBRID: 4200},
        ["Dual anode rods", "High-recovery burner", "Brass drain valve"],
    ),
    QualityTier.PREMIUM: (
        "Premium / Lifetime", 15, 18,
        {FuelType.GAS: 3500, FuelType.ELECTRIC: 3000, FuelType.HYBRID: 5200},
        ["Powered anode", "WiFi monitoring", "Leak detection"],
    ),
}

_TANKLESS_TIERS = {
    QualityTier.BUILDER: (
        "Economy Tankless", 5, 12,
        {FuelType.TANKLESS_GAS: 2400, FuelType.TANKLESS_ELECTRIC: 1800},
        ["Basic heat exchanger", "Standard ignition", "Manual controls"],
    ),
    QualityTier.STANDARD: (
        "Standard Tankless", 10, 15,
        {FuelType.TANKLESS_GAS: 3200, FuelType.TANKLESS_ELECTRIC: 2400},
        ["Copper heat exchanger", "Electronic ignition", "Digital display"],
    ),
    QualityTier.PROFESSIONAL: (
        "Professional Tankless", 12, 18,
        {FuelType.TANKLESS_GAS: 4200, FuelType.TANKLESS_ELECTRIC: 3200},
        ["Premium copper HX", "Built-in recirculation", "Error diagnostics"],
    ),
    QualityTier.PREMIUM: (
        "Premium Tankless", 15, 20,
        {FuelType.TANKLESS_GAS: 5500, FuelType.TANKLESS_ELECTRIC: 4200},
        ["Condensing technology", "Smart home integration", "Leak detection"],
    ),
}

TIER_ORDER: Tuple[QualityTier, ...] = (
    QualityTier.BUILDER,
    QualityTier.STANDARD,
    QualityTier.PROFESSIONAL,
    QualityTier.PREMIUM,
)

VENT_COST_ADDERS: Dict[VentType, int] = {
    VentType.ATMOSPHERIC: 0,
    VentType.POWER_VENT: 800,
    VentType.DIRECT_VENT: 600,
}
ORPHANED_FLUE_ADDER = 2000     # Chimney liner

QUOTE_BAND_LOW = 0.9
QUOTE_BAND_HIGH = 1.1

TIER_INCLUDED_CATEGORIES: Dict[QualityTier, FrozenSet[InfrastructureCategory]] = {
    QualityTier.BUILDER: frozenset({InfrastructureCategory.VIOLATION}),
    QualityTier.STANDARD: frozenset({
        InfrastructureCategory.VIOLATION,
        InfrastructureCategory.INFRASTRUCTURE,
    }),
    QualityTier.PROFESSIONAL: frozenset(InfrastructureCategory),
    QualityTier.PREMIUM: frozenset(InfrastructureCategory),
}


# ============================================================================
# Profiles
# ============================================================================

def tier_profiles(fuel_type: FuelType) -> List[TierProfile]:
    """All four tiers priced for a fuel type, cheapest first."""
    table = _TANKLESS_TIERS if is_tankless(fuel_type) else _TANK_TIERS
    profiles = []
    for tier in TIER_ORDER:
        label, warranty, life, costs, features = table[tier]
        profiles.append(TierProfile(
            tier=tier,
            label=label,
            warranty_years=warranty,
            expected_life=life,
            base_cost=costs[fuel_type],
            features=list(features),
        ))
    return profiles


def get_tier_profile(fuel_type: FuelType, tier: QualityTier) -> TierProfile:
    return tier_profiles(fuel_type)[TIER_ORDER.index(tier)]


def current_tier(inputs: UnitInputs) -> TierProfile:
    """Highest tier whose warranty the installed unit meets; Builder otherwise."""
    profiles = tier_profiles(inputs.fuel_type)
    match = profiles[0]
    for profile in profiles:
        if profile.warranty_years <= inputs.warranty_years:
            match = profile
    return match


def upgrade_tier(inputs: UnitInputs) -> TierProfile:
    """Next tier up from the current one; Premium stays Premium."""
    index = TIER_ORDER.index(current_tier(inputs).tier)
    return tier_profiles(inputs.fuel_type)[min(index + 1, len(TIER_ORDER) - 1)]


# ============================================================================
# Quotes
# ============================================================================

def installation_adders(inputs: UnitInputs) -> int:
    """Venting work on top of the unit price. Only gas tanks vent through a flue."""
    if inputs.fuel_type != FuelType.GAS:
        return 0
    adders = VENT_COST_ADDERS[inputs.vent_type]
    if inputs.venting_scenario == VentingScenario.ORPHANED_FLUE:
        adders += ORPHANED_FLUE_ADDER
    return adders


def like_for_like_cost(inputs: UnitInputs) -> int:
    return current_tier(inputs).base_cost + installation_adders(inputs)


def bundled_issues(
    tier: QualityTier,
    issues: List[InfrastructureIssue],
) -> List[InfrastructureIssue]:
    included = TIER_INCLUDED_CATEGORIES[tier]
    return [issue for issue in issues if issue.category in included]


def quote_tier(
    inputs: UnitInputs,
    profile: TierProfile,
    issues: List[InfrastructureIssue],
) -> TierQuote:
    """
    Price one tier for this installation.

    Args:
        inputs: Unit being replaced
        profile: Tier to quote
        issues: Open infrastructure issues

    Returns:
        TierQuote with unit band, bundled fixes and totals
    """
    unit_cost = profile.base_cost + installation_adders(inputs)
    unit_low = round(unit_cost * QUOTE_BAND_LOW)
    unit_high = round(unit_cost * QUOTE_BAND_HIGH)

    bundle = bundled_issues(profile.tier, issues)
    bundle_costs = calculate_issue_costs(bundle)
    total_low = unit_low + bundle_costs["low"]
    total_high = unit_high + bundle_costs["high"]

    return TierQuote(
        profile=profile,
        unit_cost_low=unit_low,
        unit_cost_high=unit_high,
        bundled_issues=bundle,
        bundle_cost_low=bundle_costs["low"],
        bundle_cost_high=bundle_costs["high"],
        total_low=total_low,
        total_high=total_high,
        total_median=(total_low + total_high) // 2,
    )


def quote_all_tiers(inputs: UnitInputs, issues: List[InfrastructureIssue]) -> List[TierQuote]:
    return [quote_tier(inputs, profile, issues) for profile in tier_profiles(inputs.fuel_type)]
