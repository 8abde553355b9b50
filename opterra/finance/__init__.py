"""
Finance Module - Replacement Budget, Tiered Quotes and Hard-Water Tax

Public API:
- calculate_financial_forecast: Target date, budget urgency, tier quotes
- calculate_hard_water_tax: Annual hardness cost vs. softener cost
- tier_profiles / current_tier / quote_tier: Pricing tiers
"""

from .forecast import add_months, budget_urgency, calculate_financial_forecast
from .hard_water import calculate_hard_water_tax, softener_annual_cost
from .schemas import (
    BudgetUrgency,
    FinancialForecast,
    HardWaterRecommendation,
    HardWaterTax,
    QualityTier,
    TierProfile,
    TierQuote,
)
from .tiers import (
    TIER_INCLUDED_CATEGORIES,
    bundled_issues,
    current_tier,
    get_tier_profile,
    installation_adders,
    like_for_like_cost,
    quote_all_tiers,
    quote_tier,
    tier_profiles,
    upgrade_tier,
)

__all__ = [
    "add_months",
    "budget_urgency",
    "calculate_financial_forecast",
    "calculate_hard_water_tax",
    "softener_annual_cost",
    "BudgetUrgency",
    "FinancialForecast",
    "HardWaterRecommendation",
    "HardWaterTax",
    "QualityTier",
    "TierProfile",
    "TierQuote",
    "TIER_INCLUDED_CATEGORIES",
    "bundled_issues",
    "current_tier",
    "get_tier_profile",
    "installation_adders",
    "like_for_like_cost",
    "quote_all_tiers",
    "quote_tier",
    "tier_profiles",
    "upgrade_tier",
]
