"""
Finance Schemas - Tiers, Quotes, Forecast and Hard-Water Tax
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from opterra.rules import InfrastructureIssue


class QualityTier(str, Enum):
    BUILDER = "BUILDER"
    STANDARD = "STANDARD"
    PROFESSIONAL = "PROFESSIONAL"
    PREMIUM = "PREMIUM"


class BudgetUrgency(str, Enum):
    IMMEDIATE = "IMMEDIATE"
    HIGH = "HIGH"
    MED = "MED"
    LOW = "LOW"


class HardWaterRecommendation(str, Enum):
    NONE = "NONE"
    CONSIDER = "CONSIDER"
    RECOMMEND = "RECOMMEND"
    PROTECTED = "PROTECTED"


class TierProfile(BaseModel):
    """Equipment class with a fixed warranty and base installed cost."""
    tier: QualityTier
    label: str
    warranty_years: int = Field(..., gt=0)
    expected_life: int = Field(..., gt=0)
    base_cost: int = Field(..., ge=0, description="Installed cost for this fuel type (USD)")
    features: List[str] = Field(default_factory=list)


class TierQuote(BaseModel):
    """Replacement price for one tier, with bundled infrastructure fixes."""
    profile: TierProfile
    unit_cost_low: int
    unit_cost_high: int
    bundled_issues: List[InfrastructureIssue] = Field(default_factory=list)
    bundle_cost_low: int = 0
    bundle_cost_high: int = 0
    total_low: int
    total_high: int
    total_median: int


class FinancialForecast(BaseModel):
    """Replacement budget plan."""
    target_replacement_date: date
    months_until_target: int = Field(..., ge=0)
    like_for_like_cost: int
    est_replacement_cost: int
    est_replacement_cost_min: int
    est_replacement_cost_max: int
    monthly_budget: int
    budget_urgency: BudgetUrgency
    recommendation: str
    current_tier: TierProfile
    upgrade_tier: Optional[TierProfile] = None
    upgrade_cost: Optional[int] = None
    upgrade_value_prop: Optional[str] = None
    quotes: List[TierQuote] = Field(default_factory=list)


class HardWaterTax(BaseModel):
    """Annual cost of untreated hardness vs. the cost of softening it."""
    hardness_gpg: float
    has_softener: bool
    energy_loss: int
    appliance_depreciation: int
    detergent_overspend: int
    plumbing_protection: int
    total_annual_loss: int
    element_burnout_risk: Optional[int] = Field(None, ge=0, le=100)
    softener_annual_cost: int
    net_annual_savings: int
    payback_years: Optional[float] = None
    recommendation: HardWaterRecommendation
    reason: str
    badge_color: str
    protected_amount: Optional[int] = None
