"""
Finance Tests - Forecast, Tiers and Hard-Water Tax

Tests verify:
- Calendar month arithmetic
- Budget urgency bands
- Urgent replacement collapses the forecast to the as-of date
- Tier matching, upgrade path and installation adders
- Tier quotes bundle only the categories the tier includes
- Hard-water cost components and softener recommendation
"""

from datetime import date

import pytest

from opterra.finance import (
    BudgetUrgency,
    HardWaterRecommendation,
    QualityTier,
    add_months,
    budget_urgency,
    calculate_financial_forecast,
    calculate_hard_water_tax,
    current_tier,
    installation_adders,
    like_for_like_cost,
    quote_all_tiers,
    softener_annual_cost,
    tier_profiles,
    upgrade_tier,
)
from opterra.physics import calculate_health
from opterra.rules import build_context, build_verdict, detect_infrastructure_issues, detect_issues
from opterra.taxonomy import (
    FuelType,
    SoftenerSaltStatus,
    VentingScenario,
    VentType,
    default_hybrid_inputs,
    default_tank_inputs,
    default_tankless_inputs,
)


AS_OF = date(2025, 1, 1)


def _forecast(record):
    metrics = calculate_health(record)
    verdict = build_verdict(build_context(record, metrics), detect_issues(record, metrics))
    infrastructure = detect_infrastructure_issues(record)
    return metrics, calculate_financial_forecast(record, metrics, verdict, infrastructure, AS_OF)


class TestAddMonths:
    """Test calendar month arithmetic."""

    def test_zero(self):
        assert add_months(AS_OF, 0) == AS_OF

    def test_year_rollover(self):
        assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)

    def test_day_clamped_leap_year(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_day_clamped(self):
        assert add_months(date(2025, 3, 31), 1) == date(2025, 4, 30)


class TestBudgetUrgency:
    """Test years-until-target bands."""

    @pytest.mark.parametrize("years,expected", [
        (0.0, BudgetUrgency.IMMEDIATE),
        (0.5, BudgetUrgency.HIGH),
        (1.0, BudgetUrgency.HIGH),
        (2.0, BudgetUrgency.MED),
        (3.0, BudgetUrgency.MED),
        (3.1, BudgetUrgency.LOW),
    ])
    def test_bands(self, years, expected):
        assert budget_urgency(years) == expected


class TestForecast:
    """Test the replacement budget plan."""

    def test_healthy_unit(self):
        record = default_tank_inputs(calendar_age=2)
        metrics, forecast = _forecast(record)
        months = int(round(metrics.years_left_current * 12))
        assert forecast.months_until_target == months
        assert forecast.target_replacement_date == add_months(AS_OF, months)
        assert forecast.budget_urgency == BudgetUrgency.LOW
        assert forecast.recommendation == "Save for Future"
        assert forecast.like_for_like_cost == 1400
        assert forecast.monthly_budget == round(1400 / months)
        assert forecast.est_replacement_cost > forecast.like_for_like_cost

    def test_urgent_replacement(self):
        _, forecast = _forecast(default_tank_inputs(calendar_age=12))
        assert forecast.months_until_target == 0
        assert forecast.target_replacement_date == AS_OF
        assert forecast.budget_urgency == BudgetUrgency.IMMEDIATE
        assert forecast.recommendation == "Replace Now"
        assert forecast.est_replacement_cost == 1400
        assert forecast.est_replacement_cost_min == 1260
        assert forecast.est_replacement_cost_max == 1540
        assert forecast.monthly_budget == 1400

    def test_cost_band_brackets_estimate(self):
        _, forecast = _forecast(default_tank_inputs(calendar_age=6, house_psi=75))
        assert forecast.est_replacement_cost_min <= forecast.est_replacement_cost
        assert forecast.est_replacement_cost <= forecast.est_replacement_cost_max

    def test_upgrade_path(self):
        _, forecast = _forecast(default_tank_inputs(calendar_age=2))
        assert forecast.current_tier.tier == QualityTier.BUILDER
        assert forecast.upgrade_tier.tier == QualityTier.STANDARD
        assert forecast.upgrade_cost == 500
        assert "Standard" in forecast.upgrade_value_prop

    def test_premium_has_no_upgrade(self):
        _, forecast = _forecast(default_tank_inputs(calendar_age=2, warranty_years=15))
        assert forecast.current_tier.tier == QualityTier.PREMIUM
        assert forecast.upgrade_tier is None
        assert forecast.upgrade_cost is None

    def test_quotes_for_every_tier(self):
        _, forecast = _forecast(default_tank_inputs(calendar_age=2))
        assert [q.profile.tier for q in forecast.quotes] == list(QualityTier)


class TestTiers:
    """Test tier matching and pricing."""

    def test_tank_and_tankless_tables(self):
        assert [p.base_cost for p in tier_profiles(FuelType.GAS)] == [1400, 1900, 2600, 3500]
        assert [p.warranty_years for p in tier_profiles(FuelType.TANKLESS_GAS)] == [5, 10, 12, 15]

    def test_current_tier_by_warranty(self):
        assert current_tier(default_tank_inputs(warranty_years=12)).tier == QualityTier.PROFESSIONAL
        assert current_tier(default_tank_inputs(warranty_years=3)).tier == QualityTier.BUILDER

    def test_hybrid_upgrade(self):
        record = default_hybrid_inputs()
        assert current_tier(record).tier == QualityTier.STANDARD
        assert upgrade_tier(record).base_cost == 4200

    def test_tankless_current_tier(self):
        assert current_tier(default_tankless_inputs()).tier == QualityTier.STANDARD

    def test_gas_venting_adders(self):
        record = default_tank_inputs(
            vent_type=VentType.POWER_VENT, venting_scenario=VentingScenario.ORPHANED_FLUE
        )
        assert installation_adders(record) == 2800
        assert like_for_like_cost(record) == 4200

    def test_electric_has_no_adders(self):
        record = default_tank_inputs(FuelType.ELECTRIC, vent_type=VentType.POWER_VENT)
        assert installation_adders(record) == 0


class TestQuotes:
    """Test bundled infrastructure in tier quotes."""

    def _quotes(self):
        record = default_tank_inputs(is_closed_loop=True, house_psi=75, hardness_gpg=14)
        return quote_all_tiers(record, detect_infrastructure_issues(record))

    def test_builder_bundles_violations_only(self):
        builder = self._quotes()[0]
        assert [i.id for i in builder.bundled_issues] == ["exp_tank_required"]
        assert builder.unit_cost_low == 1260
        assert builder.unit_cost_high == 1540
        assert builder.total_low == 1510
        assert builder.total_high == 1940
        assert builder.total_median == 1725

    def test_standard_adds_infrastructure(self):
        standard = self._quotes()[1]
        assert [i.id for i in standard.bundled_issues] == ["exp_tank_required", "prv_recommended"]

    def test_professional_bundles_everything(self):
        for quote in self._quotes()[2:]:
            assert len(quote.bundled_issues) == 3

    def test_totals_increase_by_tier(self):
        totals = [q.total_median for q in self._quotes()]
        assert totals == sorted(totals)


class TestHardWaterTax:
    """Test hard-water cost and softener recommendation."""

    def _tax(self, record):
        return calculate_hard_water_tax(record, calculate_health(record))

    def test_softener_annual_cost(self):
        assert softener_annual_cost() == 280

    def test_very_hard_water(self):
        tax = self._tax(default_tank_inputs(hardness_gpg=15))
        assert tax.energy_loss == 104
        assert tax.appliance_depreciation == 138
        assert tax.detergent_overspend == 69
        assert tax.plumbing_protection == 46
        assert tax.total_annual_loss == 357
        assert tax.net_annual_savings == 77
        assert tax.payback_years == pytest.approx(10.1)
        assert tax.recommendation == HardWaterRecommendation.RECOMMEND
        assert tax.badge_color == "orange"

    def test_moderate_water(self):
        assert self._tax(default_tank_inputs(hardness_gpg=7)).recommendation == HardWaterRecommendation.NONE

    def test_consider_band(self):
        assert self._tax(default_tank_inputs(hardness_gpg=9)).recommendation == HardWaterRecommendation.CONSIDER

    def test_soft_water_has_no_payback(self):
        tax = self._tax(default_tank_inputs(hardness_gpg=2))
        assert tax.total_annual_loss == 0
        assert tax.payback_years is None

    def test_tankless_energy_rate(self):
        assert self._tax(default_tankless_inputs(hardness_gpg=15)).energy_loss == 138

    def test_softener_protects(self):
        record = default_tank_inputs(
            hardness_gpg=15, has_softener=True, softener_salt_status=SoftenerSaltStatus.OK
        )
        tax = self._tax(record)
        assert tax.recommendation == HardWaterRecommendation.PROTECTED
        assert tax.protected_amount == 357

    def test_hybrid_burnout_risk(self):
        tax = self._tax(default_hybrid_inputs())
        assert tax.element_burnout_risk == 25
        assert self._tax(default_tank_inputs()).element_burnout_risk is None
