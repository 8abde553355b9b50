"""
Aging Model Tests

Tests verify:
- Weibull failure curve and its inverse
- Health score map and round trip
- Warranty-scaled characteristic life
- Forward projection (scalar and vectorized agree)
- Tankless Safe Mode gate cascade
- calculate_health overrides for physical evidence
"""

import pytest

from opterra.physics import (
    SafeModeGate,
    bio_age_for_fail_prob,
    calculate_health,
    failure_probability,
    health_score,
    health_score_to_fail_prob,
    project_future_health,
    project_trend,
    weibull_eta,
)
from opterra.physics.constants import HEALTH_ROUND_TRIP_TOLERANCE, STATISTICAL_FAIL_CAP
from opterra.taxonomy import (
    FlameRodStatus,
    FuelType,
    LeakSource,
    TanklessVentStatus,
    default_tank_inputs,
    default_tankless_inputs,
)


class TestFailureCurve:
    """Test the Weibull CDF."""

    def test_zero_age(self):
        assert failure_probability(0.0) == 0.0

    def test_monotonic(self):
        probs = [failure_probability(age) for age in range(0, 40)]
        assert all(b >= a for a, b in zip(probs, probs[1:]))

    def test_statistical_cap(self):
        assert failure_probability(45.0) == STATISTICAL_FAIL_CAP

    def test_inverse(self):
        bio = bio_age_for_fail_prob(50.0, 11.05)
        assert failure_probability(bio, 11.05) == pytest.approx(50.0, abs=1e-6)

    def test_twelve_year_builder_tank(self):
        assert failure_probability(12.0, 11.05) == pytest.approx(72.8, abs=0.1)


class TestWeibullEta:
    """Test warranty scaling of characteristic life."""

    def test_six_year_warranty_clamped(self):
        assert weibull_eta(6.0) == pytest.approx(11.05)

    def test_nine_year_warranty_is_reference(self):
        assert weibull_eta(9.0) == pytest.approx(13.0)

    def test_long_warranty_clamped(self):
        assert weibull_eta(15.0) == pytest.approx(14.95)


class TestHealthScore:
    """Test the piecewise-linear display score."""

    @pytest.mark.parametrize("fail_prob,score", [
        (0.0, 100),
        (10.0, 80),
        (30.0, 60),
        (50.0, 40),
        (100.0, 0),
    ])
    def test_breakpoints(self, fail_prob, score):
        assert health_score(fail_prob) == score

    def test_out_of_range_clamped(self):
        assert health_score(-5.0) == 100
        assert health_score(150.0) == 0

    def test_fail_prob_round_trip(self):
        for tenth in range(0, 1001):
            fail_prob = tenth / 10.0
            back = health_score_to_fail_prob(health_score(fail_prob))
            assert abs(back - fail_prob) <= HEALTH_ROUND_TRIP_TOLERANCE + 1e-9

    def test_integer_score_round_trip(self):
        for score in range(0, 101):
            assert health_score(health_score_to_fail_prob(score)) == score


class TestProjection:
    """Test forward projection."""

    def test_zero_months_is_current(self):
        projected = project_future_health(bio_age=6.0, aging_rate=1.5, months_ahead=0)
        assert projected.bio_age == 6.0

    def test_bio_age_advances_at_aging_rate(self):
        projected = project_future_health(bio_age=6.0, aging_rate=1.5, months_ahead=24)
        assert projected.bio_age == 9.0

    def test_negative_horizon_clamped(self):
        projected = project_future_health(bio_age=6.0, aging_rate=1.0, months_ahead=-12)
        assert projected.months_ahead == 0

    def test_vectorized_matches_scalar(self):
        months = [0, 6, 12, 24, 36, 60, 120]
        trend = project_trend(bio_age=7.5, aging_rate=1.3, eta=11.05, months=months)
        for point, m in zip(trend, months):
            single = project_future_health(7.5, 1.3, m, eta=11.05)
            assert point.months_ahead == m
            assert point.fail_prob == pytest.approx(single.fail_prob, abs=0.1)
            assert abs(point.health_score - single.health_score) <= 1

    def test_trend_is_non_improving(self):
        trend = project_trend(bio_age=4.0, aging_rate=1.2)
        scores = [p.health_score for p in trend]
        assert all(b <= a for a, b in zip(scores, scores[1:]))


class TestSafeMode:
    """Test the tankless gate cascade."""

    def test_healthy_unit(self):
        metrics = calculate_health(default_tankless_inputs())
        assert metrics.safe_mode_gate == SafeModeGate.HEALTHY
        assert 1.0 <= metrics.fail_prob <= 14.9

    def test_blocked_vent_is_dead(self):
        metrics = calculate_health(
            default_tankless_inputs(tankless_vent_status=TanklessVentStatus.BLOCKED)
        )
        assert metrics.safe_mode_gate == SafeModeGate.DEAD
        assert metrics.fail_prob == 99.9

    def test_leak_is_dead(self):
        metrics = calculate_health(default_tankless_inputs(is_leaking=True))
        assert metrics.safe_mode_reason == "Heat Exchanger Breach"

    def test_chronic_errors(self):
        metrics = calculate_health(default_tankless_inputs(error_code_count=12))
        assert metrics.safe_mode_gate == SafeModeGate.DYING
        assert metrics.fail_prob == 85.0
        assert metrics.safe_mode_reason == "Chronic System Errors"

    def test_end_of_service_life(self):
        metrics = calculate_health(default_tankless_inputs(calendar_age=16))
        assert metrics.safe_mode_reason == "End of Service Life"

    def test_few_errors(self):
        metrics = calculate_health(default_tankless_inputs(error_code_count=3))
        assert metrics.fail_prob == 45.0

    def test_failing_flame_rod(self):
        metrics = calculate_health(
            default_tankless_inputs(flame_rod_status=FlameRodStatus.FAILING)
        )
        assert metrics.safe_mode_reason == "Flame Sensor Failing"

    def test_electric_element_failing(self):
        metrics = calculate_health(
            default_tankless_inputs(FuelType.TANKLESS_ELECTRIC, element_health=30)
        )
        assert metrics.safe_mode_reason == "Heating Element Failing"

    def test_scale_critical_is_dirty(self):
        metrics = calculate_health(
            default_tankless_inputs(hardness_gpg=18, last_descale_years_ago=None, calendar_age=4)
        )
        assert metrics.safe_mode_gate == SafeModeGate.DIRTY
        assert metrics.fail_prob == 30.0

    def test_no_valves_floor(self):
        metrics = calculate_health(default_tankless_inputs(has_isolation_valves=False))
        assert metrics.safe_mode_gate == SafeModeGate.DIRTY
        assert metrics.fail_prob == 20.0

    def test_dead_outranks_dying(self):
        metrics = calculate_health(
            default_tankless_inputs(is_leaking=True, error_code_count=20)
        )
        assert metrics.safe_mode_gate == SafeModeGate.DEAD


class TestCalculateHealth:
    """Test tank-side aggregate metrics."""

    def test_bio_age_never_below_calendar_age(self):
        metrics = calculate_health(default_tank_inputs(temp_setting="LOW", calendar_age=8))
        assert metrics.bio_age == 8.0

    def test_visual_rust_overrides_curve(self):
        metrics = calculate_health(default_tank_inputs(calendar_age=1, visual_rust=True))
        assert metrics.fail_prob == 99.9
        assert metrics.years_left_current <= 0

    def test_fitting_leak_keeps_statistical_curve(self):
        metrics = calculate_health(
            default_tank_inputs(calendar_age=1, is_leaking=True, leak_source=LeakSource.FITTING_VALVE)
        )
        assert metrics.fail_prob < 50.0

    def test_pressure_fix_extends_life(self):
        metrics = calculate_health(default_tank_inputs(house_psi=95, calendar_age=3))
        assert metrics.years_left_optimized > metrics.years_left_current
        assert metrics.life_extension > 0

    def test_low_temp_bacterial_warning(self):
        metrics = calculate_health(default_tank_inputs(temp_setting="LOW"))
        assert metrics.bacterial_growth_warning

    def test_health_score_matches_fail_prob(self):
        metrics = calculate_health(default_tank_inputs(calendar_age=12))
        assert metrics.fail_prob == pytest.approx(72.8, abs=0.1)
        assert metrics.health_score == health_score(metrics.fail_prob)

    def test_deterministic(self):
        record = default_tank_inputs(calendar_age=7, house_psi=75)
        assert calculate_health(record) == calculate_health(record)
