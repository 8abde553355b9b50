"""
Engine Tests - End-to-End Assessment and Demo Scenarios

Tests verify:
- Raw mappings and records produce the same result
- Deterministic output for a fixed as-of date
- Worsening a stressor never improves health
- Every demo scenario assesses to its expected verdict
- Projection uses the unit's characteristic life
"""

from datetime import date

import pytest

from opterra.engine import calculate_opterra_risk, project
from opterra.maintenance import TaskType, TaskUrgency
from opterra.physics import SedimentBand
from opterra.rules import ActionType
from opterra.scenarios import SCENARIOS, get_scenario, list_scenarios
from opterra.taxonomy import default_tank_inputs, default_tankless_inputs


AS_OF = date(2025, 1, 1)


def _run(name):
    return calculate_opterra_risk(get_scenario(name).build(), as_of=AS_OF)


def _issue_ids(result):
    return [issue.id for issue in result.issues]


class TestEngine:
    """Test the single entry point."""

    def test_mapping_and_record_agree(self):
        raw = {"fuel_type": "GAS", "calendar_age": 7, "house_psi": 78}
        from_mapping = calculate_opterra_risk(raw, as_of=AS_OF)
        from_record = calculate_opterra_risk(default_tank_inputs(calendar_age=7, house_psi=78), as_of=AS_OF)
        assert from_mapping == from_record

    def test_idempotent(self):
        record = default_tankless_inputs(hardness_gpg=14, calendar_age=5)
        assert calculate_opterra_risk(record, AS_OF) == calculate_opterra_risk(record, AS_OF)

    def test_as_of_defaults_to_today(self):
        assert calculate_opterra_risk(default_tank_inputs()).as_of == date.today()

    def test_location_matches_metrics(self):
        result = calculate_opterra_risk(default_tank_inputs(location="ATTIC"), AS_OF)
        assert result.location.risk_level == result.metrics.risk_level == 5

    @pytest.mark.parametrize("field,low,high", [
        ("house_psi", 60, 95),
        ("calendar_age", 4, 9),
        ("hardness_gpg", 5, 20),
    ])
    def test_worse_conditions_never_improve_health(self, field, low, high):
        better = calculate_opterra_risk(default_tank_inputs(**{field: low}), AS_OF)
        worse = calculate_opterra_risk(default_tank_inputs(**{field: high}), AS_OF)
        assert worse.metrics.fail_prob >= better.metrics.fail_prob
        assert worse.metrics.health_score <= better.metrics.health_score

    def test_projection_uses_unit_eta(self):
        result = calculate_opterra_risk(default_tank_inputs(calendar_age=4), AS_OF)
        trend = project(result.metrics, months=[0])
        assert trend[0].fail_prob == pytest.approx(result.metrics.fail_prob, abs=0.1)


class TestScenarioCatalog:
    """Test the scenario registry."""

    def test_twelve_presets(self):
        assert len(list_scenarios()) == 12

    def test_lookup_is_case_insensitive(self):
        assert get_scenario("gas starvation").name == "Gas Starvation"

    def test_unknown_name(self):
        with pytest.raises(KeyError):
            get_scenario("Haunted Boiler")

    @pytest.mark.parametrize("name", list(SCENARIOS))
    def test_every_scenario_assesses(self, name):
        result = _run(name)
        assert result.maintenance.tasks


class TestScenarioOutcomes:
    """Test each preset's signature finding."""

    def test_perfect_unit(self):
        result = _run("Perfect Unit")
        assert result.issues == []
        assert result.verdict.title == "System Healthy"
        assert result.metrics.stress_factors.total == 1.0
        assert result.metrics.sediment_lbs == pytest.approx(0.22)
        assert result.metrics.shield_life == 4.0
        assert result.metrics.weibull_eta == pytest.approx(11.05)
        assert result.maintenance.is_bundled
        assert result.maintenance.monitor_only
        assert result.infrastructure_issues == []

    def test_attic_time_bomb(self):
        result = _run("Attic Time Bomb")
        assert result.metrics.risk_level == 5
        ids = _issue_ids(result)
        assert ids.index("no_exp_tank") < ids.index("no_drain_pan")
        assert result.verdict.title == "Missing Thermal Expansion"
        assert result.maintenance.primary.type == TaskType.EXP_TANK_INSTALL

    def test_pressure_cooker(self):
        result = _run("Pressure Cooker")
        assert result.verdict.title == "Critical Pressure Violation"
        assert [i.id for i in result.infrastructure_issues] == ["prv_critical"]
        assert result.maintenance.primary.type == TaskType.PRV_INSTALL

    def test_missing_tank(self):
        result = _run("Missing Tank")
        assert "no_exp_tank" in _issue_ids(result)
        assert result.metrics.is_transient_pressure
        assert result.verdict.title == "Missing Thermal Expansion"

    def test_basement_time_bomb(self):
        result = _run("Basement Time Bomb")
        ids = _issue_ids(result)
        assert "pressure_elevated" in ids
        assert "location_warn" in ids
        assert result.metrics.fail_prob > 50
        assert result.verdict.action == ActionType.REPLACE

    def test_zombie_expansion_tank(self):
        result = _run("Zombie Expansion Tank")
        ids = _issue_ids(result)
        assert "exp_tank_waterlogged" in ids
        assert "no_exp_tank" not in ids
        assert result.verdict.title == "Expansion Tank Failure"
        assert result.maintenance.primary.type == TaskType.EXP_TANK_REPLACE

    def test_galvanic_nightmare(self):
        result = _run("Galvanic Nightmare")
        ids = _issue_ids(result)
        assert {"galvanic", "softener", "anode_depleted"} <= set(ids)
        assert result.metrics.shield_life == 0.0
        assert result.hard_water_tax.recommendation.value == "PROTECTED"

    def test_legionella_risk(self):
        result = _run("Legionella Risk")
        assert result.metrics.bacterial_growth_warning
        assert result.verdict.title == "Raise Temperature Setting"

    def test_hybrid_suffocation(self):
        result = _run("Hybrid Suffocation")
        assert result.metrics.hybrid_efficiency == 30.0
        assert result.verdict.title == "Filter Clog"
        assert result.maintenance.primary.type == TaskType.AIR_FILTER

    def test_gas_starvation(self):
        result = _run("Gas Starvation")
        assert result.verdict.action == ActionType.UPGRADE
        assert result.verdict.title == "Gas Supply Starvation"
        assert result.verdict.source_issue_id == "gas_line_undersized"

    def test_tankless_scale_crisis(self):
        result = _run("Tankless Scale Crisis")
        assert result.metrics.descale_status.value == "critical"
        assert result.verdict.title == "Descale Critical"
        assert result.metrics.sediment_band == SedimentBand.NORMAL

    def test_no_isolation_valves(self):
        result = _run("No Isolation Valves")
        critical = [i.id for i in result.issues if i.severity.value == "critical"]
        assert "no_isolation_valves" in critical
        assert result.maintenance.primary.type == TaskType.ISOLATION_VALVES
        descale = next(t for t in result.maintenance.tasks if t.type == TaskType.DESCALE)
        assert descale.urgency == TaskUrgency.IMPOSSIBLE


class TestReferenceRecords:
    """Test the documented reference records exactly as written."""

    def _critical_ids(self, result):
        return {i.id for i in result.issues if i.severity.value == "critical"}

    def test_perfect_unit_record(self):
        result = calculate_opterra_risk({
            "calendar_age": 2, "house_psi": 55, "has_prv": True, "has_exp_tank": True,
            "exp_tank_status": "FUNCTIONAL", "hardness_gpg": 3, "is_annually_maintained": True,
        }, AS_OF)
        assert self._critical_ids(result) == set()
        assert result.metrics.stress_factors.total == pytest.approx(1.0, abs=0.05)

    def test_attic_record_at_80_psi(self):
        result = calculate_opterra_risk({
            "location": "ATTIC", "has_drain_pan": False, "has_exp_tank": False,
            "is_closed_loop": True, "house_psi": 80,
        }, AS_OF)
        assert {"no_drain_pan", "no_exp_tank"} <= self._critical_ids(result)
        assert result.metrics.risk_level >= 4

    def test_gas_starvation_record(self):
        result = calculate_opterra_risk({
            "fuel_type": "TANKLESS_GAS", "gas_line_size": "1/2", "btu_rating": 199000,
        }, AS_OF)
        assert "gas_line_undersized" in self._critical_ids(result)
