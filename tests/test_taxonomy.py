"""
Taxonomy Tests - Unit Records, Defaults and Hardness

Tests verify:
- fuel_type selects the record variant
- Unknown or mismatched fuel types fail validation
- Numeric fields are clamped, never rejected
- Default factories return complete records
- Hardness resolution order (measured > softened > street)
- Closed-loop and breach helpers
"""

import pytest
from pydantic import ValidationError

from opterra.config import settings
from opterra.taxonomy import (
    ExpansionTankStatus,
    FuelType,
    HardnessSource,
    HybridInputs,
    LeakSource,
    SoftenerSaltStatus,
    TankInputs,
    TanklessInputs,
    UnknownFuelTypeError,
    default_inputs,
    default_tank_inputs,
    default_tankless_inputs,
    has_storage_tank,
    is_closed_loop,
    is_gas_fired,
    is_hybrid,
    is_standard_tank,
    is_tank_body_breach,
    is_tankless,
    needs_expansion_tank,
    parse_inputs,
    resolve_hardness,
)


class TestFuelTypePredicates:
    """Test unit family predicates."""

    def test_tankless_family(self):
        assert is_tankless(FuelType.TANKLESS_GAS)
        assert is_tankless(FuelType.TANKLESS_ELECTRIC)
        assert not is_tankless(FuelType.HYBRID)

    def test_storage_family(self):
        for fuel in (FuelType.GAS, FuelType.ELECTRIC, FuelType.HYBRID):
            assert has_storage_tank(fuel)
        assert not has_storage_tank(FuelType.TANKLESS_GAS)

    def test_standard_tank_excludes_hybrid(self):
        assert is_standard_tank(FuelType.GAS)
        assert not is_standard_tank(FuelType.HYBRID)
        assert is_hybrid(FuelType.HYBRID)

    def test_gas_fired(self):
        assert is_gas_fired(FuelType.GAS)
        assert is_gas_fired(FuelType.TANKLESS_GAS)
        assert not is_gas_fired(FuelType.ELECTRIC)

    def test_predicates_accept_strings(self):
        assert is_tankless("TANKLESS_GAS")


class TestParseInputs:
    """Test tagged-union validation."""

    def test_missing_fuel_type_is_gas_tank(self):
        record = parse_inputs({"calendar_age": 4})
        assert isinstance(record, TankInputs)
        assert record.fuel_type == FuelType.GAS

    @pytest.mark.parametrize("configured,variant", [
        ("ELECTRIC", TankInputs),
        ("HYBRID", HybridInputs),
        ("TANKLESS_GAS", TanklessInputs),
    ])
    def test_missing_fuel_type_follows_settings(self, monkeypatch, configured, variant):
        monkeypatch.setattr(settings, "DEFAULT_FUEL_TYPE", configured)
        record = parse_inputs({"calendar_age": 4})
        assert isinstance(record, variant)
        assert record.fuel_type == FuelType(configured)

    def test_hybrid_variant(self):
        record = parse_inputs({"fuel_type": "HYBRID"})
        assert isinstance(record, HybridInputs)
        assert record.warranty_years == 10.0

    def test_tankless_variant(self):
        record = parse_inputs({"fuel_type": "TANKLESS_ELECTRIC"})
        assert isinstance(record, TanklessInputs)
        assert record.has_isolation_valves is True

    def test_unknown_fuel_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_inputs({"fuel_type": "WOOD"})

    def test_bad_enum_value_rejected(self):
        with pytest.raises(ValidationError):
            parse_inputs({"fuel_type": "GAS", "temp_setting": "SCALDING"})

    def test_wrong_family_rejected(self):
        with pytest.raises(ValidationError):
            TankInputs(fuel_type=FuelType.TANKLESS_GAS)

    def test_other_family_fields_ignored(self):
        record = parse_inputs({"fuel_type": "GAS", "btu_rating": 199000})
        assert not hasattr(record, "btu_rating")

    def test_record_passes_through(self):
        record = default_tank_inputs()
        assert parse_inputs(record) is record


class TestClamping:
    """Out-of-range values are clamped, not rejected."""

    def test_negative_age_clamped(self):
        record = parse_inputs({"fuel_type": "GAS", "calendar_age": -3})
        assert record.calendar_age == 0.0

    def test_negative_psi_clamped(self):
        record = parse_inputs({"fuel_type": "ELECTRIC", "house_psi": -10})
        assert record.house_psi == 0.0

    def test_compressor_health_clamped(self):
        record = parse_inputs({"fuel_type": "HYBRID", "compressor_health": 150})
        assert record.compressor_health == 100.0

    def test_anode_count_minimum(self):
        record = parse_inputs({"fuel_type": "GAS", "anode_count": 0})
        assert record.anode_count == 1

    def test_error_codes_non_negative(self):
        record = parse_inputs({"fuel_type": "TANKLESS_GAS", "error_code_count": -2})
        assert record.error_code_count == 0


class TestDefaults:
    """Test default record factories."""

    @pytest.mark.parametrize("fuel", [f.value for f in FuelType])
    def test_every_fuel_type_has_defaults(self, fuel):
        record = default_inputs(fuel)
        assert record.fuel_type == FuelType(fuel)

    def test_unknown_fuel_type_raises(self):
        with pytest.raises(UnknownFuelTypeError):
            default_inputs("WOOD")

    def test_unknown_fuel_type_is_value_error(self):
        with pytest.raises(ValueError):
            default_inputs("")

    def test_electric_tankless_defaults(self):
        record = default_tankless_inputs(FuelType.TANKLESS_ELECTRIC)
        assert record.rated_flow_gpm == 6.0
        assert record.btu_rating == 0.0

    def test_overrides_applied(self):
        record = default_inputs("GAS", calendar_age=12, house_psi=85)
        assert record.calendar_age == 12
        assert record.house_psi == 85

    def test_defaults_are_fresh(self):
        assert default_tank_inputs() is not default_tank_inputs()


class TestHardness:
    """Test hardness resolution order."""

    def test_street_by_default(self):
        hardness = resolve_hardness(default_tank_inputs(hardness_gpg=12))
        assert hardness.source == HardnessSource.STREET
        assert hardness.effective_gpg == 12

    def test_measured_wins(self):
        record = default_tank_inputs(hardness_gpg=12, measured_hardness_gpg=18, has_softener=True)
        hardness = resolve_hardness(record)
        assert hardness.source == HardnessSource.MEASURED
        assert hardness.effective_gpg == 18
        assert hardness.street_gpg == 12

    def test_softener_with_salt(self):
        record = default_tank_inputs(
            hardness_gpg=15, has_softener=True, softener_salt_status=SoftenerSaltStatus.OK
        )
        hardness = resolve_hardness(record)
        assert hardness.effective_gpg == 0.5
        assert hardness.softener_active

    def test_softener_unverified_salt(self):
        record = default_tank_inputs(hardness_gpg=15, has_softener=True)
        assert resolve_hardness(record).effective_gpg == 3.0

    def test_empty_softener_passes_hard_water(self):
        record = default_tank_inputs(
            hardness_gpg=15, has_softener=True, softener_salt_status=SoftenerSaltStatus.EMPTY
        )
        hardness = resolve_hardness(record)
        assert hardness.effective_gpg == 15
        assert not hardness.softener_active


class TestPlumbingHelpers:
    """Test closed-loop and breach helpers."""

    def test_prv_makes_closed_loop(self):
        assert is_closed_loop(default_tank_inputs(has_prv=True))
        assert not is_closed_loop(default_tank_inputs())

    def test_closed_loop_needs_expansion_tank(self):
        assert needs_expansion_tank(default_tank_inputs(is_closed_loop=True))
        assert not needs_expansion_tank(default_tank_inputs(is_closed_loop=True, has_exp_tank=True))

    def test_waterlogged_tank_does_not_count(self):
        record = default_tank_inputs(
            has_prv=True, has_exp_tank=True, exp_tank_status=ExpansionTankStatus.WATERLOGGED
        )
        assert needs_expansion_tank(record)

    def test_open_loop_never_needs_tank(self):
        assert not needs_expansion_tank(default_tank_inputs())

    def test_breach_sources(self):
        assert is_tank_body_breach(default_tank_inputs(is_leaking=True))
        assert is_tank_body_breach(default_tank_inputs(is_leaking=True, leak_source=LeakSource.TANK_BODY))
        assert not is_tank_body_breach(
            default_tank_inputs(is_leaking=True, leak_source=LeakSource.FITTING_VALVE)
        )
        assert not is_tank_body_breach(default_tank_inputs())
