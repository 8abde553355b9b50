"""
Forensic Inputs - Tagged Union of Unit Records

The Engine's sole input record. One variant per unit family, selected by
`fuel_type`, so a branch's fields are guaranteed present when it runs.

Constraints:
- Numeric fields are clamped to >= 0 (health percentages to 0-100)
- Fields belonging to another unit family are ignored, never rejected
- A fuel type outside a variant's family is a validation error
"""

from typing import Annotated, Any, ClassVar, FrozenSet, Optional, Union

from pydantic import BaseModel, BeforeValidator, Discriminator, Field, Tag, TypeAdapter, field_validator

from opterra.config import settings

from .enums import (
    ConnectionType,
    ExpansionTankStatus,
    FilterStatus,
    FlameRodStatus,
    FuelType,
    GasLineSize,
    LeakSource,
    LocationType,
    RoomVolume,
    SanitizerType,
    SoftenerSaltStatus,
    STANDARD_TANK_FUEL_TYPES,
    TANKLESS_FUEL_TYPES,
    TanklessVentStatus,
    TempSetting,
    UsageType,
    VentingScenario,
    VentType,
    is_hybrid,
    is_tankless,
)


def _clamp_non_negative(v: Optional[float]) -> Optional[float]:
    if v is None:
        return v
    return max(0.0, v)


def _clamp_percent(v: Optional[float]) -> Optional[float]:
    if v is None:
        return v
    return min(100.0, max(0.0, v))


# ============================================================================
# Shared Fields
# ============================================================================

class UnitInputs(BaseModel):
    """
    Fields common to every unit family.

    Defaults describe a typical five-year-old install with no findings.
    """
    ACCEPTED_FUEL_TYPES: ClassVar[FrozenSet[FuelType]] = frozenset(FuelType)

    fuel_type: FuelType

    # Identity / age
    calendar_age: float = Field(default=5.0, description="Years since install")
    warranty_years: float = Field(default=6.0, description="Manufacturer warranty length")

    # Pressure system
    house_psi: float = Field(default=60.0, description="Static house pressure (PSI)")
    has_prv: bool = False
    has_exp_tank: bool = False
    exp_tank_status: Optional[ExpansionTankStatus] = None
    is_closed_loop: bool = False

    # Usage
    people_count: int = Field(default=3, description="Occupants served")
    usage_type: UsageType = UsageType.NORMAL

    # Water quality
    hardness_gpg: float = Field(default=7.0, description="Street hardness estimate (GPG)")
    measured_hardness_gpg: Optional[float] = Field(default=None, description="Test-strip override")
    sanitizer_type: SanitizerType = SanitizerType.UNKNOWN
    has_softener: bool = False
    softener_salt_status: SoftenerSaltStatus = SoftenerSaltStatus.UNKNOWN

    # Equipment
    vent_type: VentType = VentType.ATMOSPHERIC
    venting_scenario: VentingScenario = VentingScenario.SHARED_FLUE
    temp_setting: TempSetting = TempSetting.NORMAL
    has_circ_pump: bool = False

    # Location / condition
    location: LocationType = LocationType.GARAGE
    is_finished_area: bool = False
    has_drain_pan: bool = False
    visual_rust: bool = False
    is_leaking: bool = False
    leak_source: Optional[LeakSource] = None

    @field_validator("fuel_type")
    @classmethod
    def check_fuel_family(cls, v: FuelType) -> FuelType:
        """Reject a fuel type that belongs to another unit family."""
        if v not in cls.ACCEPTED_FUEL_TYPES:
            raise ValueError(f"{v.value} is not a valid fuel type for {cls.__name__}")
        return v

    @field_validator("calendar_age", "warranty_years", "house_psi", "hardness_gpg",
                     "measured_hardness_gpg")
    @classmethod
    def clamp_measurements(cls, v: Optional[float]) -> Optional[float]:
        return _clamp_non_negative(v)

    @field_validator("people_count")
    @classmethod
    def clamp_people(cls, v: int) -> int:
        return max(0, v)


# ============================================================================
# Storage Units
# ============================================================================

class TankInputs(UnitInputs):
    """Conventional gas or electric storage tank."""
    ACCEPTED_FUEL_TYPES: ClassVar[FrozenSet[FuelType]] = STANDARD_TANK_FUEL_TYPES

    fuel_type: FuelType = FuelType.GAS

    tank_capacity: float = Field(default=50.0, description="Nominal gallons")
    last_flush_years_ago: Optional[float] = None
    last_anode_replace_years_ago: Optional[float] = None
    is_annually_maintained: bool = False
    anode_count: int = Field(default=1, description="Sacrificial rods installed")
    connection_type: ConnectionType = ConnectionType.DIELECTRIC

    @field_validator("tank_capacity", "last_flush_years_ago", "last_anode_replace_years_ago")
    @classmethod
    def clamp_tank_measurements(cls, v: Optional[float]) -> Optional[float]:
        return _clamp_non_negative(v)

    @field_validator("anode_count")
    @classmethod
    def clamp_anode_count(cls, v: int) -> int:
        return max(1, v)


class HybridInputs(TankInputs):
    """Heat-pump water heater: a storage tank plus a compressor stage."""
    ACCEPTED_FUEL_TYPES: ClassVar[FrozenSet[FuelType]] = frozenset({FuelType.HYBRID})

    fuel_type: FuelType = FuelType.HYBRID
    warranty_years: float = 10.0

    air_filter_status: FilterStatus = FilterStatus.CLEAN
    is_condensate_clear: bool = True
    compressor_health: float = Field(default=100.0, description="Compressor health 0-100")
    room_volume_type: RoomVolume = RoomVolume.OPEN

    @field_validator("compressor_health")
    @classmethod
    def clamp_compressor(cls, v: float) -> float:
        return _clamp_percent(v)


# ============================================================================
# Tankless Units
# ============================================================================

class TanklessInputs(UnitInputs):
    """On-demand gas or electric unit with a heat exchanger instead of a vessel."""
    ACCEPTED_FUEL_TYPES: ClassVar[FrozenSet[FuelType]] = TANKLESS_FUEL_TYPES

    fuel_type: FuelType = FuelType.TANKLESS_GAS
    warranty_years: float = 10.0

    rated_flow_gpm: float = Field(default=9.0, description="Nameplate flow (GPM)")
    flow_rate_gpm: Optional[float] = Field(default=None, description="Measured flow (GPM)")
    last_descale_years_ago: Optional[float] = 1.0
    has_isolation_valves: bool = True
    inlet_filter_status: FilterStatus = FilterStatus.CLEAN
    flame_rod_status: FlameRodStatus = FlameRodStatus.GOOD
    igniter_health: float = 100.0
    element_health: float = 100.0
    tankless_vent_status: TanklessVentStatus = TanklessVentStatus.CLEAR
    gas_line_size: GasLineSize = GasLineSize.THREE_QUARTER_INCH
    gas_run_length: Optional[float] = Field(default=None, description="Feet from meter")
    btu_rating: float = 199000.0
    error_code_count: int = 0
    scale_buildup: Optional[float] = Field(default=None, description="Observed scale 0-100")
    has_recirculation_loop: bool = False

    @field_validator("rated_flow_gpm", "flow_rate_gpm", "last_descale_years_ago",
                     "gas_run_length", "btu_rating")
    @classmethod
    def clamp_tankless_measurements(cls, v: Optional[float]) -> Optional[float]:
        return _clamp_non_negative(v)

    @field_validator("igniter_health", "element_health", "scale_buildup")
    @classmethod
    def clamp_health(cls, v: Optional[float]) -> Optional[float]:
        return _clamp_percent(v)

    @field_validator("error_code_count")
    @classmethod
    def clamp_error_codes(cls, v: int) -> int:
        return max(0, v)


# ============================================================================
# Tagged Union
# ============================================================================

def _with_default_fuel_type(value: Any) -> Any:
    """A mapping without fuel_type is read as the configured default unit."""
    if isinstance(value, dict) and "fuel_type" not in value:
        return {**value, "fuel_type": settings.DEFAULT_FUEL_TYPE}
    return value


def _unit_family(value: Any) -> Optional[str]:
    """Discriminator: map a raw mapping or a record to its variant tag."""
    if isinstance(value, dict):
        raw = value.get("fuel_type", settings.DEFAULT_FUEL_TYPE)
    else:
        raw = getattr(value, "fuel_type", None)
    try:
        fuel_type = FuelType(raw)
    except ValueError:
        return None
    if is_tankless(fuel_type):
        return "tankless"
    if is_hybrid(fuel_type):
        return "hybrid"
    return "tank"


ForensicInputs = Annotated[
    Union[
        Annotated[TankInputs, Tag("tank")],
        Annotated[HybridInputs, Tag("hybrid")],
        Annotated[TanklessInputs, Tag("tankless")],
    ],
    Discriminator(_unit_family),
    BeforeValidator(_with_default_fuel_type),
]

_inputs_adapter = TypeAdapter(ForensicInputs)


def parse_inputs(data: Any) -> Union[TankInputs, HybridInputs, TanklessInputs]:
    """
    Validate a mapping (or an existing record) into the matching variant.

    Raises:
        pydantic.ValidationError: unknown fuel type or malformed field
    """
    if isinstance(data, UnitInputs):
        return data
    return _inputs_adapter.validate_python(data)


# ============================================================================
# Unified Plumbing Helpers
# ============================================================================

def is_closed_loop(inputs: UnitInputs) -> bool:
    """A PRV (or a check valve) traps thermal expansion inside the house."""
    return inputs.is_closed_loop or inputs.has_prv


def has_functional_expansion_tank(inputs: UnitInputs) -> bool:
    if not inputs.has_exp_tank:
        return False
    return inputs.exp_tank_status not in (ExpansionTankStatus.WATERLOGGED,
                                          ExpansionTankStatus.MISSING)


def needs_expansion_tank(inputs: UnitInputs) -> bool:
    """Closed loop with nowhere for thermal expansion to go."""
    return is_closed_loop(inputs) and not has_functional_expansion_tank(inputs)


def is_tank_body_breach(inputs: UnitInputs) -> bool:
    """Leak from the vessel (or heat exchanger), or a leak of unknown origin."""
    if not inputs.is_leaking:
        return False
    return inputs.leak_source in (None, LeakSource.NONE, LeakSource.TANK_BODY)
