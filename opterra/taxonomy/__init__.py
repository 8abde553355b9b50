"""
Taxonomy Module - Unit Types, Input Records and Defaults

Public API:
- FuelType + predicates: is_tankless, is_hybrid, is_standard_tank, has_storage_tank
- ForensicInputs: Tagged union (TankInputs | HybridInputs | TanklessInputs)
- parse_inputs: Validate a mapping into the matching variant
- default_inputs: Fully-populated default record per fuel type
- resolve_hardness: Street vs. measured vs. softened hardness
"""

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
    TanklessVentStatus,
    TempSetting,
    UsageType,
    VentingScenario,
    VentType,
    has_storage_tank,
    is_gas_fired,
    is_hybrid,
    is_standard_tank,
    is_tankless,
)
from .inputs import (
    ForensicInputs,
    HybridInputs,
    TankInputs,
    TanklessInputs,
    UnitInputs,
    has_functional_expansion_tank,
    is_closed_loop,
    is_tank_body_breach,
    needs_expansion_tank,
    parse_inputs,
)
from .defaults import (
    UnknownFuelTypeError,
    default_hybrid_inputs,
    default_inputs,
    default_tank_inputs,
    default_tankless_inputs,
)
from .hardness import (
    HardnessConfidence,
    HardnessSource,
    ResolvedHardness,
    is_softener_active,
    resolve_hardness,
)

__all__ = [
    "ConnectionType",
    "ExpansionTankStatus",
    "FilterStatus",
    "FlameRodStatus",
    "FuelType",
    "GasLineSize",
    "LeakSource",
    "LocationType",
    "RoomVolume",
    "SanitizerType",
    "SoftenerSaltStatus",
    "TanklessVentStatus",
    "TempSetting",
    "UsageType",
    "VentingScenario",
    "VentType",
    "has_storage_tank",
    "is_gas_fired",
    "is_hybrid",
    "is_standard_tank",
    "is_tankless",
    "ForensicInputs",
    "HybridInputs",
    "TankInputs",
    "TanklessInputs",
    "UnitInputs",
    "has_functional_expansion_tank",
    "is_closed_loop",
    "is_tank_body_breach",
    "needs_expansion_tank",
    "parse_inputs",
    "UnknownFuelTypeError",
    "default_hybrid_inputs",
    "default_inputs",
    "default_tank_inputs",
    "default_tankless_inputs",
    "HardnessConfidence",
    "HardnessSource",
    "ResolvedHardness",
    "is_softener_active",
    "resolve_hardness",
]
