"""
Unit Taxonomy - Fuel Types, Predicates and Condition Enumerations

Everything downstream branches on the fuel type predicates defined here.
Enum values are the wire strings accepted by the input records.
"""

from enum import Enum


# ============================================================================
# Fuel / Configuration Type
# ============================================================================

class FuelType(str, Enum):
    """Supported water heater configurations."""
    GAS = "GAS"
    ELECTRIC = "ELECTRIC"
    HYBRID = "HYBRID"
    TANKLESS_GAS = "TANKLESS_GAS"
    TANKLESS_ELECTRIC = "TANKLESS_ELECTRIC"


TANKLESS_FUEL_TYPES = frozenset({FuelType.TANKLESS_GAS, FuelType.TANKLESS_ELECTRIC})
STANDARD_TANK_FUEL_TYPES = frozenset({FuelType.GAS, FuelType.ELECTRIC})


def is_tankless(fuel_type: FuelType) -> bool:
    """True for on-demand units with no storage vessel."""
    return FuelType(fuel_type) in TANKLESS_FUEL_TYPES


def is_hybrid(fuel_type: FuelType) -> bool:
    """True for heat-pump water heaters."""
    return FuelType(fuel_type) == FuelType.HYBRID


def is_standard_tank(fuel_type: FuelType) -> bool:
    """True for conventional gas or electric storage tanks."""
    return FuelType(fuel_type) in STANDARD_TANK_FUEL_TYPES


def has_storage_tank(fuel_type: FuelType) -> bool:
    """True when the unit stores water (standard tank or hybrid)."""
    return not is_tankless(fuel_type)


def is_gas_fired(fuel_type: FuelType) -> bool:
    """True when the unit burns gas (tank or tankless)."""
    return FuelType(fuel_type) in (FuelType.GAS, FuelType.TANKLESS_GAS)


# ============================================================================
# Operating Conditions
# ============================================================================

class TempSetting(str, Enum):
    """Thermostat setpoint class."""
    LOW = "LOW"        # ~110F
    NORMAL = "NORMAL"  # ~120F
    HOT = "HOT"        # 140F+


class UsageType(str, Enum):
    """Household usage intensity."""
    LIGHT = "light"
    NORMAL = "normal"
    HEAVY = "heavy"


class LocationType(str, Enum):
    """Install location category."""
    ATTIC = "ATTIC"
    UPPER_FLOOR = "UPPER_FLOOR"
    MAIN_LIVING = "MAIN_LIVING"
    BASEMENT = "BASEMENT"
    GARAGE = "GARAGE"
    EXTERIOR = "EXTERIOR"
    CRAWLSPACE = "CRAWLSPACE"


class VentType(str, Enum):
    """Combustion venting hardware."""
    ATMOSPHERIC = "ATMOSPHERIC"
    POWER_VENT = "POWER_VENT"
    DIRECT_VENT = "DIRECT_VENT"


class VentingScenario(str, Enum):
    """Flue arrangement, drives replacement venting cost."""
    SHARED_FLUE = "SHARED_FLUE"
    ORPHANED_FLUE = "ORPHANED_FLUE"  # Furnace moved off the chimney, liner required
    DIRECT_VENT = "DIRECT_VENT"


# ============================================================================
# Pressure System
# ============================================================================

class ExpansionTankStatus(str, Enum):
    """Thermal expansion tank condition."""
    FUNCTIONAL = "FUNCTIONAL"
    WATERLOGGED = "WATERLOGGED"
    MISSING = "MISSING"


# ============================================================================
# Condition / Containment
# ============================================================================

class LeakSource(str, Enum):
    """Where an observed leak originates."""
    NONE = "NONE"
    TANK_BODY = "TANK_BODY"
    FITTING_VALVE = "FITTING_VALVE"
    DRAIN_PAN = "DRAIN_PAN"


class ConnectionType(str, Enum):
    """Pipe-to-tank connection metallurgy."""
    DIELECTRIC = "DIELECTRIC"
    BRASS = "BRASS"
    DIRECT_COPPER = "DIRECT_COPPER"  # Galvanic couple with the steel nipple


# ============================================================================
# Water Quality
# ============================================================================

class SanitizerType(str, Enum):
    """Municipal disinfectant."""
    CHLORINE = "CHLORINE"
    CHLORAMINE = "CHLORAMINE"
    UNKNOWN = "UNKNOWN"


class SoftenerSaltStatus(str, Enum):
    """Softener brine tank state."""
    OK = "OK"
    EMPTY = "EMPTY"
    UNKNOWN = "UNKNOWN"


# ============================================================================
# Hybrid / Tankless Components
# ============================================================================

class FilterStatus(str, Enum):
    """Air filter (hybrid) or inlet screen (tankless) condition."""
    CLEAN = "CLEAN"
    DIRTY = "DIRTY"
    CLOGGED = "CLOGGED"


class RoomVolume(str, Enum):
    """Air volume available to a heat pump."""
    OPEN = "OPEN"
    CLOSET_LOUVERED = "CLOSET_LOUVERED"
    CLOSET_SEALED = "CLOSET_SEALED"


class FlameRodStatus(str, Enum):
    """Flame sensor condition (gas tankless)."""
    GOOD = "GOOD"
    WORN = "WORN"
    FAILING = "FAILING"


class TanklessVentStatus(str, Enum):
    """Exhaust/intake vent condition (tankless)."""
    CLEAR = "CLEAR"
    RESTRICTED = "RESTRICTED"
    BLOCKED = "BLOCKED"


class GasLineSize(str, Enum):
    """Nominal gas supply pipe diameter (inches)."""
    HALF_INCH = "1/2"
    THREE_QUARTER_INCH = "3/4"
    ONE_INCH = "1"
