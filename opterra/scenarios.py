"""
Demo Scenarios - Named Unit Presets

Each preset is a raw mapping (fuel_type selects the variant) that exercises
one failure pattern end to end. Used by the demo runner, the API and tests.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from opterra.taxonomy import parse_inputs


@dataclass(frozen=True)
class Scenario:
    """A named unit preset."""
    name: str
    description: str
    inputs: Dict[str, Any] = field(default_factory=dict)

    def build(self):
        """Validated input record for this preset."""
        return parse_inputs(dict(self.inputs))


# =============================================================================
# STORAGE TANKS
# =============================================================================

PERFECT_UNIT = Scenario(
    name="Perfect Unit",
    description="Two-year-old gas tank with a PRV, working expansion tank and soft street water.",
    inputs={
        "fuel_type": "GAS",
        "calendar_age": 2.0,
        "warranty_years": 6.0,
        "house_psi": 55.0,
        "has_prv": True,
        "has_exp_tank": True,
        "exp_tank_status": "FUNCTIONAL",
        "hardness_gpg": 2.5,
        "location": "GARAGE",
    },
)

ATTIC_TIME_BOMB = Scenario(
    name="Attic Time Bomb",
    description="Attic install with no drain pan on a closed loop without an expansion tank.",
    inputs={
        "fuel_type": "GAS",
        "calendar_age": 4.0,
        "warranty_years": 6.0,
        "house_psi": 60.0,
        "is_closed_loop": True,
        "has_exp_tank": False,
        "location": "ATTIC",
        "has_drain_pan": False,
        "is_finished_area": True,
    },
)

PRESSURE_COOKER = Scenario(
    name="Pressure Cooker",
    description="Young tank on 95 PSI street pressure with no regulator.",
    inputs={
        "fuel_type": "GAS",
        "calendar_age": 3.0,
        "warranty_years": 9.0,
        "house_psi": 95.0,
        "has_prv": False,
        "location": "GARAGE",
    },
)

MISSING_TANK = Scenario(
    name="Missing Tank",
    description="PRV-regulated house (closed loop) with no expansion tank.",
    inputs={
        "fuel_type": "ELECTRIC",
        "calendar_age": 5.0,
        "warranty_years": 6.0,
        "house_psi": 62.0,
        "has_prv": True,
        "has_exp_tank": False,
        "location": "BASEMENT",
    },
)

BASEMENT_TIME_BOMB = Scenario(
    name="Basement Time Bomb",
    description="Eleven-year-old tank in a finished basement on elevated pressure.",
    inputs={
        "fuel_type": "GAS",
        "calendar_age": 11.0,
        "warranty_years": 6.0,
        "house_psi": 72.0,
        "has_prv": False,
        "hardness_gpg": 12.0,
        "location": "BASEMENT",
        "is_finished_area": True,
    },
)

ZOMBIE_EXPANSION_TANK = Scenario(
    name="Zombie Expansion Tank",
    description="Expansion tank present but waterlogged on a PRV-regulated loop.",
    inputs={
        "fuel_type": "GAS",
        "calendar_age": 5.0,
        "warranty_years": 9.0,
        "house_psi": 60.0,
        "has_prv": True,
        "has_exp_tank": True,
        "exp_tank_status": "WATERLOGGED",
        "location": "GARAGE",
    },
)

GALVANIC_NIGHTMARE = Scenario(
    name="Galvanic Nightmare",
    description="Direct copper connections plus a softener eating the anode.",
    inputs={
        "fuel_type": "GAS",
        "calendar_age": 4.0,
        "warranty_years": 6.0,
        "house_psi": 58.0,
        "hardness_gpg": 14.0,
        "has_softener": True,
        "softener_salt_status": "OK",
        "connection_type": "DIRECT_COPPER",
        "location": "GARAGE",
    },
)

LEGIONELLA_RISK = Scenario(
    name="Legionella Risk",
    description="Electric tank set to the LOW temperature setting.",
    inputs={
        "fuel_type": "ELECTRIC",
        "calendar_age": 3.0,
        "warranty_years": 6.0,
        "house_psi": 55.0,
        "temp_setting": "LOW",
        "location": "GARAGE",
    },
)


# =============================================================================
# HYBRID
# =============================================================================

HYBRID_SUFFOCATION = Scenario(
    name="Hybrid Suffocation",
    description="Heat pump unit in a sealed closet with a clogged air filter.",
    inputs={
        "fuel_type": "HYBRID",
        "calendar_age": 3.0,
        "warranty_years": 10.0,
        "house_psi": 58.0,
        "location": "MAIN_LIVING",
        "room_volume_type": "CLOSET_SEALED",
        "air_filter_status": "CLOGGED",
        "has_drain_pan": True,
    },
)


# =============================================================================
# TANKLESS
# =============================================================================

GAS_STARVATION = Scenario(
    name="Gas Starvation",
    description="199k BTU tankless on a half-inch gas line.",
    inputs={
        "fuel_type": "TANKLESS_GAS",
        "calendar_age": 3.0,
        "warranty_years": 10.0,
        "house_psi": 58.0,
        "hardness_gpg": 5.0,
        "last_descale_years_ago": 0.5,
        "btu_rating": 199000,
        "gas_line_size": "1/2",
        "location": "GARAGE",
    },
)

TANKLESS_SCALE_CRISIS = Scenario(
    name="Tankless Scale Crisis",
    description="Hard water and four years without a descale.",
    inputs={
        "fuel_type": "TANKLESS_GAS",
        "calendar_age": 4.0,
        "warranty_years": 10.0,
        "house_psi": 58.0,
        "hardness_gpg": 18.0,
        "last_descale_years_ago": None,
        "location": "GARAGE",
    },
)

NO_ISOLATION_VALVES = Scenario(
    name="No Isolation Valves",
    description="Tankless unit installed without service valves.",
    inputs={
        "fuel_type": "TANKLESS_GAS",
        "calendar_age": 3.0,
        "warranty_years": 10.0,
        "house_psi": 58.0,
        "hardness_gpg": 8.0,
        "last_descale_years_ago": 2.0,
        "has_isolation_valves": False,
        "location": "GARAGE",
    },
)


SCENARIOS: Dict[str, Scenario] = {
    scenario.name: scenario
    for scenario in (
        PERFECT_UNIT,
        ATTIC_TIME_BOMB,
        PRESSURE_COOKER,
        MISSING_TANK,
        BASEMENT_TIME_BOMB,
        ZOMBIE_EXPANSION_TANK,
        GALVANIC_NIGHTMARE,
        LEGIONELLA_RISK,
        HYBRID_SUFFOCATION,
        GAS_STARVATION,
        TANKLESS_SCALE_CRISIS,
        NO_ISOLATION_VALVES,
    )
}


def list_scenarios() -> List[str]:
    return list(SCENARIOS)


def get_scenario(name: str) -> Scenario:
    """
    Look up a preset by name (case-insensitive).

    Raises:
        KeyError: Unknown scenario name
    """
    for key, scenario in SCENARIOS.items():
        if key.lower() == name.lower():
            return scenario
    raise KeyError(name)
