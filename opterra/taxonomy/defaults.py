"""
Default Input Factories - One Fully-Populated Record per Unit Family

Each factory returns a fresh, type-correct record. Overrides are validated
through the same record validators as any caller-supplied input.
"""

from typing import Any, Union

from .enums import FuelType, is_hybrid, is_tankless
from .inputs import HybridInputs, TankInputs, TanklessInputs


class UnknownFuelTypeError(ValueError):
    """Raised when a fuel type string names no supported configuration."""


def default_tank_inputs(fuel_type: FuelType = FuelType.GAS, **overrides: Any) -> TankInputs:
    """Typical 50-gallon storage tank, five years old, open loop."""
    return TankInputs.model_validate({"fuel_type": fuel_type, **overrides})


def default_hybrid_inputs(**overrides: Any) -> HybridInputs:
    """Typical heat-pump unit in an open room with a clean filter."""
    return HybridInputs.model_validate({"fuel_type": FuelType.HYBRID, **overrides})


def default_tankless_inputs(
    fuel_type: FuelType = FuelType.TANKLESS_GAS, **overrides: Any
) -> TanklessInputs:
    """Typical tankless unit with isolation valves, descaled a year ago."""
    data = {"fuel_type": fuel_type, **overrides}
    if FuelType(fuel_type) == FuelType.TANKLESS_ELECTRIC:
        # Electric units run a lower nameplate flow and no gas train
        data.setdefault("rated_flow_gpm", 6.0)
        data.setdefault("btu_rating", 0.0)
    return TanklessInputs.model_validate(data)


def default_inputs(
    fuel_type: Union[FuelType, str], **overrides: Any
) -> Union[TankInputs, HybridInputs, TanklessInputs]:
    """
    Dispatch to the factory for the given fuel type.

    Args:
        fuel_type: FuelType member or its string value
        **overrides: Field values replacing the defaults

    Returns:
        A fully-populated record of the matching variant

    Raises:
        UnknownFuelTypeError: If fuel_type is not a supported configuration
    """
    try:
        fuel = FuelType(fuel_type)
    except ValueError:
        raise UnknownFuelTypeError(f"Unknown fuel type: {fuel_type!r}") from None

    if is_tankless(fuel):
        return default_tankless_inputs(fuel, **overrides)
    if is_hybrid(fuel):
        return default_hybrid_inputs(**overrides)
    return default_tank_inputs(fuel, **overrides)
