"""
Hardness Resolution - Street Estimate vs. Measured Override

A test-strip reading always wins over the utility's street figure. An active
softener replaces the street figure with what actually reaches the heater.
"""

from enum import Enum

from pydantic import BaseModel, Field

from .enums import SoftenerSaltStatus
from .inputs import UnitInputs


# Effective hardness downstream of a softener (GPG)
SOFTENED_HARDNESS_GPG = 0.5
# Assumed when the softener's salt level was not checked
UNVERIFIED_SOFTENER_HARDNESS_GPG = 3.0


class HardnessSource(str, Enum):
    MEASURED = "MEASURED"
    SOFTENED = "SOFTENED"
    STREET = "STREET"


class HardnessConfidence(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ResolvedHardness(BaseModel):
    """Hardness figures the physics and finance layers agree on."""
    street_gpg: float = Field(..., ge=0, description="Utility / ZIP estimate")
    effective_gpg: float = Field(..., ge=0, description="Hardness reaching the heater")
    source: HardnessSource
    confidence: HardnessConfidence
    softener_active: bool = False


def is_softener_active(inputs: UnitInputs) -> bool:
    """A softener with an empty brine tank passes hard water straight through."""
    return inputs.has_softener and inputs.softener_salt_status != SoftenerSaltStatus.EMPTY


def resolve_hardness(inputs: UnitInputs) -> ResolvedHardness:
    """
    Resolve the hardness the unit actually sees.

    Args:
        inputs: Any unit record

    Returns:
        ResolvedHardness with both the street and effective figures
    """
    street = inputs.hardness_gpg
    active = is_softener_active(inputs)

    if inputs.measured_hardness_gpg is not None:
        return ResolvedHardness(
            street_gpg=street,
            effective_gpg=inputs.measured_hardness_gpg,
            source=HardnessSource.MEASURED,
            confidence=HardnessConfidence.HIGH,
            softener_active=active,
        )

    if active:
        if inputs.softener_salt_status == SoftenerSaltStatus.OK:
            return ResolvedHardness(
                street_gpg=street,
                effective_gpg=min(street, SOFTENED_HARDNESS_GPG),
                source=HardnessSource.SOFTENED,
                confidence=HardnessConfidence.MEDIUM,
                softener_active=True,
            )
        return ResolvedHardness(
            street_gpg=street,
            effective_gpg=min(street, UNVERIFIED_SOFTENER_HARDNESS_GPG),
            source=HardnessSource.SOFTENED,
            confidence=HardnessConfidence.LOW,
            softener_active=True,
        )

    return ResolvedHardness(
        street_gpg=street,
        effective_gpg=street,
        source=HardnessSource.STREET,
        confidence=HardnessConfidence.MEDIUM,
    )
