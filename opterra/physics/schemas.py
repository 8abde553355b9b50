"""
Physics Schemas - Metrics Output Models

Everything the stress, aging, consumable and location calculators produce.
All models are fresh per invocation; nothing is mutated after construction.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PressureRegime(str, Enum):
    """PSI regime shared by the stress curve and the issue rules."""
    NOMINAL = "NOMINAL"        # < 70
    ELEVATED = "ELEVATED"      # 70-80 inclusive
    VIOLATION = "VIOLATION"    # > 80 and <= 150
    EXPLOSION = "EXPLOSION"    # > 150


class SedimentBand(str, Enum):
    NORMAL = "NORMAL"
    SERVICE = "SERVICE"
    LOCKOUT = "LOCKOUT"


class ShieldBand(str, Enum):
    OK = "OK"
    LOW = "LOW"
    DEPLETED = "DEPLETED"


class FlushStatus(str, Enum):
    OPTIMAL = "optimal"
    ADVISORY = "advisory"
    DUE = "due"
    CRITICAL = "critical"
    LOCKOUT = "lockout"


class AnodeStatus(str, Enum):
    PROTECTED = "protected"
    INSPECT = "inspect"
    REPLACE = "replace"
    NAKED = "naked"


class DescaleStatus(str, Enum):
    OPTIMAL = "optimal"
    DUE = "due"
    CRITICAL = "critical"
    LOCKOUT = "lockout"
    IMPOSSIBLE = "impossible"          # No isolation valves to connect a pump
    RUN_TO_FAILURE = "run_to_failure"  # Scale has set; descaling risks a leak


class SafeModeGate(str, Enum):
    """Tankless override gates, evaluated in this order."""
    DEAD = "DEAD"
    DYING = "DYING"
    DIRTY = "DIRTY"
    HEALTHY = "HEALTHY"


class StressFactors(BaseModel):
    """Independent aging multipliers and their composition."""
    pressure: float = Field(..., ge=1.0)
    temp: float = Field(..., gt=0)
    circ: float = Field(..., ge=1.0)
    loop: float = Field(..., ge=1.0)
    usage_intensity: float = Field(..., gt=0)
    undersizing: float = Field(..., ge=1.0)
    mechanical: float = Field(..., description="pressure x loop x undersizing")
    chemical: float = Field(..., description="temp x usage_intensity")
    total: float = Field(..., description="mechanical x chemical x circ, capped")


class SedimentEstimate(BaseModel):
    sediment_lbs: float = Field(..., ge=0)
    sediment_rate: float = Field(..., ge=0, description="lbs per year")
    band: SedimentBand
    flush_status: FlushStatus
    months_to_flush: Optional[int] = Field(None, description="None = never at current rate")
    months_to_lockout: Optional[int] = None


class ShieldEstimate(BaseModel):
    shield_life: float = Field(..., ge=0, description="Anode years remaining")
    band: ShieldBand
    anode_status: AnodeStatus
    depletion_percent: float = Field(..., ge=0, le=100)
    burn_rate: float = Field(..., ge=1.0)
    burn_factors: Dict[str, float] = Field(default_factory=dict)


class DescaleEstimate(BaseModel):
    status: DescaleStatus = Field(..., description="Effective status after serviceability")
    scale_status: DescaleStatus = Field(..., description="Status from scale alone")
    never_descaled: bool = False
    scale_score: float = Field(..., ge=0, le=100)
    years_since_descale: float = Field(..., ge=0)
    months_to_due: int
    flow_degradation: float = Field(..., ge=0, le=100, description="% of rated flow lost")


class LocationAssessment(BaseModel):
    """Installation risk classification."""
    risk_level: int = Field(..., ge=1, le=5)
    label: str
    color: str
    is_critical: bool
    is_elevated: bool
    violations: List[str] = Field(default_factory=list)


class ProjectedHealth(BaseModel):
    months_ahead: int = Field(..., ge=0)
    bio_age: float
    fail_prob: float
    health_score: int = Field(..., ge=0, le=100)


class OpterraMetrics(BaseModel):
    """
    Complete physics output for one unit.

    Tankless units report zero sediment and shield life; their
    consumable state lives in descale_status / scale_buildup_score.
    """
    bio_age: float
    fail_prob: float = Field(..., ge=0, le=100)
    health_score: int = Field(..., ge=0, le=100)
    years_left_current: float
    years_left_optimized: float
    life_extension: float = Field(..., ge=0)
    aging_rate: float = Field(..., ge=1.0)
    optimized_rate: float = Field(..., ge=1.0)
    weibull_eta: float = Field(..., gt=0, description="Characteristic life in bio-years")

    effective_psi: float
    pressure_regime: PressureRegime
    is_transient_pressure: bool = False
    effective_hardness_gpg: float
    street_hardness_gpg: float

    sediment_lbs: float = 0.0
    sediment_rate: float = 0.0
    sediment_band: SedimentBand = SedimentBand.NORMAL
    flush_status: Optional[FlushStatus] = None
    months_to_flush: Optional[int] = None
    months_to_lockout: Optional[int] = None

    shield_life: float = 0.0
    shield_band: Optional[ShieldBand] = None
    anode_status: Optional[AnodeStatus] = None
    anode_depletion_percent: float = 0.0
    anode_burn_rate: float = 1.0
    anode_burn_factors: Dict[str, float] = Field(default_factory=dict)

    stress_factors: StressFactors
    primary_stressor: str
    risk_level: int = Field(..., ge=1, le=5)
    bacterial_growth_warning: bool = False

    # Tankless
    safe_mode_gate: Optional[SafeModeGate] = None
    safe_mode_reason: Optional[str] = None
    descale_status: Optional[DescaleStatus] = None
    scale_buildup_score: Optional[float] = None
    months_to_descale: Optional[int] = None
    flow_degradation: Optional[float] = None

    # Hybrid
    hybrid_efficiency: Optional[float] = None
