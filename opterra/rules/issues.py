"""
Issue Classifier - Declarative Rule Table

Each rule reads a subset of inputs/metrics and emits zero or one Issue.
Rules are evaluated in the fixed order of ISSUE_RULES; that order is also the
tie-break when the verdict picks the worst issue.

Constraints:
- Fixed string templates (no free-form text)
- Unit-family rules are gated by the taxonomy predicates before the
  predicate runs, so a rule only ever sees fields its family defines
- Pressure tiers are mutually exclusive through pressure_regime()
- Band boundaries come from the physics constants, never re-derived here
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from opterra.physics import (
    DescaleStatus,
    LocationAssessment,
    OpterraMetrics,
    PressureRegime,
    SedimentBand,
    ShieldBand,
    classify_location,
)
from opterra.physics.constants import (
    AGE_ANODE_LIMIT,
    BIO_AGE_CRITICAL,
    BIO_AGE_WARNING,
    CHLORAMINE_BURN,
    COMPONENT_HEALTH_FAILING,
    COMPRESSOR_HEALTH_WARNING,
    ERROR_CODES_CHRONIC,
    FAIL_PROB_CRITICAL,
    GALVANIC_BURN,
    HARD_WATER_GPG,
    LIMIT_AGE_FRAGILE,
    LIMIT_FAILPROB_FRAGILE,
    LOCATION_ELEVATED,
    PSI_CODE_MAX,
    PSI_EXPLOSION,
    PSI_PRV_FAILED,
    PSI_PRV_RECOMMENDED,
    PSI_THERMAL_SPIKE,
    SOFTENER_BURN,
)
from opterra.physics.location import NO_DRAIN_PAN_ELEVATED
from opterra.taxonomy import (
    ConnectionType,
    ExpansionTankStatus,
    FilterStatus,
    FlameRodStatus,
    FuelType,
    GasLineSize,
    ResolvedHardness,
    RoomVolume,
    SanitizerType,
    SoftenerSaltStatus,
    TanklessVentStatus,
    TempSetting,
    UnitInputs,
    VentingScenario,
    has_storage_tank,
    is_closed_loop,
    is_hybrid,
    is_tank_body_breach,
    is_tankless,
    needs_expansion_tank,
    resolve_hardness,
)
from .schemas import ActionType, Badge, BadgeColor, Issue, Recommendation, Severity


# ============================================================================
# CONSTANTS
# ============================================================================

STRESS_CRITICAL = 5.0
STRESS_ELEVATED = 2.0
LIABILITY_FAIL_PROB = 30.0
FLOW_DEGRADATION_WARNING = 20.0

# Max BTU/hr at GAS_LINE_REFERENCE_RUN_FT of natural gas pipe
GAS_LINE_CAPACITY_BTU = {
    GasLineSize.HALF_INCH: 120_000,
    GasLineSize.THREE_QUARTER_INCH: 260_000,
    GasLineSize.ONE_INCH: 490_000,
}
GAS_LINE_REFERENCE_RUN_FT = 20.0


def gas_line_capacity_btu(size: GasLineSize, run_length_ft: Optional[float] = None) -> float:
    """Supply capacity, derated with the square root of run length past the reference run."""
    capacity = float(GAS_LINE_CAPACITY_BTU[size])
    if run_length_ft and run_length_ft > GAS_LINE_REFERENCE_RUN_FT:
        capacity *= math.sqrt(GAS_LINE_REFERENCE_RUN_FT / run_length_ft)
    return capacity


# ============================================================================
# Rule Context
# ============================================================================

class UnitScope(str, Enum):
    """Which unit families a rule applies to."""
    ALL = "ALL"
    STORAGE = "STORAGE"
    GAS_TANK = "GAS_TANK"
    HYBRID = "HYBRID"
    TANKLESS = "TANKLESS"
    TANKLESS_GAS = "TANKLESS_GAS"
    TANKLESS_ELECTRIC = "TANKLESS_ELECTRIC"


SCOPE_PREDICATES: Dict[UnitScope, Callable[[FuelType], bool]] = {
    UnitScope.ALL: lambda fuel: True,
    UnitScope.STORAGE: has_storage_tank,
    UnitScope.GAS_TANK: lambda fuel: fuel == FuelType.GAS,
    UnitScope.HYBRID: is_hybrid,
    UnitScope.TANKLESS: is_tankless,
    UnitScope.TANKLESS_GAS: lambda fuel: fuel == FuelType.TANKLESS_GAS,
    UnitScope.TANKLESS_ELECTRIC: lambda fuel: fuel == FuelType.TANKLESS_ELECTRIC,
}


@dataclass(frozen=True)
class IssueContext:
    """Everything a rule may read. Built once per evaluation."""
    inputs: UnitInputs
    metrics: OpterraMetrics
    location: LocationAssessment
    hardness: ResolvedHardness

    @property
    def regime(self) -> PressureRegime:
        return self.metrics.pressure_regime

    @property
    def is_fragile(self) -> bool:
        """Old or weak enough that a flush may open a leak."""
        return (
            self.inputs.calendar_age > LIMIT_AGE_FRAGILE
            or self.metrics.fail_prob > LIMIT_FAILPROB_FRAGILE
        )

    def template_fields(self) -> Dict[str, Any]:
        """Values available to every detail/value/reason template."""
        inputs, metrics = self.inputs, self.metrics
        tankless = is_tankless(inputs.fuel_type)
        fields: Dict[str, Any] = {
            "psi": inputs.house_psi,
            "psi_code_max": PSI_CODE_MAX,
            "psi_explosion": PSI_EXPLOSION,
            "psi_spike": PSI_THERMAL_SPIKE,
            "calendar_age": inputs.calendar_age,
            "bio_age": metrics.bio_age,
            "fail_prob": metrics.fail_prob,
            "stress": metrics.stress_factors.total,
            "temp_stress": metrics.stress_factors.temp,
            "circ_stress": metrics.stress_factors.circ,
            "sediment": metrics.sediment_lbs,
            "shield": metrics.shield_life,
            "hardness": self.hardness.effective_gpg,
            "street_hardness": self.hardness.street_gpg,
            "softener_burn": SOFTENER_BURN,
            "galvanic_burn": GALVANIC_BURN,
            "chloramine_pct": round((CHLORAMINE_BURN - 1.0) * 100),
            "risk_level": metrics.risk_level,
            "risk_label": self.location.label,
            "location": inputs.location.value.replace("_", " ").lower(),
            "vessel": "heat exchanger" if tankless else "tank body",
            "leak_source": (inputs.leak_source.value.replace("_", " ").lower()
                            if inputs.leak_source else "unknown source"),
        }
        fields["leak_site"] = fields["vessel"] if is_tank_body_breach(inputs) else fields["leak_source"]
        if is_hybrid(inputs.fuel_type):
            fields.update(
                efficiency=metrics.hybrid_efficiency,
                compressor=inputs.compressor_health,
            )
        if tankless:
            fields.update(
                errors=inputs.error_code_count,
                scale=metrics.scale_buildup_score,
                flow_loss=metrics.flow_degradation,
                btu=inputs.btu_rating,
                gas_line=inputs.gas_line_size.value,
                btu_max=gas_line_capacity_btu(inputs.gas_line_size, inputs.gas_run_length),
            )
        return fields


# ============================================================================
# Templates
# ============================================================================

@dataclass(frozen=True)
class VerdictTemplate:
    """Fixed verdict text attached to a rule."""
    action: ActionType
    title: str
    reason: str
    badge: Badge
    color: BadgeColor
    urgent: bool = False

    def render(self, fields: Dict[str, Any], source_issue_id: Optional[str] = None) -> Recommendation:
        return Recommendation(
            action=self.action,
            title=self.title,
            reason=self.reason.format(**fields),
            badge=self.badge,
            badge_color=self.color,
            urgent=self.urgent,
            source_issue_id=source_issue_id,
        )


VerdictSelector = Callable[[IssueContext], Optional[VerdictTemplate]]


def _always(template: VerdictTemplate) -> VerdictSelector:
    return lambda ctx: template


@dataclass(frozen=True)
class IssueRule:
    """
    One row of the rule table.

    detail and value are str.format templates over IssueContext.template_fields().
    """
    id: str
    severity: Severity
    title: str
    detail: str
    value: str
    applies: Callable[[IssueContext], bool]
    scope: UnitScope = UnitScope.ALL
    verdict: Optional[VerdictSelector] = field(default=None, compare=False)

    def in_scope(self, fuel_type: FuelType) -> bool:
        return SCOPE_PREDICATES[self.scope](fuel_type)

    def evaluate(self, ctx: IssueContext, fields: Optional[Dict[str, Any]] = None) -> Optional[Issue]:
        """Emit the Issue if the unit is in scope and the predicate holds."""
        if not self.in_scope(ctx.inputs.fuel_type) or not self.applies(ctx):
            return None
        values = fields if fields is not None else ctx.template_fields()
        return Issue(
            id=self.id,
            severity=self.severity,
            title=self.title,
            detail=self.detail.format(**values),
            value=self.value.format(**values),
        )


# ============================================================================
# Verdict Templates
# ============================================================================

FAILED_PRV = VerdictTemplate(
    ActionType.REPAIR, "Failed PRV Detected",
    "A PRV is installed but the house still sees {psi:.0f} PSI. Replace the valve.",
    Badge.SERVICE, BadgeColor.ORANGE, urgent=True,
)
EXPANSION_TANK_FAILURE = VerdictTemplate(
    ActionType.REPAIR, "Expansion Tank Failure",
    "The expansion tank is not absorbing thermal expansion; pressure reads {psi:.0f} PSI.",
    Badge.SERVICE, BadgeColor.ORANGE, urgent=True,
)
PRESSURE_VIOLATION = VerdictTemplate(
    ActionType.REPAIR, "Critical Pressure Violation",
    "{psi:.0f} PSI exceeds the {psi_code_max:.0f} PSI code limit. Install a PRV.",
    Badge.SERVICE, BadgeColor.ORANGE, urgent=True,
)
PRV_NOT_REGULATING = VerdictTemplate(
    ActionType.REPAIR, "PRV Not Regulating",
    "The PRV lets {psi:.0f} PSI through. Adjust or replace it before it reaches code limits.",
    Badge.SERVICE, BadgeColor.YELLOW,
)
PRESSURE_OPTIMIZATION = VerdictTemplate(
    ActionType.UPGRADE, "Pressure Optimization",
    "A PRV would bring {psi:.0f} PSI down to a safe 60 PSI and extend unit life.",
    Badge.SERVICE, BadgeColor.YELLOW,
)
MISSING_THERMAL_EXPANSION = VerdictTemplate(
    ActionType.REPAIR, "Missing Thermal Expansion",
    "Closed-loop system without an expansion tank. Install one to stop pressure spikes.",
    Badge.SERVICE, BadgeColor.ORANGE, urgent=True,
)
SEDIMENT_LOCKOUT = VerdictTemplate(
    ActionType.REPLACE, "Sediment Lockout",
    "{sediment:.1f} lbs of hardened sediment; flushing is no longer safe. Plan a replacement.",
    Badge.REPLACE, BadgeColor.RED,
)
MAINTENANCE_RISK = VerdictTemplate(
    ActionType.PASS, "Maintenance Risk",
    "{sediment:.1f} lbs of sediment, but the tank is too fragile to flush safely. Monitor it.",
    Badge.MONITOR, BadgeColor.YELLOW,
)
PERFORMANCE_FLUSH = VerdictTemplate(
    ActionType.MAINTAIN, "Performance Flush",
    "{sediment:.1f} lbs of sediment is costing efficiency. A flush restores it.",
    Badge.SERVICE, BadgeColor.GREEN,
)
ANODE_REPLACEMENT = VerdictTemplate(
    ActionType.REPAIR, "Anode Replacement",
    "The anode is consumed. A new rod restores corrosion protection.",
    Badge.SERVICE, BadgeColor.GREEN,
)
ANODE_REFRESH = VerdictTemplate(
    ActionType.MAINTAIN, "Anode Refresh",
    "About {shield:.1f} years of anode protection remain. Replace the rod at the next service.",
    Badge.SERVICE, BadgeColor.GREEN,
)
REFILL_SALT = VerdictTemplate(
    ActionType.MAINTAIN, "Refill Softener Salt",
    "The softener is out of salt; {street_hardness:.0f} GPG water is reaching the heater.",
    Badge.SERVICE, BadgeColor.GREEN,
)
DIELECTRIC_UNIONS = VerdictTemplate(
    ActionType.REPAIR, "Install Dielectric Unions",
    "Direct copper-to-steel connections are corroding the tank fittings.",
    Badge.SERVICE, BadgeColor.YELLOW,
)
RAISE_TEMPERATURE = VerdictTemplate(
    ActionType.MAINTAIN, "Raise Temperature Setting",
    "Stored water below 120F can support Legionella. Raise the setpoint.",
    Badge.SERVICE, BadgeColor.YELLOW,
)
INSTALL_DRAIN_PAN = VerdictTemplate(
    ActionType.UPGRADE, "Install Drain Pan",
    "A unit in the {location} needs a drain pan to protect the ceilings below.",
    Badge.SERVICE, BadgeColor.ORANGE,
)
LIABILITY_HAZARD = VerdictTemplate(
    ActionType.REPLACE, "Liability Hazard",
    "{fail_prob:.0f}% failure probability in a {risk_label} risk location. Replace before it leaks.",
    Badge.REPLACE, BadgeColor.RED,
)
FILTER_CLOG = VerdictTemplate(
    ActionType.REPAIR, "Filter Clog",
    "The air filter is clogged; the heat pump is starving for air.",
    Badge.SERVICE, BadgeColor.ORANGE, urgent=True,
)
CLEAN_AIR_FILTER = VerdictTemplate(
    ActionType.MAINTAIN, "Clean Air Filter",
    "A dirty air filter is costing heat pump efficiency.",
    Badge.SERVICE, BadgeColor.GREEN,
)
CONDENSATE_BLOCKAGE = VerdictTemplate(
    ActionType.REPAIR, "Condensate Blockage",
    "The condensate line is blocked and can overflow or trip the unit.",
    Badge.SERVICE, BadgeColor.ORANGE, urgent=True,
)
INSUFFICIENT_AIRFLOW = VerdictTemplate(
    ActionType.UPGRADE, "Insufficient Airflow",
    "A sealed closet starves the heat pump. Add louvers or ducting.",
    Badge.SERVICE, BadgeColor.YELLOW,
)
COMPRESSOR_DEGRADATION = VerdictTemplate(
    ActionType.REPAIR, "Compressor Degradation",
    "Compressor health is {compressor:.0f}%. The unit is leaning on resistance heat.",
    Badge.SERVICE, BadgeColor.ORANGE,
)
VENT_RESTRICTION = VerdictTemplate(
    ActionType.REPAIR, "Vent Restriction",
    "The exhaust vent is restricted. Clear it before the unit locks out.",
    Badge.SERVICE, BadgeColor.ORANGE, urgent=True,
)
SYSTEM_ERROR_CODES = VerdictTemplate(
    ActionType.REPAIR, "System Error Codes",
    "{errors} error codes logged. Diagnose before they become chronic.",
    Badge.SERVICE, BadgeColor.ORANGE, urgent=True,
)
GAS_STARVATION = VerdictTemplate(
    ActionType.UPGRADE, "Gas Supply Starvation",
    "A {btu:,.0f} BTU burner on a {gas_line}\" line rated for {btu_max:,.0f} BTU. Upsize the gas line.",
    Badge.CRITICAL, BadgeColor.RED, urgent=True,
)
INSTALL_ISOLATION_VALVES = VerdictTemplate(
    ActionType.UPGRADE, "Install Isolation Valves",
    "Service valves are required before the unit can be descaled.",
    Badge.SERVICE, BadgeColor.YELLOW,
)
SCALE_LOCKOUT = VerdictTemplate(
    ActionType.REPLACE, "Scale Lockout",
    "Scale score {scale:.0f}: the heat exchanger is beyond descaling.",
    Badge.REPLACE, BadgeColor.RED,
)
RUN_TO_FAILURE = VerdictTemplate(
    ActionType.PASS, "Run to Failure",
    "Years of undescaled hard water; descaling now risks opening a leak. Budget for replacement.",
    Badge.MONITOR, BadgeColor.ORANGE,
)
DESCALE_CRITICAL = VerdictTemplate(
    ActionType.MAINTAIN, "Descale Critical",
    "Scale score {scale:.0f}. Descale now to avoid a lockout.",
    Badge.SERVICE, BadgeColor.ORANGE, urgent=True,
)
DESCALE_REQUIRED = VerdictTemplate(
    ActionType.MAINTAIN, "Descale Required",
    "Scale score {scale:.0f}. Schedule a descale.",
    Badge.SERVICE, BadgeColor.YELLOW,
)
IGNITION_REPAIR = VerdictTemplate(
    ActionType.REPAIR, "Ignition Service",
    "The ignition system is failing. Replace the worn component.",
    Badge.SERVICE, BadgeColor.ORANGE,
)
ELEMENT_REPAIR = VerdictTemplate(
    ActionType.REPAIR, "Element Replacement",
    "A heating element is failing.",
    Badge.SERVICE, BadgeColor.ORANGE,
)
CLEAN_INLET_FILTER = VerdictTemplate(
    ActionType.MAINTAIN, "Clean Inlet Filter",
    "The inlet screen is clogged and restricting flow.",
    Badge.SERVICE, BadgeColor.GREEN,
)


# ============================================================================
# Verdict Selectors
# ============================================================================

def _pressure_verdict(ctx: IssueContext) -> VerdictTemplate:
    if ctx.inputs.has_prv:
        return FAILED_PRV
    if ctx.inputs.has_exp_tank:
        return EXPANSION_TANK_FAILURE
    return PRESSURE_VIOLATION


def _no_prv_verdict(ctx: IssueContext) -> Optional[VerdictTemplate]:
    young = ctx.inputs.calendar_age < AGE_ANODE_LIMIT
    if young and ctx.regime in (PressureRegime.NOMINAL, PressureRegime.ELEVATED):
        return PRESSURE_OPTIMIZATION
    return None


def _sediment_verdict(ctx: IssueContext) -> VerdictTemplate:
    return MAINTENANCE_RISK if ctx.is_fragile else PERFORMANCE_FLUSH


def _anode_verdict(template: VerdictTemplate) -> VerdictSelector:
    return lambda ctx: template if ctx.inputs.calendar_age < AGE_ANODE_LIMIT else None


def _liability_verdict(ctx: IssueContext) -> Optional[VerdictTemplate]:
    return LIABILITY_HAZARD if ctx.metrics.fail_prob > LIABILITY_FAIL_PROB else None


# ============================================================================
# Predicates
# ============================================================================

def _exp_tank_waterlogged(ctx: IssueContext) -> bool:
    inputs = ctx.inputs
    return (
        is_closed_loop(inputs)
        and inputs.has_exp_tank
        and inputs.exp_tank_status == ExpansionTankStatus.WATERLOGGED
    )


def _exp_tank_missing(ctx: IssueContext) -> bool:
    return needs_expansion_tank(ctx.inputs) and not _exp_tank_waterlogged(ctx)


def _ignition_failing(ctx: IssueContext) -> bool:
    inputs = ctx.inputs
    return (
        inputs.flame_rod_status == FlameRodStatus.FAILING
        or inputs.igniter_health < COMPONENT_HEALTH_FAILING
    )


def _gas_line_undersized(ctx: IssueContext) -> bool:
    inputs = ctx.inputs
    return inputs.btu_rating > gas_line_capacity_btu(inputs.gas_line_size, inputs.gas_run_length)


# ============================================================================
# RULE TABLE - evaluation order is significant
# ============================================================================

ISSUE_RULES: Tuple[IssueRule, ...] = (
    # --- Containment ---
    IssueRule(
        "leak", Severity.CRITICAL, "Active Leak",
        "Water is escaping from the {leak_site}.",
        "Leaking",
        lambda ctx: ctx.inputs.is_leaking,
    ),
    IssueRule(
        "rust", Severity.CRITICAL, "Visible Corrosion",
        "Rust on the {vessel} means the steel is failing from the outside in.",
        "Present",
        lambda ctx: ctx.inputs.visual_rust,
    ),

    # --- Pressure (explosion checked before violation) ---
    IssueRule(
        "explosion", Severity.CRITICAL, "Explosion Hazard",
        "House pressure of {psi:.0f} PSI exceeds the {psi_explosion:.0f} PSI relief threshold.",
        "{psi:.0f} PSI",
        lambda ctx: ctx.regime == PressureRegime.EXPLOSION,
    ),
    IssueRule(
        "pressure_high", Severity.CRITICAL, "Critical Pressure Violation",
        "{psi:.0f} PSI exceeds the {psi_code_max:.0f} PSI plumbing code maximum.",
        "{psi:.0f} PSI",
        lambda ctx: ctx.regime == PressureRegime.VIOLATION,
        verdict=_pressure_verdict,
    ),
    IssueRule(
        "pressure_elevated", Severity.WARNING, "Elevated Pressure",
        "{psi:.0f} PSI is within code but accelerates wear on the unit and fixtures.",
        "{psi:.0f} PSI",
        lambda ctx: ctx.regime == PressureRegime.ELEVATED,
    ),
    IssueRule(
        "no_prv", Severity.WARNING, "No Pressure Reducing Valve",
        "Street pressure reaches the house unregulated at {psi:.0f} PSI.",
        "Not installed",
        lambda ctx: not ctx.inputs.has_prv and ctx.inputs.house_psi >= PSI_PRV_RECOMMENDED,
        verdict=_no_prv_verdict,
    ),
    IssueRule(
        "prv_failed", Severity.WARNING, "PRV Not Regulating",
        "A PRV is installed but the house still sees {psi:.0f} PSI.",
        "{psi:.0f} PSI",
        lambda ctx: ctx.inputs.has_prv and ctx.inputs.house_psi > PSI_PRV_FAILED,
        verdict=_always(PRV_NOT_REGULATING),
    ),

    # --- Thermal expansion ---
    IssueRule(
        "no_exp_tank", Severity.CRITICAL, "Missing Expansion Tank",
        "Closed-loop system with no expansion tank: every heating cycle spikes "
        "pressure toward {psi_spike:.0f} PSI.",
        "Required",
        _exp_tank_missing,
        scope=UnitScope.STORAGE,
        verdict=_always(MISSING_THERMAL_EXPANSION),
    ),
    IssueRule(
        "exp_tank_waterlogged", Severity.CRITICAL, "Expansion Tank Failed",
        "The expansion tank is waterlogged and no longer absorbs thermal expansion.",
        "Waterlogged",
        _exp_tank_waterlogged,
        scope=UnitScope.STORAGE,
        verdict=_always(EXPANSION_TANK_FAILURE),
    ),

    # --- Life ---
    IssueRule(
        "bio_age_critical", Severity.CRITICAL, "Biological Age Critical",
        "Stress has aged this {calendar_age:.0f}-year-old unit to {bio_age:.1f} biological years.",
        "{bio_age:.1f} yrs",
        lambda ctx: ctx.metrics.bio_age >= BIO_AGE_CRITICAL,
    ),
    IssueRule(
        "fail_prob_critical", Severity.CRITICAL, "High Failure Probability",
        "{fail_prob:.0f}% probability of failure within the next year.",
        "{fail_prob:.0f}%",
        lambda ctx: ctx.metrics.fail_prob >= FAIL_PROB_CRITICAL,
    ),
    IssueRule(
        "bio_age_warn", Severity.WARNING, "Accelerated Aging",
        "Stress has aged this unit to {bio_age:.1f} biological years.",
        "{bio_age:.1f} yrs",
        lambda ctx: BIO_AGE_WARNING <= ctx.metrics.bio_age < BIO_AGE_CRITICAL,
    ),
    IssueRule(
        "calendar_age", Severity.INFO, "Aging Unit",
        "At {calendar_age:.0f} years this unit has reached the age where failures start to cluster.",
        "{calendar_age:.0f} yrs",
        lambda ctx: (ctx.inputs.calendar_age >= LIMIT_AGE_FRAGILE
                     and ctx.metrics.fail_prob < FAIL_PROB_CRITICAL),
    ),

    # --- Storage consumables ---
    IssueRule(
        "sediment_lockout", Severity.CRITICAL, "Sediment Lockout",
        "{sediment:.1f} lbs of hardened sediment. Flushing now risks dislodging a leak.",
        "{sediment:.1f} lbs",
        lambda ctx: ctx.metrics.sediment_band == SedimentBand.LOCKOUT,
        scope=UnitScope.STORAGE,
        verdict=_always(SEDIMENT_LOCKOUT),
    ),
    IssueRule(
        "sediment_service", Severity.WARNING, "Flush Recommended",
        "{sediment:.1f} lbs of sediment is insulating the heat source and wasting energy.",
        "{sediment:.1f} lbs",
        lambda ctx: ctx.metrics.sediment_band == SedimentBand.SERVICE,
        scope=UnitScope.STORAGE,
        verdict=_sediment_verdict,
    ),
    IssueRule(
        "anode_depleted", Severity.WARNING, "Anode Depleted",
        "The sacrificial anode is consumed; the tank steel is now corroding.",
        "0 yrs",
        lambda ctx: ctx.metrics.shield_band == ShieldBand.DEPLETED,
        scope=UnitScope.STORAGE,
        verdict=_anode_verdict(ANODE_REPLACEMENT),
    ),
    IssueRule(
        "anode_low", Severity.INFO, "Anode Running Low",
        "About {shield:.1f} years of anode protection remain.",
        "{shield:.1f} yrs",
        lambda ctx: ctx.metrics.shield_band == ShieldBand.LOW,
        scope=UnitScope.STORAGE,
        verdict=_anode_verdict(ANODE_REFRESH),
    ),
    IssueRule(
        "softener", Severity.WARNING, "Softened Water",
        "Softened water consumes the anode about {softener_burn}x faster.",
        "{softener_burn}x",
        lambda ctx: ctx.hardness.softener_active,
        scope=UnitScope.STORAGE,
    ),
    IssueRule(
        "softener_salt_empty", Severity.WARNING, "Softener Out of Salt",
        "Hard water ({street_hardness:.0f} GPG) is bypassing the softener.",
        "Empty",
        lambda ctx: (ctx.inputs.has_softener
                     and ctx.inputs.softener_salt_status == SoftenerSaltStatus.EMPTY),
        verdict=_always(REFILL_SALT),
    ),
    IssueRule(
        "galvanic", Severity.WARNING, "Galvanic Connection",
        "Copper threaded directly to the steel nipple burns the anode {galvanic_burn}x faster.",
        "Direct copper",
        lambda ctx: ctx.inputs.connection_type == ConnectionType.DIRECT_COPPER,
        scope=UnitScope.STORAGE,
        verdict=_always(DIELECTRIC_UNIONS),
    ),
    IssueRule(
        "bacterial_growth", Severity.WARNING, "Legionella Risk",
        "Stored water below 120F can support Legionella growth.",
        "LOW setpoint",
        lambda ctx: ctx.metrics.bacterial_growth_warning,
        scope=UnitScope.STORAGE,
        verdict=_always(RAISE_TEMPERATURE),
    ),

    # --- Operating conditions ---
    IssueRule(
        "circ_pump", Severity.INFO, "Recirculation Pump",
        "Constant circulation adds {circ_stress}x wear.",
        "{circ_stress}x",
        lambda ctx: ctx.metrics.stress_factors.circ > 1.0,
    ),
    IssueRule(
        "temp_high", Severity.WARNING, "High Temperature Setting",
        "The HOT setpoint ages the unit {temp_stress}x faster and scalds at the tap.",
        "{temp_stress}x",
        lambda ctx: ctx.inputs.temp_setting == TempSetting.HOT,
    ),
    IssueRule(
        "hard_water", Severity.INFO, "Hard Water",
        "{street_hardness:.0f} GPG untreated water is scaling every fixture in the house.",
        "{street_hardness:.0f} GPG",
        lambda ctx: not ctx.hardness.softener_active and ctx.hardness.street_gpg > HARD_WATER_GPG,
    ),
    IssueRule(
        "chloramine", Severity.INFO, "Chloramine Sanitizer",
        "Chloramine increases anode consumption by about {chloramine_pct}%.",
        "+{chloramine_pct}%",
        lambda ctx: ctx.inputs.sanitizer_type == SanitizerType.CHLORAMINE,
        scope=UnitScope.STORAGE,
    ),
    IssueRule(
        "orphaned_flue", Severity.WARNING, "Orphaned Flue",
        "The chimney is oversized for the water heater alone; replacement needs a liner.",
        "Liner required",
        lambda ctx: ctx.inputs.venting_scenario == VentingScenario.ORPHANED_FLUE,
        scope=UnitScope.GAS_TANK,
    ),

    # --- Location ---
    IssueRule(
        "no_drain_pan", Severity.CRITICAL, "No Drain Pan in High-Risk Location",
        "A leak in the {location} will reach finished ceilings below.",
        "Required",
        lambda ctx: NO_DRAIN_PAN_ELEVATED in ctx.location.violations,
        verdict=_always(INSTALL_DRAIN_PAN),
    ),
    IssueRule(
        "location_critical", Severity.CRITICAL, "High-Risk Location",
        "Location risk level {risk_level} ({risk_label}): a failure here causes major damage.",
        "Level {risk_level}",
        lambda ctx: ctx.location.is_critical,
        verdict=_liability_verdict,
    ),
    IssueRule(
        "location_warn", Severity.WARNING, "Elevated-Risk Location",
        "Location risk level {risk_level}: a leak here reaches finished space.",
        "Level {risk_level}",
        lambda ctx: ctx.location.risk_level == LOCATION_ELEVATED,
        verdict=_liability_verdict,
    ),

    # --- Stress ---
    IssueRule(
        "stress_critical", Severity.CRITICAL, "Extreme Stress Load",
        "Combined stress of {stress:.1f}x ages the unit {stress:.1f} years per calendar year.",
        "{stress:.1f}x",
        lambda ctx: ctx.metrics.stress_factors.total >= STRESS_CRITICAL,
    ),
    IssueRule(
        "stress_elevated", Severity.WARNING, "Elevated Stress Load",
        "Combined stress of {stress:.1f}x is shortening service life.",
        "{stress:.1f}x",
        lambda ctx: STRESS_ELEVATED <= ctx.metrics.stress_factors.total < STRESS_CRITICAL,
    ),

    # --- Hybrid ---
    IssueRule(
        "air_filter_clogged", Severity.CRITICAL, "Air Filter Clogged",
        "The heat pump is starving for air; efficiency is down to {efficiency:.0f}%.",
        "Clogged",
        lambda ctx: ctx.inputs.air_filter_status == FilterStatus.CLOGGED,
        scope=UnitScope.HYBRID,
        verdict=_always(FILTER_CLOG),
    ),
    IssueRule(
        "air_filter_dirty", Severity.WARNING, "Air Filter Dirty",
        "A dirty filter has cut heat pump efficiency to {efficiency:.0f}%.",
        "Dirty",
        lambda ctx: ctx.inputs.air_filter_status == FilterStatus.DIRTY,
        scope=UnitScope.HYBRID,
        verdict=_always(CLEAN_AIR_FILTER),
    ),
    IssueRule(
        "condensate_blocked", Severity.CRITICAL, "Condensate Blocked",
        "The condensate line is blocked and can overflow or trip the unit.",
        "Blocked",
        lambda ctx: not ctx.inputs.is_condensate_clear,
        scope=UnitScope.HYBRID,
        verdict=_always(CONDENSATE_BLOCKAGE),
    ),
    IssueRule(
        "sealed_closet", Severity.WARNING, "Sealed Closet",
        "The heat pump is recirculating its own cold exhaust air.",
        "Sealed",
        lambda ctx: ctx.inputs.room_volume_type == RoomVolume.CLOSET_SEALED,
        scope=UnitScope.HYBRID,
        verdict=_always(INSUFFICIENT_AIRFLOW),
    ),
    IssueRule(
        "compressor_weak", Severity.WARNING, "Compressor Degraded",
        "Compressor health is {compressor:.0f}%.",
        "{compressor:.0f}%",
        lambda ctx: ctx.inputs.compressor_health < COMPRESSOR_HEALTH_WARNING,
        scope=UnitScope.HYBRID,
        verdict=_always(COMPRESSOR_DEGRADATION),
    ),

    # --- Tankless ---
    IssueRule(
        "vent_blocked", Severity.CRITICAL, "Vent Blocked",
        "The exhaust vent is blocked; combustion gases cannot leave the unit.",
        "Blocked",
        lambda ctx: ctx.inputs.tankless_vent_status == TanklessVentStatus.BLOCKED,
        scope=UnitScope.TANKLESS,
    ),
    IssueRule(
        "vent_restricted", Severity.WARNING, "Vent Restricted",
        "The exhaust vent is partially restricted.",
        "Restricted",
        lambda ctx: ctx.inputs.tankless_vent_status == TanklessVentStatus.RESTRICTED,
        scope=UnitScope.TANKLESS,
        verdict=_always(VENT_RESTRICTION),
    ),
    IssueRule(
        "error_codes_chronic", Severity.CRITICAL, "Chronic Error Codes",
        "{errors} error codes logged; the control board is failing.",
        "{errors} codes",
        lambda ctx: ctx.inputs.error_code_count > ERROR_CODES_CHRONIC,
        scope=UnitScope.TANKLESS,
    ),
    IssueRule(
        "error_codes", Severity.WARNING, "Error Codes Logged",
        "{errors} error codes logged.",
        "{errors} codes",
        lambda ctx: 0 < ctx.inputs.error_code_count <= ERROR_CODES_CHRONIC,
        scope=UnitScope.TANKLESS,
        verdict=_always(SYSTEM_ERROR_CODES),
    ),
    IssueRule(
        "gas_line_undersized", Severity.CRITICAL, "Gas Line Undersized",
        "A {btu:,.0f} BTU burner on a {gas_line}\" line rated for {btu_max:,.0f} BTU.",
        "{btu:,.0f} BTU",
        _gas_line_undersized,
        scope=UnitScope.TANKLESS_GAS,
        verdict=_always(GAS_STARVATION),
    ),
    IssueRule(
        "no_isolation_valves", Severity.CRITICAL, "No Isolation Valves",
        "Without service valves the unit cannot be descaled or flushed.",
        "Missing",
        lambda ctx: not ctx.inputs.has_isolation_valves,
        scope=UnitScope.TANKLESS,
        verdict=_always(INSTALL_ISOLATION_VALVES),
    ),
    IssueRule(
        "descale_lockout", Severity.CRITICAL, "Scale Lockout",
        "Scale score {scale:.0f}: the heat exchanger is beyond descaling.",
        "{scale:.0f}",
        lambda ctx: ctx.metrics.descale_status == DescaleStatus.LOCKOUT,
        scope=UnitScope.TANKLESS,
        verdict=_always(SCALE_LOCKOUT),
    ),
    IssueRule(
        "descale_run_to_failure", Severity.WARNING, "Run to Failure",
        "Hard water and no descale history: scale has set in the heat exchanger.",
        "{scale:.0f}",
        lambda ctx: ctx.metrics.descale_status == DescaleStatus.RUN_TO_FAILURE,
        scope=UnitScope.TANKLESS,
        verdict=_always(RUN_TO_FAILURE),
    ),
    IssueRule(
        "descale_critical", Severity.WARNING, "Descale Critical",
        "Scale score {scale:.0f} is approaching lockout.",
        "{scale:.0f}",
        lambda ctx: ctx.metrics.descale_status == DescaleStatus.CRITICAL,
        scope=UnitScope.TANKLESS,
        verdict=_always(DESCALE_CRITICAL),
    ),
    IssueRule(
        "descale_due", Severity.WARNING, "Descale Due",
        "Scale score {scale:.0f}. A descale is due.",
        "{scale:.0f}",
        lambda ctx: ctx.metrics.descale_status == DescaleStatus.DUE,
        scope=UnitScope.TANKLESS,
        verdict=_always(DESCALE_REQUIRED),
    ),
    IssueRule(
        "ignition_failing", Severity.WARNING, "Ignition Failing",
        "The flame sensor or igniter is failing.",
        "Failing",
        _ignition_failing,
        scope=UnitScope.TANKLESS_GAS,
        verdict=_always(IGNITION_REPAIR),
    ),
    IssueRule(
        "element_failing", Severity.WARNING, "Heating Element Failing",
        "A heating element is below half its rated output.",
        "Failing",
        lambda ctx: ctx.inputs.element_health < COMPONENT_HEALTH_FAILING,
        scope=UnitScope.TANKLESS_ELECTRIC,
        verdict=_always(ELEMENT_REPAIR),
    ),
    IssueRule(
        "inlet_filter_clogged", Severity.WARNING, "Inlet Filter Clogged",
        "The inlet screen is clogged and restricting flow.",
        "Clogged",
        lambda ctx: ctx.inputs.inlet_filter_status == FilterStatus.CLOGGED,
        scope=UnitScope.TANKLESS,
        verdict=_always(CLEAN_INLET_FILTER),
    ),
    IssueRule(
        "flow_degraded", Severity.WARNING, "Flow Degradation",
        "Delivered flow is {flow_loss:.0f}% below rating.",
        "-{flow_loss:.0f}%",
        lambda ctx: (ctx.metrics.flow_degradation or 0.0) >= FLOW_DEGRADATION_WARNING,
        scope=UnitScope.TANKLESS,
    ),
)

RULES_BY_ID: Dict[str, IssueRule] = {rule.id: rule for rule in ISSUE_RULES}


# ============================================================================
# Evaluation
# ============================================================================

def build_context(inputs: UnitInputs, metrics: OpterraMetrics) -> IssueContext:
    return IssueContext(
        inputs=inputs,
        metrics=metrics,
        location=classify_location(inputs),
        hardness=resolve_hardness(inputs),
    )


def detect_issues(inputs: UnitInputs, metrics: OpterraMetrics) -> List[Issue]:
    """
    Evaluate the full rule table.

    Args:
        inputs: Validated unit record
        metrics: Physics output for the same record

    Returns:
        Issues in rule-table order
    """
    ctx = build_context(inputs, metrics)
    fields = ctx.template_fields()
    issues = []
    for rule in ISSUE_RULES:
        issue = rule.evaluate(ctx, fields)
        if issue is not None:
            issues.append(issue)
    return issues
