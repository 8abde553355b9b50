"""
Maintenance Scheduler - Unit-Type-Aware Service Plan

Tank: flush + anode. Tankless: isolation valves, inlet filter, descale.
Hybrid: air filter, condensate line, flush.

Infrastructure fixes (expansion tank, PRV) come from the infrastructure
catalog and always lead the schedule.
"""

import logging
from typing import List, Optional

from opterra.physics import DescaleStatus, FlushStatus, OpterraMetrics
from opterra.physics.constants import HARD_WATER_GPG
from opterra.rules import ActionType, InfrastructureIssue, Recommendation
from opterra.taxonomy import (
    FilterStatus,
    HybridInputs,
    TankInputs,
    TanklessInputs,
    UnitInputs,
    is_hybrid,
    is_tankless,
)
from .schemas import MaintenanceSchedule, MaintenanceTask, TaskType, TaskUrgency


logger = logging.getLogger(__name__)

MAX_MONTHS_AHEAD = 36
DUE_WINDOW_MONTHS = 3
BUNDLE_THRESHOLD_MONTHS = 2
ANODE_REPLACE_LEAD_YEARS = 1.0

FLUSH_NOW_STATUSES = (FlushStatus.DUE, FlushStatus.CRITICAL, FlushStatus.LOCKOUT)

# filter status -> months until cleaning
INLET_FILTER_MONTHS = {FilterStatus.CLOGGED: 0, FilterStatus.DIRTY: 1, FilterStatus.CLEAN: 6}
AIR_FILTER_MONTHS = {FilterStatus.CLOGGED: 0, FilterStatus.DIRTY: 1, FilterStatus.CLEAN: 3}
CONDENSATE_CHECK_MONTHS = 6


def urgency_for_months(months: int) -> TaskUrgency:
    if months <= 0:
        return TaskUrgency.OVERDUE
    if months <= DUE_WINDOW_MONTHS:
        return TaskUrgency.DUE
    return TaskUrgency.UPCOMING


def _cap(months: Optional[int], default: int = MAX_MONTHS_AHEAD) -> int:
    if months is None:
        return default
    return min(MAX_MONTHS_AHEAD, max(0, int(months)))


# ============================================================================
# Storage Tasks
# ============================================================================

def flush_task(inputs: TankInputs, metrics: OpterraMetrics) -> MaintenanceTask:
    """Tank flush from the sediment trajectory. Hardened sediment cannot be flushed."""
    lbs = metrics.sediment_lbs
    if metrics.flush_status == FlushStatus.LOCKOUT:
        return MaintenanceTask(
            type=TaskType.FLUSH,
            label="Tank Flush",
            description="Sediment has hardened past the point a flush can clear",
            months_until_due=0,
            urgency=TaskUrgency.IMPOSSIBLE,
            benefit="None; flushing now risks opening a leak",
            why_explanation=(
                f"About {lbs:.1f} lbs of sediment has hardened on the tank bottom. "
                "Disturbing it can expose weakened steel."
            ),
            icon="droplets",
        )

    months = 0 if metrics.flush_status in FLUSH_NOW_STATUSES else _cap(metrics.months_to_flush)
    if lbs > 1:
        why = (
            f"Approximately {lbs:.1f} lbs of mineral buildup has accumulated. Flushing "
            "restores heating efficiency and protects the tank lining."
        )
    elif metrics.effective_hardness_gpg > HARD_WATER_GPG:
        why = "Your water hardness accelerates sediment buildup. Regular flushing prevents efficiency loss."
    else:
        why = "Periodic flushing removes mineral deposits that reduce heating efficiency."

    return MaintenanceTask(
        type=TaskType.FLUSH,
        label="Tank Flush",
        description="Drain sediment from the tank bottom",
        months_until_due=months,
        urgency=urgency_for_months(months),
        benefit=f"Remove {lbs:.1f} lbs of sediment" if lbs > 0 else "Maintain peak efficiency",
        why_explanation=why,
        icon="droplets",
    )


def anode_task(inputs: TankInputs, metrics: OpterraMetrics) -> MaintenanceTask:
    shield = metrics.shield_life
    months = 0
    if shield > ANODE_REPLACE_LEAD_YEARS:
        months = _cap(round((shield - ANODE_REPLACE_LEAD_YEARS) * 12))
    return MaintenanceTask(
        type=TaskType.ANODE,
        label="Anode Rod Inspection",
        description="Check the sacrificial anode for remaining protection",
        months_until_due=months,
        urgency=urgency_for_months(months),
        benefit="Prevent tank corrosion",
        why_explanation=(
            "The sacrificial anode corrodes so the tank does not. "
            f"About {shield:.1f} years of protection remain."
        ),
        icon="shield",
    )


def hybrid_tasks(inputs: HybridInputs, metrics: OpterraMetrics) -> List[MaintenanceTask]:
    filter_months = AIR_FILTER_MONTHS[inputs.air_filter_status]
    condensate_months = CONDENSATE_CHECK_MONTHS if inputs.is_condensate_clear else 0
    return [
        MaintenanceTask(
            type=TaskType.AIR_FILTER,
            label="Clean Air Filter",
            description="Wash or replace the heat pump air filter",
            months_until_due=filter_months,
            urgency=urgency_for_months(filter_months),
            benefit="Maximize heat pump efficiency",
            why_explanation=(
                "A dirty filter forces the unit onto its less efficient resistance elements."
            ),
            icon="wind",
        ),
        MaintenanceTask(
            type=TaskType.CONDENSATE,
            label="Clear Condensate Drain",
            description="Ensure the condensate line is flowing freely",
            months_until_due=condensate_months,
            urgency=urgency_for_months(condensate_months),
            benefit="Prevent water damage",
            why_explanation="A blocked condensate drain overflows around the unit.",
            icon="droplets",
        ),
        flush_task(inputs, metrics),
    ]


# ============================================================================
# Tankless Tasks
# ============================================================================

def descale_task(inputs: TanklessInputs, metrics: OpterraMetrics) -> MaintenanceTask:
    """Descale from the scale model; without isolation valves it cannot be done."""
    score = metrics.scale_buildup_score or 0.0
    status = metrics.descale_status

    if not inputs.has_isolation_valves:
        months = 0
        urgency = TaskUrgency.IMPOSSIBLE
        why = (
            "Without isolation valves a descaling pump cannot be connected. "
            "Install service valves first."
        )
    elif status in (DescaleStatus.LOCKOUT, DescaleStatus.RUN_TO_FAILURE):
        months = 0
        urgency = TaskUrgency.IMPOSSIBLE
        why = (
            f"Scale has set in the heat exchanger (score {score:.0f}). "
            "Descaling at this stage risks pinhole leaks."
        )
    else:
        months = _cap(metrics.months_to_descale)
        urgency = urgency_for_months(months)
        if score > 20:
            why = f"Mineral scale (score {score:.0f}) is insulating the heat exchanger."
        elif metrics.effective_hardness_gpg > HARD_WATER_GPG:
            why = "Hard water scales a heat exchanger quickly. Descale annually."
        else:
            why = "Periodic descaling keeps heat transfer efficient."

    return MaintenanceTask(
        type=TaskType.DESCALE,
        label="Descale Heat Exchanger",
        description="Circulate descaling solution through the heat exchanger",
        months_until_due=months,
        urgency=urgency,
        benefit=f"Remove scale (score {score:.0f})" if score > 5 else "Maintain heat transfer efficiency",
        why_explanation=why,
        icon="flame",
    )


def tankless_tasks(inputs: TanklessInputs, metrics: OpterraMetrics) -> List[MaintenanceTask]:
    tasks: List[MaintenanceTask] = []
    if not inputs.has_isolation_valves:
        tasks.append(MaintenanceTask(
            type=TaskType.ISOLATION_VALVES,
            label="Install Isolation Valves",
            description="Add service valves so the unit can be descaled",
            months_until_due=0,
            urgency=TaskUrgency.OVERDUE,
            benefit="Enable descaling maintenance",
            why_explanation=(
                "Without isolation valves the unit cannot be descaled. "
                "This one-time upgrade unlocks the maintenance that extends its life."
            ),
            icon="valve",
        ))

    filter_months = INLET_FILTER_MONTHS[inputs.inlet_filter_status]
    flow_loss = metrics.flow_degradation or 0.0
    tasks.append(MaintenanceTask(
        type=TaskType.FILTER_CLEAN,
        label="Clean Inlet Filter",
        description="Remove debris from the water inlet screen",
        months_until_due=filter_months,
        urgency=urgency_for_months(filter_months),
        benefit=f"Restore {flow_loss:.0f}% flow capacity" if flow_loss > 10 else "Maintain water flow",
        why_explanation="A clogged inlet screen cuts flow and triggers error codes.",
        icon="filter",
    ))
    tasks.append(descale_task(inputs, metrics))
    return tasks


# ============================================================================
# Infrastructure Tasks
# ============================================================================

def infrastructure_tasks(
    inputs: UnitInputs,
    metrics: OpterraMetrics,
    issues: List[InfrastructureIssue],
) -> List[MaintenanceTask]:
    """Turn the blocking infrastructure findings into lead tasks."""
    found = {issue.id for issue in issues}
    psi = inputs.house_psi
    aging = round(metrics.stress_factors.pressure * metrics.stress_factors.loop, 1)
    tasks: List[MaintenanceTask] = []

    if "exp_tank_required" in found:
        tasks.append(MaintenanceTask(
            type=TaskType.EXP_TANK_INSTALL,
            label="Expansion Tank Installation",
            description="Unmanaged thermal expansion on a closed loop",
            months_until_due=0,
            urgency=TaskUrgency.OVERDUE,
            benefit=f"Remove a {aging}x aging multiplier",
            why_explanation=(
                "Closed-loop plumbing spikes pressure every heating cycle. "
                "An expansion tank absorbs it."
            ),
            icon="alert",
            is_infrastructure=True,
        ))
    if "exp_tank_replace" in found:
        tasks.append(MaintenanceTask(
            type=TaskType.EXP_TANK_REPLACE,
            label="Expansion Tank Replacement",
            description="The tank is waterlogged (failed bladder)",
            months_until_due=0,
            urgency=TaskUrgency.OVERDUE,
            benefit="Restore thermal expansion protection",
            why_explanation="A waterlogged expansion tank provides no protection at all.",
            icon="valve",
            is_infrastructure=True,
        ))
    if "prv_failed" in found:
        tasks.append(MaintenanceTask(
            type=TaskType.PRV_REPLACE,
            label="Pressure Regulator Replacement",
            description=f"Pressure at {psi:.0f} PSI with a PRV installed",
            months_until_due=0,
            urgency=TaskUrgency.OVERDUE,
            benefit="Stop excessive pressure damage",
            why_explanation=f"The regulator has failed; {psi:.0f} PSI is reaching every fixture.",
            icon="gauge",
            is_infrastructure=True,
        ))
    if "prv_critical" in found:
        tasks.append(MaintenanceTask(
            type=TaskType.PRV_INSTALL,
            label="Pressure Regulator Installation",
            description=f"Pressure at {psi:.0f} PSI (over code)",
            months_until_due=0,
            urgency=TaskUrgency.OVERDUE,
            benefit="Stop excessive pressure damage",
            why_explanation=f"Pressure above 80 PSI wears valves, fittings and tank welds. This house sees {psi:.0f} PSI.",
            icon="gauge",
            is_infrastructure=True,
        ))
    return tasks


# ============================================================================
# Schedule
# ============================================================================

def _unit_type(inputs: UnitInputs) -> str:
    if is_tankless(inputs.fuel_type):
        return "tankless"
    if is_hybrid(inputs.fuel_type):
        return "hybrid"
    return "tank"


def _sort_key(task: MaintenanceTask):
    return (task.urgency == TaskUrgency.IMPOSSIBLE, task.months_until_due)


def calculate_maintenance_schedule(
    inputs: UnitInputs,
    metrics: OpterraMetrics,
    verdict: Optional[Recommendation] = None,
    infrastructure_issues: Optional[List[InfrastructureIssue]] = None,
) -> MaintenanceSchedule:
    """
    Build the prioritized maintenance plan.

    Args:
        inputs: Unit record
        metrics: Physics output
        verdict: Unit recommendation; flags PASS/REPLACE on the schedule
        infrastructure_issues: Priced findings that become lead tasks

    Returns:
        MaintenanceSchedule
    """
    unit_type = _unit_type(inputs)
    if unit_type == "tankless":
        unit_tasks = tankless_tasks(inputs, metrics)
    elif unit_type == "hybrid":
        unit_tasks = hybrid_tasks(inputs, metrics)
    else:
        unit_tasks = [flush_task(inputs, metrics), anode_task(inputs, metrics)]

    # Stable: the valve install stays ahead of same-month tankless tasks
    unit_tasks = sorted(unit_tasks, key=_sort_key)
    tasks = infrastructure_tasks(inputs, metrics, infrastructure_issues or []) + unit_tasks

    primary = tasks[0] if tasks else None
    secondary = tasks[1] if len(tasks) > 1 else None

    is_bundled = False
    bundle_reason = None
    if primary is not None and secondary is not None:
        serviceable = TaskUrgency.IMPOSSIBLE not in (primary.urgency, secondary.urgency)
        gap = abs(primary.months_until_due - secondary.months_until_due)
        if serviceable and gap <= BUNDLE_THRESHOLD_MONTHS:
            is_bundled = True
            if min(primary.months_until_due, secondary.months_until_due) <= 0:
                bundle_reason = "Complete both in one service visit"
            else:
                bundle_reason = f"Both due within {BUNDLE_THRESHOLD_MONTHS} months"

    action = verdict.action if verdict is not None else None
    logger.debug(
        f"[Maintenance] {unit_type}: {len(tasks)} tasks, "
        f"primary={primary.type.value if primary else None}"
    )

    return MaintenanceSchedule(
        unit_type=unit_type,
        primary=primary,
        secondary=secondary,
        additional=tasks[2:],
        is_bundled=is_bundled,
        bundle_reason=bundle_reason,
        monitor_only=action == ActionType.PASS,
        replacement_pending=action == ActionType.REPLACE,
    )
