"""
Maintenance Scheduler Tests

Tests verify:
- Urgency bands from months until due
- Tank, hybrid and tankless task sets
- Hardened sediment and valve-less descale are IMPOSSIBLE, never dropped
- Infrastructure tasks lead the schedule
- Bundling of the first two serviceable tasks
- Verdict flags (monitor only, replacement pending)
"""

import pytest

from opterra.maintenance import (
    TaskType,
    TaskUrgency,
    calculate_maintenance_schedule,
    descale_task,
    flush_task,
    urgency_for_months,
)
from opterra.physics import calculate_health
from opterra.rules import build_context, build_verdict, detect_infrastructure_issues, detect_issues
from opterra.taxonomy import (
    ExpansionTankStatus,
    FilterStatus,
    default_hybrid_inputs,
    default_tank_inputs,
    default_tankless_inputs,
)


def _schedule(record, with_verdict=True):
    metrics = calculate_health(record)
    verdict = None
    if with_verdict:
        verdict = build_verdict(build_context(record, metrics), detect_issues(record, metrics))
    return calculate_maintenance_schedule(
        record, metrics, verdict, detect_infrastructure_issues(record)
    )


class TestUrgency:
    """Test months-to-urgency mapping."""

    @pytest.mark.parametrize("months,expected", [
        (-2, TaskUrgency.OVERDUE),
        (0, TaskUrgency.OVERDUE),
        (1, TaskUrgency.DUE),
        (3, TaskUrgency.DUE),
        (4, TaskUrgency.UPCOMING),
    ])
    def test_bands(self, months, expected):
        assert urgency_for_months(months) == expected


class TestTankSchedule:
    """Test storage tank tasks."""

    def test_healthy_tank_bundles_flush_and_anode(self):
        record = default_tank_inputs(
            calendar_age=2, house_psi=55, has_prv=True, has_exp_tank=True,
            exp_tank_status=ExpansionTankStatus.FUNCTIONAL, hardness_gpg=2.5,
        )
        schedule = _schedule(record)
        assert schedule.unit_type == "tank"
        assert {schedule.primary.type, schedule.secondary.type} == {TaskType.FLUSH, TaskType.ANODE}
        assert schedule.primary.months_until_due == 36
        assert schedule.secondary.months_until_due == 36
        assert schedule.is_bundled
        assert schedule.monitor_only
        assert not schedule.replacement_pending

    def test_flush_due_now(self):
        record = default_tank_inputs(hardness_gpg=25)
        task = flush_task(record, calculate_health(record))
        assert task.months_until_due == 0
        assert task.urgency == TaskUrgency.OVERDUE

    def test_hardened_sediment_is_impossible(self):
        record = default_tank_inputs(hardness_gpg=30, calendar_age=12, warranty_years=12)
        metrics = calculate_health(record)
        task = flush_task(record, metrics)
        assert task.urgency == TaskUrgency.IMPOSSIBLE

    def test_impossible_task_never_bundled(self):
        schedule = _schedule(default_tank_inputs(hardness_gpg=30, calendar_age=12, warranty_years=12))
        assert schedule.primary.type == TaskType.ANODE
        assert schedule.secondary.urgency == TaskUrgency.IMPOSSIBLE
        assert not schedule.is_bundled

    def test_depleted_anode_overdue(self):
        schedule = _schedule(default_tank_inputs(calendar_age=7))
        anode = next(t for t in schedule.tasks if t.type == TaskType.ANODE)
        assert anode.months_until_due == 0

    def test_replacement_pending(self):
        schedule = _schedule(default_tank_inputs(calendar_age=12))
        assert schedule.replacement_pending
        assert schedule.tasks

    def test_without_verdict(self):
        schedule = _schedule(default_tank_inputs(), with_verdict=False)
        assert not schedule.monitor_only
        assert not schedule.replacement_pending


class TestInfrastructureTasks:
    """Test infrastructure tasks lead the schedule."""

    def test_expansion_tank_install_first(self):
        schedule = _schedule(default_tank_inputs(is_closed_loop=True))
        assert schedule.primary.type == TaskType.EXP_TANK_INSTALL
        assert schedule.primary.is_infrastructure
        assert schedule.primary.urgency == TaskUrgency.OVERDUE

    def test_waterlogged_tank_replace(self):
        record = default_tank_inputs(
            has_prv=True, has_exp_tank=True, exp_tank_status=ExpansionTankStatus.WATERLOGGED
        )
        assert _schedule(record).primary.type == TaskType.EXP_TANK_REPLACE

    def test_prv_tasks(self):
        assert _schedule(default_tank_inputs(house_psi=95)).primary.type == TaskType.PRV_INSTALL
        record = default_tank_inputs(house_psi=95, has_prv=True, has_exp_tank=True)
        assert _schedule(record).primary.type == TaskType.PRV_REPLACE

    def test_advisory_findings_are_not_tasks(self):
        schedule = _schedule(default_tank_inputs(house_psi=72, hardness_gpg=14))
        assert not any(t.is_infrastructure for t in schedule.tasks)


class TestHybridSchedule:
    """Test heat pump tasks."""

    def test_task_set(self):
        schedule = _schedule(default_hybrid_inputs())
        types = {t.type for t in schedule.tasks}
        assert types == {TaskType.AIR_FILTER, TaskType.CONDENSATE, TaskType.FLUSH}
        assert schedule.primary.type == TaskType.AIR_FILTER

    def test_clogged_filter_overdue(self):
        schedule = _schedule(default_hybrid_inputs(air_filter_status=FilterStatus.CLOGGED))
        assert schedule.primary.type == TaskType.AIR_FILTER
        assert schedule.primary.urgency == TaskUrgency.OVERDUE


class TestTanklessSchedule:
    """Test tankless tasks."""

    def test_no_isolation_valves(self):
        schedule = _schedule(
            default_tankless_inputs(hardness_gpg=8, last_descale_years_ago=2, has_isolation_valves=False)
        )
        assert schedule.primary.type == TaskType.ISOLATION_VALVES
        descale = next(t for t in schedule.tasks if t.type == TaskType.DESCALE)
        assert descale.urgency == TaskUrgency.IMPOSSIBLE
        assert schedule.tasks[-1].type == TaskType.DESCALE

    def test_valve_install_bundles_with_filter(self):
        record = default_tankless_inputs(has_isolation_valves=False, inlet_filter_status=FilterStatus.CLOGGED)
        schedule = _schedule(record)
        assert schedule.primary.type == TaskType.ISOLATION_VALVES
        assert schedule.secondary.type == TaskType.FILTER_CLEAN
        assert schedule.is_bundled
        assert schedule.bundle_reason == "Complete both in one service visit"

    def test_lockout_descale_impossible(self):
        record = default_tankless_inputs(scale_buildup=70)
        task = descale_task(record, calculate_health(record))
        assert task.urgency == TaskUrgency.IMPOSSIBLE

    def test_healthy_descale_upcoming(self):
        record = default_tankless_inputs()
        task = descale_task(record, calculate_health(record))
        assert task.months_until_due == 6
        assert task.urgency == TaskUrgency.UPCOMING

    def test_overdue_descale(self):
        record = default_tankless_inputs(hardness_gpg=18, last_descale_years_ago=None, calendar_age=4)
        task = descale_task(record, calculate_health(record))
        assert task.urgency == TaskUrgency.OVERDUE
