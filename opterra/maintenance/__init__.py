"""
Maintenance Module - Service Schedules per Unit Type

Public API:
- calculate_maintenance_schedule: Prioritized tasks (infrastructure first)
- urgency_for_months: Shared overdue/due/upcoming mapping
"""

from .scheduler import (
    calculate_maintenance_schedule,
    descale_task,
    flush_task,
    infrastructure_tasks,
    urgency_for_months,
)
from .schemas import MaintenanceSchedule, MaintenanceTask, TaskType, TaskUrgency

__all__ = [
    "calculate_maintenance_schedule",
    "descale_task",
    "flush_task",
    "infrastructure_tasks",
    "urgency_for_months",
    "MaintenanceSchedule",
    "MaintenanceTask",
    "TaskType",
    "TaskUrgency",
]
