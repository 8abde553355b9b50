"""
Maintenance Schemas - Tasks and Schedules
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class TaskUrgency(str, Enum):
    OVERDUE = "overdue"        # months_until_due <= 0
    DUE = "due"                # within 3 months
    UPCOMING = "upcoming"
    IMPOSSIBLE = "impossible"  # Cannot be performed on this installation


class TaskType(str, Enum):
    FLUSH = "flush"
    ANODE = "anode"
    DESCALE = "descale"
    FILTER_CLEAN = "filter_clean"
    ISOLATION_VALVES = "isolation_valves"
    AIR_FILTER = "air_filter"
    CONDENSATE = "condensate"
    EXP_TANK_INSTALL = "exp_tank_install"
    EXP_TANK_REPLACE = "exp_tank_replace"
    PRV_INSTALL = "prv_install"
    PRV_REPLACE = "prv_replace"


class MaintenanceTask(BaseModel):
    """One scheduled service item."""
    type: TaskType
    label: str
    description: str
    months_until_due: int = Field(..., description="<= 0 means overdue")
    urgency: TaskUrgency
    benefit: str
    why_explanation: str
    icon: str
    is_infrastructure: bool = False


class MaintenanceSchedule(BaseModel):
    """Prioritized tasks. Infrastructure tasks always sort first."""
    unit_type: str = Field(..., description="tank | hybrid | tankless")
    primary: Optional[MaintenanceTask] = None
    secondary: Optional[MaintenanceTask] = None
    additional: List[MaintenanceTask] = Field(default_factory=list)
    is_bundled: bool = False
    bundle_reason: Optional[str] = None
    monitor_only: bool = Field(False, description="Verdict is PASS; service not recommended")
    replacement_pending: bool = Field(False, description="Verdict is REPLACE")

    @property
    def tasks(self) -> List[MaintenanceTask]:
        ordered = [self.primary, self.secondary, *self.additional]
        return [task for task in ordered if task is not None]
