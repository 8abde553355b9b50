"""
Rules Schemas - Issues, Verdicts and Infrastructure Findings

Issue ids are stable and rule-specific; dashboards deduplicate on them and
tests target them directly.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Issue severity, worst first."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


SEVERITY_RANK: Dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
}


class ActionType(str, Enum):
    REPLACE = "REPLACE"
    REPAIR = "REPAIR"
    UPGRADE = "UPGRADE"
    MAINTAIN = "MAINTAIN"
    PASS = "PASS"


class Badge(str, Enum):
    CRITICAL = "CRITICAL"
    REPLACE = "REPLACE"
    SERVICE = "SERVICE"
    MONITOR = "MONITOR"
    OPTIMAL = "OPTIMAL"


class BadgeColor(str, Enum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    BLUE = "blue"
    GREEN = "green"


class Issue(BaseModel):
    """One discrete finding."""
    id: str = Field(..., description="Stable rule id")
    severity: Severity
    title: str
    detail: str = Field(..., description="Human-readable explanation")
    value: str = Field(..., description="Short machine/display value")


class Recommendation(BaseModel):
    """Single summary verdict for the unit."""
    action: ActionType
    title: str
    reason: str
    badge: Badge
    badge_color: BadgeColor
    urgent: bool = False
    source_issue_id: Optional[str] = Field(
        None, description="Issue that produced this verdict; None for overrides and PASS"
    )


class InfrastructureCategory(str, Enum):
    """Which pricing tiers bundle the fix."""
    VIOLATION = "VIOLATION"            # Every tier
    INFRASTRUCTURE = "INFRASTRUCTURE"  # Standard and up
    OPTIMIZATION = "OPTIMIZATION"      # Professional and up


class InfrastructureIssue(BaseModel):
    """Code-violation-class defect with an installed-cost range."""
    id: str
    category: InfrastructureCategory
    title: str
    description: str
    cost_min: int = Field(..., ge=0)
    cost_max: int = Field(..., ge=0)
