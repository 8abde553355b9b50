"""
Rules Module - Issue Detection, Verdicts and Infrastructure Findings

Public API:
- detect_issues: Ordered issue list from the declarative rule table
- build_verdict: Single recommendation (overrides, worst issue, or PASS)
- detect_infrastructure_issues: Priced code/upgrade findings
"""

from .infrastructure import (
    INFRASTRUCTURE_CATALOG,
    calculate_issue_costs,
    detect_infrastructure_issues,
    issues_by_category,
)
from .issues import (
    ISSUE_RULES,
    RULES_BY_ID,
    IssueContext,
    IssueRule,
    UnitScope,
    VerdictTemplate,
    build_context,
    detect_issues,
    gas_line_capacity_btu,
)
from .schemas import (
    SEVERITY_RANK,
    ActionType,
    Badge,
    BadgeColor,
    InfrastructureCategory,
    InfrastructureIssue,
    Issue,
    Recommendation,
    Severity,
)
from .verdict import build_verdict, dominant_override

__all__ = [
    "INFRASTRUCTURE_CATALOG",
    "calculate_issue_costs",
    "detect_infrastructure_issues",
    "issues_by_category",
    "ISSUE_RULES",
    "RULES_BY_ID",
    "IssueContext",
    "IssueRule",
    "UnitScope",
    "VerdictTemplate",
    "build_context",
    "detect_issues",
    "gas_line_capacity_btu",
    "SEVERITY_RANK",
    "ActionType",
    "Badge",
    "BadgeColor",
    "InfrastructureCategory",
    "InfrastructureIssue",
    "Issue",
    "Recommendation",
    "Severity",
    "build_verdict",
    "dominant_override",
]
