"""
Verdict Builder - One Recommendation per Unit

Order:
1. Dominant overrides (physical evidence, explosion, end of life)
2. Verdict template of the worst issue present (rule order breaks ties)
3. PASS
"""

import logging
from typing import List, Optional

from opterra.physics import PressureRegime, SafeModeGate
from opterra.physics.constants import BIO_AGE_CRITICAL, FAIL_PROB_CRITICAL
from opterra.taxonomy import is_tank_body_breach, is_tankless
from .issues import RULES_BY_ID, IssueContext
from .schemas import (
    SEVERITY_RANK,
    ActionType,
    Badge,
    BadgeColor,
    Issue,
    Recommendation,
)


logger = logging.getLogger(__name__)


def _replace_now(title: str, reason: str) -> Recommendation:
    return Recommendation(
        action=ActionType.REPLACE,
        title=title,
        reason=reason,
        badge=Badge.CRITICAL,
        badge_color=BadgeColor.RED,
        urgent=True,
    )


def dominant_override(ctx: IssueContext) -> Optional[Recommendation]:
    """
    Conditions that make replacement the only answer, whatever else is wrong.

    Args:
        ctx: Rule context for the unit

    Returns:
        REPLACE recommendation, or None when no override applies
    """
    inputs, metrics = ctx.inputs, ctx.metrics
    tankless = is_tankless(inputs.fuel_type)

    if is_tank_body_breach(inputs):
        if tankless:
            return _replace_now(
                "Heat Exchanger Failure",
                "The heat exchanger is leaking. It cannot be repaired economically.",
            )
        return _replace_now(
            "Containment Breach",
            "The tank body is leaking. A breached tank cannot be repaired.",
        )

    if inputs.is_leaking:
        source = inputs.leak_source.value.replace("_", " ").lower()
        return _replace_now(
            "Active Leak",
            f"Leak traced to the {source}. An actively leaking unit is replaced, not patched.",
        )

    if inputs.visual_rust:
        return _replace_now(
            "Visible Corrosion",
            "Rust on the vessel means the steel is failing. Replace before it leaks.",
        )

    if metrics.pressure_regime == PressureRegime.EXPLOSION:
        return _replace_now(
            "Explosion Hazard",
            f"{inputs.house_psi:.0f} PSI is beyond what the vessel and relief valve are built for.",
        )

    if metrics.bio_age >= BIO_AGE_CRITICAL:
        return _replace_now(
            "Statistical End of Life",
            f"Stress has aged the unit to {metrics.bio_age:.1f} biological years.",
        )

    if metrics.fail_prob >= FAIL_PROB_CRITICAL:
        gated = metrics.safe_mode_gate in (SafeModeGate.DEAD, SafeModeGate.DYING)
        if tankless and gated and metrics.safe_mode_reason:
            title = metrics.safe_mode_reason
        else:
            title = "High Failure Probability"
        return _replace_now(
            title,
            f"{metrics.fail_prob:.0f}% probability of failure. Plan replacement now.",
        )

    return None


def build_verdict(ctx: IssueContext, issues: List[Issue]) -> Recommendation:
    """
    Pick the single recommendation shown for the unit.

    Args:
        ctx: Rule context for the unit
        issues: Detected issues, in rule order

    Returns:
        Recommendation
    """
    override = dominant_override(ctx)
    if override is not None:
        logger.debug(f"[Verdict] override: {override.title}")
        return override

    fields = ctx.template_fields()
    # sorted() is stable, so rule order decides within a severity
    for issue in sorted(issues, key=lambda i: SEVERITY_RANK[i.severity]):
        rule = RULES_BY_ID.get(issue.id)
        if rule is None or rule.verdict is None:
            continue
        template = rule.verdict(ctx)
        if template is None:
            continue
        logger.debug(f"[Verdict] {template.title} from issue '{issue.id}'")
        return template.render(fields, source_issue_id=issue.id)

    if issues:
        return Recommendation(
            action=ActionType.PASS,
            title="Monitor",
            reason=f"{len(issues)} finding(s) noted; none require action yet.",
            badge=Badge.MONITOR,
            badge_color=BadgeColor.BLUE,
        )

    return Recommendation(
        action=ActionType.PASS,
        title="System Healthy",
        reason="No issues detected. Continue routine maintenance.",
        badge=Badge.OPTIMAL,
        badge_color=BadgeColor.GREEN,
    )
