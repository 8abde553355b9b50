"""
Opterra - Demo Scenario Runner

Runs every named preset through the engine and prints a one-screen summary
per unit: metrics, verdict, issues, budget and the lead maintenance task.

Usage:
    python scripts/run_scenarios.py
    python scripts/run_scenarios.py "Attic Time Bomb"
"""

import os
import sys
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from opterra.engine import calculate_opterra_risk
from opterra.scenarios import SCENARIOS, get_scenario


AS_OF = date(2025, 1, 1)


def print_result(name: str) -> None:
    scenario = get_scenario(name)
    result = calculate_opterra_risk(scenario.inputs, as_of=AS_OF)
    metrics = result.metrics
    verdict = result.verdict

    print('\n' + '=' * 60)
    print(f'{scenario.name.upper()} ({result.inputs.fuel_type.value})')
    print('=' * 60)
    print(f'   {scenario.description}')
    print(f'   Bio age:      {metrics.bio_age:.1f} yrs (x{metrics.aging_rate:.2f}, {metrics.primary_stressor})')
    print(f'   Fail prob:    {metrics.fail_prob:.1f}%  health {metrics.health_score}/100')
    print(f'   Years left:   {metrics.years_left_current:.1f} (optimized {metrics.years_left_optimized:.1f})')
    print(f'   Location:     level {metrics.risk_level} ({result.location.label})')
    print(f'\n   VERDICT: [{verdict.badge.value}] {verdict.action.value} - {verdict.title}')
    print(f'   {verdict.reason}')

    if result.issues:
        print('\n   Issues:')
        for issue in result.issues:
            print(f'   - [{issue.severity.value:8}] {issue.title}: {issue.value}')

    financial = result.financial
    print(f'\n   Budget: {financial.budget_urgency.value}, target {financial.target_replacement_date}, '
          f'${financial.monthly_budget}/mo toward ${financial.est_replacement_cost:,}')

    primary = result.maintenance.primary
    if primary is not None:
        print(f'   Next task: {primary.label} ({primary.urgency.value}, {primary.months_until_due} mo)')


def main() -> None:
    names = sys.argv[1:] or list(SCENARIOS)
    print('=' * 60)
    print('OPTERRA RISK ENGINE - SCENARIO RUN')
    print('=' * 60)
    for name in names:
        print_result(name)


if __name__ == '__main__':
    main()
