"""
Opterra - Water Heater Risk Engine

Public API:
- calculate_opterra_risk: Full assessment for one unit (opterra.engine)
- parse_inputs / default_inputs: Build unit records (opterra.taxonomy)
"""

__version__ = "1.0.0"
