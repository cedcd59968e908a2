# tests/strategies/__init__.py
"""Hypothesis strategies for property-based tests.

Re-exports commonly used strategies for convenience:
    from tests.strategies import json_primitives, row_data, STANDARD_SETTINGS
"""

from tests.strategies.json import json_primitives, json_values, row_data
from tests.strategies.settings import DETERMINISM_SETTINGS, SLOW_SETTINGS, STANDARD_SETTINGS

__all__ = [
    "DETERMINISM_SETTINGS",
    "SLOW_SETTINGS",
    "STANDARD_SETTINGS",
    "json_primitives",
    "json_values",
    "row_data",
]
