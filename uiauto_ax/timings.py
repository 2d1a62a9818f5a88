# uiauto_ax/timings.py
"""
@file timings.py
@brief Timeout/retry presets for provider operations.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


TIMEOUT_FIELDS: Dict[str, Dict[str, Any]] = {
    # Whole-call bound for one descendant search.
    "search": {"timeout": 10.0, "interval": 0.0},
    # Whole-call bound for one path expression, all segments combined.
    "path_resolve": {"timeout": 5.0, "interval": 0.0},
    "action": {"timeout": 5.0, "interval": 0.0},
    "press_action": {"timeout": 3.0, "interval": 1.0, "retry_count": 2},
    "focus_action": {"timeout": 3.0, "interval": 0.5, "retry_count": 3},
    "set_value_action": {"timeout": 5.0, "interval": 0.0},
    "get_value_action": {"timeout": 2.0, "interval": 0.0},
    "actions_read": {"timeout": 2.0, "interval": 0.0},
    "attributes_read": {"timeout": 0.5, "interval": 0.0},
    "element_read": {"timeout": 5.0, "interval": 0.0},
    "focused_element": {"timeout": 5.0, "interval": 0.5, "retry_count": 2},
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {
        "search": {"timeout": 5.0},
        "path_resolve": {"timeout": 3.0},
        "action": {"timeout": 3.0},
        "press_action": {"timeout": 2.0, "interval": 0.5},
        "focus_action": {"timeout": 2.0, "interval": 0.25, "retry_count": 2},
        "attributes_read": {"timeout": 0.3},
        "element_read": {"timeout": 3.0},
    },
    "slow": {
        "search": {"timeout": 30.0},
        "path_resolve": {"timeout": 15.0},
        "action": {"timeout": 10.0},
        "press_action": {"timeout": 6.0, "interval": 1.5, "retry_count": 3},
        "focus_action": {"timeout": 5.0, "interval": 1.0, "retry_count": 4},
        "actions_read": {"timeout": 4.0},
        "attributes_read": {"timeout": 2.0},
        "element_read": {"timeout": 10.0},
        "focused_element": {"timeout": 10.0, "interval": 1.0, "retry_count": 3},
    },
    "ci": {
        "search": {"timeout": 60.0},
        "path_resolve": {"timeout": 30.0},
        "action": {"timeout": 15.0},
        "press_action": {"timeout": 8.0, "interval": 2.0, "retry_count": 4},
        "focus_action": {"timeout": 8.0, "interval": 1.0, "retry_count": 5},
        "actions_read": {"timeout": 5.0},
        "attributes_read": {"timeout": 3.0},
        "element_read": {"timeout": 15.0},
        "focused_element": {"timeout": 15.0, "interval": 1.0, "retry_count": 4},
    },
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, Any]:
    preset_key = (preset or "default").lower()
    values: Dict[str, Any] = deepcopy(TIMEOUT_FIELDS)

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    for key, value in overrides.items():
        base = deepcopy(values[key])
        base.update(value)
        values[key] = base

    return values
