"""Unit and decimal post-processing of scalar leaves.

Derives normalized values from raw fields: rounding of power/energy readings
and kilometre companions for distances the API reports in miles.
"""

from __future__ import annotations

import math
from typing import Any

from pystatetree.config import EngineConfig


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def should_trim(key: str, config: EngineConfig) -> bool:
    return key in config.trim_keys or any(marker in key for marker in config.trim_markers)


def trim_decimals(key: str, value: Any, config: EngineConfig) -> Any:
    """Round allow-listed numeric fields to ``config.decimal_places``.

    Values that do not parse as numbers are returned unchanged.
    """
    if not should_trim(key, config):
        return value
    parsed = safe_float(value)
    if parsed is None:
        return value
    return round(parsed, config.decimal_places)


def wants_distance(key: str, value: Any, config: EngineConfig, *, fresh: bool) -> bool:
    """Whether a kilometre companion should be written for *key*.

    ``fresh`` is true when the leaf was just created or re-typed.
    """
    if safe_float(value) is None:
        return False
    if key.endswith(config.distance_suffix):
        return True
    if key in config.distance_keys:
        return True
    return fresh


def to_km(value: Any, config: EngineConfig) -> float | None:
    miles = safe_float(value)
    if miles is None:
        return None
    return round(miles * config.km_factor, config.decimal_places)
