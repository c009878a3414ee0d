"""Engine configuration for pystatetree."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pystatetree._constants import (
    COMPANION_SUFFIX,
    DECIMAL_PLACES,
    DISTANCE_KEYS,
    DISTANCE_SUFFIX,
    LOG_VALUE_MAX,
    MILES_TO_KM,
    SENSITIVE_TOKEN,
    TRIM_DECIMAL_KEYS,
    TRIM_DECIMAL_MARKERS,
)
from pystatetree.exceptions import StateTreeConfigError


def _env_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise StateTreeConfigError(f"{name} must be an integer, got {value!r}") from exc


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise StateTreeConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class EngineConfig:
    """Process-wide settings of the ingestion engine.

    Parameters
    ----------
    trim_keys : tuple of str
        Keys whose numeric values are rounded to ``decimal_places``.
    trim_markers : tuple of str
        Key fragments (``_imported``, ``_exported``) that also trigger rounding.
    decimal_places : int
        Precision used for rounding and for kilometre companions.
    distance_keys : tuple of str
        Keys that always get a kilometre companion leaf.
    distance_suffix : str
        Key suffix marking a numeric distance (``_range``).
    km_factor : float
        Miles to kilometres conversion factor.
    companion_suffix : str
        Path suffix of the kilometre companion leaf.
    sensitive_token : str
        Case-insensitive key/path fragment suppressed by ``remove_passwords``.
    log_value_max : int
        Maximum string length kept in value dumps written to error logs.
    """

    trim_keys: tuple[str, ...] = TRIM_DECIMAL_KEYS
    trim_markers: tuple[str, ...] = TRIM_DECIMAL_MARKERS
    decimal_places: int = DECIMAL_PLACES
    distance_keys: tuple[str, ...] = DISTANCE_KEYS
    distance_suffix: str = DISTANCE_SUFFIX
    km_factor: float = MILES_TO_KM
    companion_suffix: str = COMPANION_SUFFIX
    sensitive_token: str = SENSITIVE_TOKEN
    log_value_max: int = LOG_VALUE_MAX

    def __post_init__(self) -> None:
        if self.decimal_places < 0:
            raise StateTreeConfigError("decimal_places must be >= 0")
        if not self.sensitive_token:
            raise StateTreeConfigError("sensitive_token must be non-empty")
        if not self.companion_suffix:
            raise StateTreeConfigError("companion_suffix must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> EngineConfig:
        """Create configuration from ``STATETREE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_LIST_MAP = {
            "STATETREE_TRIM_KEYS": "trim_keys",
            "STATETREE_TRIM_MARKERS": "trim_markers",
            "STATETREE_DISTANCE_KEYS": "distance_keys",
        }
        for env_key, field_name in _ENV_LIST_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = _env_list(val)

        _ENV_STR_MAP = {
            "STATETREE_DISTANCE_SUFFIX": "distance_suffix",
            "STATETREE_COMPANION_SUFFIX": "companion_suffix",
            "STATETREE_SENSITIVE_TOKEN": "sensitive_token",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        places_env = env.get("STATETREE_DECIMAL_PLACES")
        if places_env is not None:
            config_kwargs["decimal_places"] = _env_int("STATETREE_DECIMAL_PLACES", places_env)

        factor_env = env.get("STATETREE_KM_FACTOR")
        if factor_env is not None:
            config_kwargs["km_factor"] = _env_float("STATETREE_KM_FACTOR", factor_env)

        log_max_env = env.get("STATETREE_LOG_VALUE_MAX")
        if log_max_env is not None:
            config_kwargs["log_value_max"] = _env_int("STATETREE_LOG_VALUE_MAX", log_max_env)

        for key in ("trim_keys", "trim_markers", "distance_keys"):
            if key in overrides and not isinstance(overrides[key], tuple):
                overrides[key] = tuple(overrides[key])
        config_kwargs.update(overrides)

        return cls(**config_kwargs)
