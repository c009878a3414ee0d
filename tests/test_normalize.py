from __future__ import annotations

import pytest

from pystatetree import EngineConfig
from pystatetree.ingestion.normalize import safe_float, to_km, trim_decimals, wants_distance

_CONFIG = EngineConfig()


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1, 1.0), ("2.5", 2.5), (None, None), ("", None), ("--", None), ("abc", None), (True, None), ("nan", None)],
)
def test_safe_float(value: object, expected: float | None) -> None:
    assert safe_float(value) == expected


def test_trim_decimals_allow_list_and_markers() -> None:
    assert trim_decimals("battery_power", 1.23456, _CONFIG) == 1.23
    assert trim_decimals("solar_energy_exported", "12.3456", _CONFIG) == 12.35
    assert trim_decimals("speed", 1.23456, _CONFIG) == 1.23456
    assert trim_decimals("battery", "n/a", _CONFIG) == "n/a"


def test_wants_distance_rules() -> None:
    assert wants_distance("est_battery_range", 10, _CONFIG, fresh=False)
    assert not wants_distance("battery_range", True, _CONFIG, fresh=False)
    assert wants_distance("odometer", 5, _CONFIG, fresh=False)
    assert not wants_distance("level", 5, _CONFIG, fresh=False)
    assert wants_distance("level", 5, _CONFIG, fresh=True)
    assert not wants_distance("name", "abc", _CONFIG, fresh=True)


def test_to_km() -> None:
    assert to_km(100, _CONFIG) == 160.93
    assert to_km("55", _CONFIG) == 88.51
    assert to_km("abc", _CONFIG) is None


def test_custom_config_changes_rules() -> None:
    config = EngineConfig(trim_keys=("voltage",), distance_keys=("trip",), decimal_places=1)
    assert trim_decimals("voltage", 229.16, config) == 229.2
    assert wants_distance("trip", 3, config, fresh=False)
    assert not wants_distance("odometer", 3, config, fresh=False)
    assert to_km(10, config) == 16.1
