from __future__ import annotations

import pytest

from pystatetree import WalkOptions
from pystatetree.ingestion.arrays import Pair, index_label, pair_of, resolve_segment

_DEFAULT = WalkOptions()


def _segment(element: object, options: WalkOptions = _DEFAULT, key: str = "list") -> str:
    return resolve_segment(element, key, "01", options)


@pytest.mark.parametrize(("index", "expected"), [(0, "01"), (8, "09"), (9, "10"), (99, "100")])
def test_index_label_is_one_based_and_padded(index: int, expected: str) -> None:
    assert index_label(index) == expected


def test_name_beats_id_and_dots_are_stripped() -> None:
    assert _segment({"id": "abc.def", "name": "Battery"}) == "Battery"


def test_id_suffix_key_strips_dots() -> None:
    assert _segment({"fooId": "x.y"}) == "xy"


def test_first_string_value_seeds_segment() -> None:
    assert _segment({"first": "alpha", "other": 1, "more": 2}) == "alpha"


def test_fallback_uses_key_and_index() -> None:
    assert _segment({"value": 1, "other": 2}) == "list01"


def test_empty_segment_falls_back_to_index() -> None:
    assert _segment({"first": "", "v": 1, "w": 2}) == "list01"


def test_last_id_suffix_key_wins() -> None:
    assert _segment({"siteId": "s1", "vehicleId": "v1", "x": 1}) == "v1"


def test_name_suffix_scanned_by_key_name() -> None:
    assert _segment({"a": 1, "displayName": "Front.Left", "b": 2}) == "FrontLeft"
    assert _segment({"deviceId": "d1", "deviceName": "Pump"}) == "Pump"


def test_literal_fields_override_in_priority_order() -> None:
    assert _segment({"label": "Front", "labelText": "Front text"}) == "Front text"
    assert _segment({"start_date_time": "2024-01-01T10:00:00.000Z", "x": 1}) == "2024-01-01T10:00:00000Z"


def test_numeric_id_is_rendered_as_text() -> None:
    assert _segment({"id": 1234, "v": 1, "w": 2}) == "1234"
    assert _segment({"id": 0, "v": 1, "w": 2}) == "list01"


def test_prefered_plain_field() -> None:
    options = WalkOptions(prefered_array_name="timestamp")
    assert _segment({"timestamp": 1700000000, "id": "x"}, options) == "1700000000"


def test_prefered_compound_field() -> None:
    options = WalkOptions(prefered_array_name="title+kind")
    assert _segment({"title": "Home Charger", "kind": "ac.dc"}, options) == "HomeCharger-acdc"


def test_prefered_compound_with_nested_field() -> None:
    options = WalkOptions(prefered_array_name="title+meta/kw")
    assert _segment({"title": "Home", "meta": {"kw": 11.5}}, options) == "Home-115"
    assert _segment({"title": "Home", "kw": 7}, options) == "Home-7"


def test_prefered_nested_field() -> None:
    options = WalkOptions(prefered_array_name="meta/slot")
    assert _segment({"meta": {"slot": "Slot 1.a"}}, options) == "Slot1a"


def test_prefered_missing_field_keeps_heuristic() -> None:
    options = WalkOptions(prefered_array_name="missing+x")
    assert _segment({"id": "x1", "v": 1}, options) == "x1"


def test_force_index_skips_all_heuristics() -> None:
    options = WalkOptions(force_index=True, prefered_array_name="id")
    assert _segment({"id": "x", "name": "Battery"}, options, key="charges") == "charges01"


def test_non_object_elements_use_index() -> None:
    assert _segment(5) == "list01"
    assert _segment([1, 2]) == "list01"


def test_pair_collapse_shape() -> None:
    pair = pair_of({"key": "soc", "value": 42}, "")
    assert pair == Pair(key_name="key", value_name="value", ident="soc", sub_key="soc", value=42)
    assert pair.display_name == "key value"


def test_pair_collapse_with_key_context() -> None:
    pair = pair_of({"key": 3, "value": True}, "readings")
    assert pair is not None
    assert pair.ident == "3"
    assert pair.sub_key == "readings.3"


@pytest.mark.parametrize(
    "element",
    [
        {"key": "null", "value": 1},
        {"key": None, "value": 1},
        {"key": "a", "value": None},
        {"a": {"b": 1}, "c": 1},
        {"a": 1, "b": 2, "c": 3},
        {"a": 1},
        "text",
    ],
)
def test_pair_collapse_rejects_other_shapes(element: object) -> None:
    assert pair_of(element, "") is None
