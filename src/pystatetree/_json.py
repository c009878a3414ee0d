"""JSON value classification and lenient parsing helpers."""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from typing import Any

from pystatetree._constants import MAX_SAFE_INT_DIGITS


class JsonKind(enum.Enum):
    """Tag for the shape of an ingested JSON value."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    OTHER = "other"


def kind_of(value: Any) -> JsonKind:
    if value is None:
        return JsonKind.NULL
    # bool is an int subclass; check it first.
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    return JsonKind.OTHER


def is_scalar(value: Any) -> bool:
    return kind_of(value) in (JsonKind.BOOL, JsonKind.NUMBER, JsonKind.STRING)


def scalar_text(value: Any) -> str:
    """Render a scalar the way JSON spells it: ``true``, ``1`` for ``1.0``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_int(text: str) -> int | str:
    # Integers beyond float precision are kept verbatim as strings.
    if len(text.lstrip("-")) > MAX_SAFE_INT_DIGITS:
        return text
    return int(text)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def loads(text: str | bytes) -> Any:
    """Parse strict JSON, keeping oversized integers as strings."""
    return json.loads(text, parse_int=_parse_int, parse_constant=_reject_constant)


def is_json_string(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        loads(value)
    except ValueError:
        return False
    return True


def dumps_for_log(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, default=repr)
    except (TypeError, ValueError):
        return repr(value)
