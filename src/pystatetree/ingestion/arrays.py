"""Array element naming.

Array entries get a stable, human-readable path segment derived from their
content. The heuristics form a priority chain: each applicable rule overrides
the previous one, so the last rule that resolves wins. When nothing resolves
the entry falls back to ``<key><idx>`` with a 1-based, zero-padded index.

Compact two-field entries such as ``{"key": "soc", "value": 42}`` are not
named at all; see :func:`pair_of`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pystatetree._constants import ARRAY_ID_SUFFIX, ARRAY_NAME_FIELDS, ARRAY_NAME_SUFFIX
from pystatetree._json import JsonKind, is_scalar, kind_of, scalar_text
from pystatetree.models.options import WalkOptions


@dataclass(frozen=True)
class Pair:
    """A two-field element collapsed into a single leaf."""

    key_name: str
    value_name: str
    ident: str
    sub_key: str
    value: Any

    @property
    def display_name(self) -> str:
        return f"{self.key_name} {self.value_name}"


def index_label(index: int) -> str:
    """1-based, two-digit zero-padded index of the element at *index*."""
    return f"{index + 1:02d}"


def _strip_dots(value: Any) -> str:
    return scalar_text(value).replace(".", "")


def _strip_dots_spaces(value: Any) -> str:
    return _strip_dots(value).replace(" ", "")


def _prefered_segment(element: Mapping[str, Any], prefered: str) -> str | None:
    if "+" in prefered:
        first, second = prefered.split("+", 1)
        if element.get(first) is None:
            return None
        left = _strip_dots_spaces(element[first])
        right: Any = ""
        if "/" in second:
            outer, inner = second.split("/", 1)
            sub = element.get(outer)
            if isinstance(sub, Mapping) and sub.get(inner) is not None:
                right = sub[inner]
            elif element.get(inner) is not None:
                right = element[inner]
        elif element.get(second) is not None:
            right = element[second]
        return f"{left}-{_strip_dots_spaces(right)}"

    if "/" in prefered:
        outer, inner = prefered.split("/", 1)
        sub = element.get(outer)
        if isinstance(sub, Mapping) and sub.get(inner) is not None:
            return _strip_dots_spaces(sub[inner])
        return None

    if element.get(prefered) is not None:
        return _strip_dots(element[prefered])
    return None


def resolve_segment(element: Any, key_context: str, idx: str, options: WalkOptions) -> str:
    """Compute the path segment for one array element."""
    fallback = f"{key_context}{idx}"
    if options.force_index or not isinstance(element, Mapping) or not element:
        return fallback

    segment = fallback
    keys = list(element.keys())

    first_value = element[keys[0]]
    if isinstance(first_value, str):
        segment = first_value

    for key_name in keys:
        if str(key_name).endswith(ARRAY_ID_SUFFIX) and element[key_name] is not None:
            segment = _strip_dots(element[key_name])

    for key_name in keys:
        if str(key_name).endswith(ARRAY_NAME_SUFFIX) and element[key_name] is not None:
            segment = _strip_dots(element[key_name])

    for field in ARRAY_NAME_FIELDS:
        if element.get(field):
            segment = _strip_dots(element[field])

    if options.prefered_array_name:
        prefered = _prefered_segment(element, options.prefered_array_name)
        if prefered is not None:
            segment = prefered

    # An empty segment would alias the element onto its parent path.
    return segment or fallback


def pair_of(element: Any, key_context: str) -> Pair | None:
    """Return the collapsed form of a two-field scalar element, if it is one.

    The element must have exactly two keys, both values non-null scalars, and
    the first value must not be the literal string ``"null"``.
    """
    if kind_of(element) is not JsonKind.OBJECT or len(element) != 2:
        return None
    (key_name, key_value), (value_name, value) = element.items()
    if not is_scalar(key_value) or not is_scalar(value):
        return None
    if key_value == "null":
        return None
    ident = scalar_text(key_value)
    sub_key = f"{key_context}.{ident}" if key_context else ident
    return Pair(
        key_name=str(key_name),
        value_name=str(value_name),
        ident=ident,
        sub_key=sub_key,
        value=value,
    )
