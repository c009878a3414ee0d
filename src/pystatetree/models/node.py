"""Node descriptors attached to tree paths."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pystatetree._json import JsonKind, kind_of


class NodeKind(StrEnum):
    CHANNEL = "channel"
    STATE = "state"


class ValueType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    MIXED = "mixed"


class NodeRole(StrEnum):
    INDICATOR = "indicator"
    SWITCH = "switch"
    VALUE = "value"
    LEVEL = "level"
    TEXT = "text"
    STATE = "state"


_KIND_TO_TYPE: dict[JsonKind, ValueType] = {
    JsonKind.STRING: ValueType.STRING,
    JsonKind.NUMBER: ValueType.NUMBER,
    JsonKind.BOOL: ValueType.BOOLEAN,
}


def value_type_of(value: Any) -> ValueType:
    """Map a scalar JSON value to its tree type; anything else is ``mixed``."""
    return _KIND_TO_TYPE.get(kind_of(value), ValueType.MIXED)


def role_for(value_type: ValueType, writable: bool) -> NodeRole:
    if value_type == ValueType.BOOLEAN:
        return NodeRole.SWITCH if writable else NodeRole.INDICATOR
    if value_type == ValueType.NUMBER:
        return NodeRole.LEVEL if writable else NodeRole.VALUE
    if value_type == ValueType.STRING:
        return NodeRole.TEXT
    return NodeRole.STATE


class NodeDescriptor(BaseModel):
    """Metadata written to the tree store for a path."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: NodeKind
    name: str = ""
    role: NodeRole | None = None
    value_type: ValueType | None = None
    writable: bool = False
    readable: bool = True
    labels: dict[str, Any] | None = Field(default=None)
    """Enumerated labels, raw value (as string) -> display label."""

    @classmethod
    def container(cls, name: str = "") -> NodeDescriptor:
        return cls(kind=NodeKind.CHANNEL, name=name)

    @classmethod
    def leaf(
        cls,
        name: str,
        value_type: ValueType,
        *,
        writable: bool = False,
        labels: dict[str, Any] | None = None,
    ) -> NodeDescriptor:
        return cls(
            kind=NodeKind.STATE,
            name=name,
            role=role_for(value_type, writable),
            value_type=value_type,
            writable=writable,
            labels=dict(labels) if labels else None,
        )
