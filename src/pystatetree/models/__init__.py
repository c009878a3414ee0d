"""Data models for tree nodes and walk options."""

from pystatetree.models.node import NodeDescriptor, NodeKind, NodeRole, ValueType, role_for, value_type_of
from pystatetree.models.options import WalkOptions

__all__ = [
    "NodeDescriptor",
    "NodeKind",
    "NodeRole",
    "ValueType",
    "WalkOptions",
    "role_for",
    "value_type_of",
]
