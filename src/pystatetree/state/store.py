"""Tree store boundary.

The engine never persists anything itself; it talks to a :class:`TreeStore`.
:class:`MemoryTreeStore` is a deterministic in-memory implementation used by
tests and the ingest script.
"""

from __future__ import annotations

import copy
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from pystatetree.exceptions import TreeStoreError
from pystatetree.models.node import NodeDescriptor, NodeKind


class TreeStore(Protocol):
    """Structural interface of the hierarchical key-value store.

    All operations are idempotent. Implementations signal rejection by
    raising; the engine logs the failure and carries on with sibling paths.
    """

    async def create_or_update_node(self, path: str, descriptor: NodeDescriptor) -> None: ...

    async def delete_subtree(self, path: str) -> None: ...

    async def write_value(self, path: str, value: Any, *, ack: bool = True) -> None: ...

    async def node_exists(self, path: str) -> bool: ...


class ValueWrite(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    value: Any
    ack: bool = True


def _merge_descriptor(existing: NodeDescriptor, incoming: NodeDescriptor) -> NodeDescriptor:
    """Extend *existing* with *incoming*; labels only ever grow."""
    labels: dict[str, Any] | None = None
    if existing.labels or incoming.labels:
        labels = dict(existing.labels or {})
        for raw, label in (incoming.labels or {}).items():
            labels.setdefault(raw, label)
    return incoming.model_copy(update={"labels": labels})


class MemoryTreeStore:
    """In-memory tree store.

    Containers follow set-if-missing semantics, leaves are extended. Every
    descriptor application and value write is recorded in order so callers
    can assert on idempotence.
    """

    def __init__(self) -> None:
        self.nodes: dict[str, NodeDescriptor] = {}
        self.values: dict[str, Any] = {}
        self.created: list[str] = []
        self.updated: list[str] = []
        self.writes: list[ValueWrite] = []
        self.deleted: list[str] = []

    async def create_or_update_node(self, path: str, descriptor: NodeDescriptor) -> None:
        if not path:
            raise TreeStoreError("Cannot create a node with an empty path", path=path)
        existing = self.nodes.get(path)
        if existing is None:
            self.nodes[path] = descriptor
            self.created.append(path)
            return
        if descriptor.kind == NodeKind.CHANNEL and existing.kind == NodeKind.CHANNEL:
            return
        self.nodes[path] = _merge_descriptor(existing, descriptor)
        self.updated.append(path)

    async def delete_subtree(self, path: str) -> None:
        prefix = f"{path}."
        for key in [key for key in self.nodes if key == path or key.startswith(prefix)]:
            self.nodes.pop(key, None)
            self.values.pop(key, None)
        self.deleted.append(path)

    async def write_value(self, path: str, value: Any, *, ack: bool = True) -> None:
        if path not in self.nodes:
            raise TreeStoreError(f"Cannot write {path}: node does not exist", path=path)
        self.values[path] = copy.deepcopy(value)
        self.writes.append(ValueWrite(path=path, value=copy.deepcopy(value), ack=ack))

    async def node_exists(self, path: str) -> bool:
        return path in self.nodes

    def get_value(self, path: str, default: Any = None) -> Any:
        return self.values.get(path, default)

    def children(self, path: str) -> list[str]:
        """Direct child paths of *path*, sorted."""
        prefix = f"{path}." if path else ""
        depth = prefix.count(".")
        return sorted(key for key in self.nodes if key.startswith(prefix) and key.count(".") == depth)

    def leaves(self) -> dict[str, Any]:
        return {path: self.values.get(path) for path, node in sorted(self.nodes.items()) if node.kind == NodeKind.STATE}

    def as_nested(self) -> dict[str, Any]:
        """Render leaves as nested dicts keyed by path segment."""
        root: dict[str, Any] = {}
        for path, value in self.leaves().items():
            cursor = root
            *parents, last = path.split(".")
            for segment in parents:
                child = cursor.get(segment)
                if not isinstance(child, dict):
                    child = {}
                    cursor[segment] = child
                cursor = child
            if not isinstance(cursor.get(last), dict):
                cursor[last] = value
        return root
