"""pystatetree - Incremental ingestion of schema-less JSON into a hierarchical state tree."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pystatetree")
except PackageNotFoundError:
    __version__ = "0+local"
from pystatetree.config import EngineConfig
from pystatetree.exceptions import (
    PayloadDecodeError,
    StateTreeConfigError,
    StateTreeError,
    StateTreeTransportError,
    TreeStoreError,
)
from pystatetree.ingestion.stream import parse_stream_frame
from pystatetree.ingestion.walker import TreeWalker
from pystatetree.models import NodeDescriptor, NodeKind, NodeRole, ValueType, WalkOptions
from pystatetree.state import MemoryTreeStore, SchemaCache, TreeStore

__all__ = [
    "__version__",
    "EngineConfig",
    "MemoryTreeStore",
    "NodeDescriptor",
    "NodeKind",
    "NodeRole",
    "PayloadDecodeError",
    "SchemaCache",
    "StateTreeConfigError",
    "StateTreeError",
    "StateTreeTransportError",
    "TreeStore",
    "TreeStoreError",
    "TreeWalker",
    "ValueType",
    "WalkOptions",
    "parse_stream_frame",
]
