"""State layer.

The schema cache remembers what has been materialized; the tree store is the
boundary to wherever nodes and values actually live.
"""

from pystatetree.state.cache import CacheEntry, SchemaCache
from pystatetree.state.store import MemoryTreeStore, TreeStore, ValueWrite

__all__ = ["CacheEntry", "MemoryTreeStore", "SchemaCache", "TreeStore", "ValueWrite"]
