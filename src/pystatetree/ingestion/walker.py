"""Path walker: materializes JSON documents into the state tree.

:class:`TreeWalker` is the engine instance. It descends depth-first through
a JSON value and decides, per key, whether to skip it, recurse into it, or
create a leaf and write its value. Object keys and array elements of one
call are processed concurrently; check-then-create of a given path runs
under that path's cache lock.

A walk never raises. Failures are logged and only affect the subtree (or
single node) they occurred in.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from pystatetree._json import JsonKind, dumps_for_log, is_json_string, kind_of, loads, scalar_text
from pystatetree._redact import redact_for_log
from pystatetree.config import EngineConfig
from pystatetree.exceptions import StateTreeConfigError
from pystatetree.ingestion.arrays import Pair, index_label, pair_of, resolve_segment
from pystatetree.ingestion.decode import decode_base64, is_sensitive, wants_base64
from pystatetree.ingestion.normalize import to_km, trim_decimals, wants_distance
from pystatetree.models.node import NodeDescriptor, ValueType, value_type_of
from pystatetree.models.options import WalkOptions
from pystatetree.state.cache import SchemaCache
from pystatetree.state.store import TreeStore

_logger = logging.getLogger(__name__)

_SCALAR_KINDS = (JsonKind.STRING, JsonKind.NUMBER, JsonKind.BOOL)


def coerce_options(options: WalkOptions | Mapping[str, Any] | None) -> WalkOptions:
    if options is None:
        return WalkOptions()
    if isinstance(options, WalkOptions):
        return options
    try:
        return WalkOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise StateTreeConfigError(f"Invalid walk options: {exc}") from exc


class TreeWalker:
    """Incrementally materializes JSON documents into a :class:`TreeStore`."""

    def __init__(
        self,
        store: TreeStore,
        *,
        config: EngineConfig | None = None,
        cache: SchemaCache | None = None,
    ) -> None:
        self._store = store
        self._config = config or EngineConfig()
        self._cache = cache if cache is not None else SchemaCache()

    @property
    def cache(self) -> SchemaCache:
        return self._cache

    @property
    def config(self) -> EngineConfig:
        return self._config

    async def walk(
        self,
        path: str,
        value: Any,
        options: WalkOptions | Mapping[str, Any] | None = None,
    ) -> None:
        """Materialize *value* below *path* and wait for the whole subtree.

        Raises :class:`StateTreeConfigError` only for invalid *options*; any
        failure during the walk itself is logged, never raised.
        """
        await self._walk(path, value, coerce_options(options))

    def schedule(
        self,
        path: str,
        value: Any,
        options: WalkOptions | Mapping[str, Any] | None = None,
    ) -> asyncio.Task[None]:
        """Start a walk in the background; await the task to know it has drained."""
        return asyncio.create_task(self.walk(path, value, options), name=f"walk:{path}")

    # ------------------------------------------------------------------
    # Recursive descent
    # ------------------------------------------------------------------

    async def _walk(self, path: str, value: Any, options: WalkOptions) -> None:
        try:
            await self._walk_value(path, value, options)
        except Exception:
            _logger.error("Error extracting keys: %s %s", path, self._dump(value), exc_info=True)

    async def _walk_value(self, path: str, value: Any, options: WalkOptions) -> None:
        if value is None:
            _logger.debug("Cannot extract empty: %s", path)
            return

        if wants_base64(value, path, options):
            value = decode_base64(value, context=path)

        if path.endswith("."):
            path = path[:-1]

        kind = kind_of(value)
        if kind in _SCALAR_KINDS:
            name = path.rsplit(".", 1)[-1]
            await self._materialize_leaf(path, name, value, options, label_ident=path)
            await self._write(path, value)
            return

        if kind is JsonKind.OTHER:
            _logger.debug("Skip unsupported value at %s: %s", path, type(value).__name__)
            return

        if options.remove_passwords and is_sensitive(path, self._config.sensitive_token):
            _logger.debug("skip password : %s", path)
            return

        await self._ensure_container(path, value, options)
        child_options = options.for_children()

        if kind is JsonKind.ARRAY:
            await self._walk_array(value, "", path, child_options)
            return

        await self._walk_object(path, value, child_options)

    async def _walk_object(self, path: str, obj: Mapping[str, Any], options: WalkOptions) -> None:
        async with asyncio.TaskGroup() as group:
            for raw_key, child in obj.items():
                key = str(raw_key)
                if options.remove_passwords and is_sensitive(key, self._config.sensitive_token):
                    # Stops the remaining siblings as well, not just this key.
                    _logger.debug("skip password : %s.%s", path, key)
                    break
                if callable(child):
                    _logger.debug("Skip function: %s.%s", path, key)
                    continue
                group.create_task(self._walk_key(path, key, child, options))

    async def _walk_key(self, path: str, key: str, child: Any, options: WalkOptions) -> None:
        child_path = f"{path}.{key}"
        try:
            if child is None:
                child = ""
            if options.auto_cast and is_json_string(child):
                child = loads(child)
                if child is None:
                    child = ""
            if wants_base64(child, key, options):
                child = decode_base64(child, context=child_path)

            kind = kind_of(child)
            if kind is JsonKind.ARRAY:
                await self._walk_array(child, key, path, options)
            elif kind is JsonKind.OBJECT:
                await self._walk(child_path, child, options)
            elif kind in _SCALAR_KINDS:
                await self._ingest_scalar(path, key, child, options)
            else:
                _logger.debug("Skip unsupported value at %s: %s", child_path, type(child).__name__)
        except Exception:
            _logger.error("Error extracting keys: %s %s", child_path, self._dump(child), exc_info=True)

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    async def _walk_array(
        self,
        array: Sequence[Any],
        key_context: str,
        path: str,
        options: WalkOptions,
    ) -> None:
        try:
            async with asyncio.TaskGroup() as group:
                for index, element in enumerate(array):
                    if element is None:
                        _logger.debug("Cannot extract empty: %s.%s.%s", path, key_context, index)
                        continue
                    group.create_task(self._walk_element(element, key_context, index_label(index), path, options))
        except Exception:
            _logger.error("Cannot extract array %s", path, exc_info=True)

    async def _walk_element(
        self,
        element: Any,
        key_context: str,
        idx: str,
        path: str,
        options: WalkOptions,
    ) -> None:
        try:
            kind = kind_of(element)
            if kind is JsonKind.STRING and key_context:
                # Arrays of tags: the string is both the segment and the value.
                # An empty tag ends in a dot and lands on the key itself.
                await self._walk(f"{path}.{key_context}.{element}", element, options)
                return

            if kind is JsonKind.OBJECT and not options.force_index:
                pair = pair_of(element, key_context)
                if pair is not None:
                    await self._ingest_pair(path, pair, options)
                    return

            segment = resolve_segment(element, key_context, idx, options)
            await self._walk(f"{path}.{segment}", element, options)
        except Exception:
            _logger.error(
                "Cannot extract array element %s.%s%s %s",
                path,
                key_context,
                idx,
                self._dump(element),
                exc_info=True,
            )

    async def _ingest_pair(self, path: str, pair: Pair, options: WalkOptions) -> None:
        leaf_path = f"{path}.{pair.sub_key}"
        value = pair.value
        if wants_base64(value, pair.ident, options):
            value = decode_base64(value, context=leaf_path)

        if kind_of(value) in (JsonKind.OBJECT, JsonKind.ARRAY):
            await self._walk(leaf_path, value, options)
            return

        await self._materialize_leaf(leaf_path, pair.display_name, value, options, label_ident=pair.sub_key)
        await self._write(leaf_path, value)

    # ------------------------------------------------------------------
    # Leaves and containers
    # ------------------------------------------------------------------

    async def _ingest_scalar(self, path: str, key: str, value: Any, options: WalkOptions) -> None:
        leaf_path = f"{path}.{key}"
        value = trim_decimals(key, value, self._config)

        fresh = await self._materialize_leaf(leaf_path, options.description_for(key), value, options, label_ident=key)
        await self._write(leaf_path, value)

        if wants_distance(key, value, self._config, fresh=fresh):
            await self._write_companion(path, key, value, options)

    async def _materialize_leaf(
        self,
        path: str,
        name: str,
        value: Any,
        options: WalkOptions,
        *,
        label_ident: str,
    ) -> bool:
        """Create or extend the leaf descriptor at *path* when needed.

        Returns ``True`` when the leaf is new or its type changed.
        """
        observed = value_type_of(value)
        async with self._cache.lock(path):
            # A path first seen as a container has no stored type yet.
            fresh = (
                not self._cache.is_created(path)
                or self._cache.value_type(path) is None
                or self._cache.conflicts(path, observed)
            )
            labels, labels_changed = self._cache.merge_labels(path, options.label_seed(label_ident), value)
            if not fresh and not labels_changed:
                return False

            value_type = self._cache.widen(path, observed)
            descriptor = NodeDescriptor.leaf(name, value_type, writable=options.write, labels=labels)
            if await self._store_call("create", path, self._store.create_or_update_node(path, descriptor)):
                self._cache.record_create(path, value_type, labels)
        return fresh

    async def _write_companion(self, path: str, key: str, value: Any, options: WalkOptions) -> None:
        km = to_km(value, self._config)
        if km is None:
            return
        km_path = f"{path}.{key}{self._config.companion_suffix}"
        if not self._cache.is_created(km_path):
            async with self._cache.lock(km_path):
                if not self._cache.is_created(km_path):
                    descriptor = NodeDescriptor.leaf(
                        options.description_for(key),
                        ValueType.NUMBER,
                        writable=options.write,
                    )
                    created = await self._store_call(
                        "create", km_path, self._store.create_or_update_node(km_path, descriptor)
                    )
                    if created:
                        self._cache.record_create(km_path, ValueType.NUMBER)
        await self._write(km_path, km)

    async def _ensure_container(self, path: str, value: Any, options: WalkOptions) -> None:
        if self._cache.is_created(path) and not options.delete_before_update:
            return

        async with self._cache.lock(path):
            if options.delete_before_update:
                _logger.debug("Deleting %s before update", path)
                self._cache.purge_prefix(path)
                await self._store_call("delete", path, self._store.delete_subtree(path))
            elif self._cache.is_created(path):
                return
            elif await self._exists(path):
                self._cache.record_create(path)
                return

            name = options.channel_name or ""
            desc_field = options.prefered_array_desc
            if desc_field and kind_of(value) is JsonKind.OBJECT and value.get(desc_field):
                name = scalar_text(value[desc_field])

            descriptor = NodeDescriptor.container(name)
            if await self._store_call("create", path, self._store.create_or_update_node(path, descriptor)):
                self._cache.record_create(path)

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------

    async def _write(self, path: str, value: Any) -> None:
        await self._store_call("write", path, self._store.write_value(path, value, ack=True))

    async def _exists(self, path: str) -> bool:
        try:
            return await self._store.node_exists(path)
        except Exception:
            _logger.error("Tree store failed to look up %s", path, exc_info=True)
            return False

    async def _store_call(self, action: str, path: str, call: Awaitable[None]) -> bool:
        try:
            await call
        except Exception:
            _logger.error("Tree store failed to %s %s", action, path, exc_info=True)
            return False
        return True

    def _dump(self, value: Any) -> str:
        try:
            redacted = redact_for_log(
                value,
                max_string=self._config.log_value_max,
                token=self._config.sensitive_token,
            )
            return dumps_for_log(redacted)
        except Exception:
            return f"<unprintable {type(value).__name__}>"
