"""Per-call walk options.

Options are expressed in Python-friendly names. The camelCase names used by
existing adapter option objects (``preferedArrayName``, ``parseBase64byIds``,
...) are accepted as aliases, so a plain option mapping can be validated
directly::

    WalkOptions.model_validate({"preferedArrayName": "timestamp", "write": True})
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pystatetree._json import scalar_text


class WalkOptions(BaseModel):
    """Options controlling how a JSON value is materialized into the tree."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    write: bool = False
    """Leaves created by this walk are writable."""

    force_index: bool = False
    """Always name array entries ``<key><idx>``, skipping every naming heuristic."""

    channel_name: str | None = None
    """Display name of the container created at the recursion root (one-shot)."""

    prefered_array_name: str | None = None
    """Field selecting the array entry segment: ``"A+B"``, ``"A/B"`` or a plain field name."""

    prefered_array_desc: str | None = None
    """Field whose value names the container created for an element."""

    auto_cast: bool = False
    """Parse string values that are themselves valid JSON."""

    descriptions: dict[str, str] = Field(default_factory=dict)
    """Display name overrides keyed by JSON key."""

    states: dict[str, dict[str, Any]] = Field(default_factory=dict)
    """Enumerated label seeds keyed by path or JSON key."""

    parse_base64: bool = False
    """Detect and decode base64 encoded strings everywhere."""

    parse_base64_by_ids: tuple[str, ...] = Field(default=(), alias="parseBase64byIds")
    """Paths or keys whose values are always base64 decoded."""

    delete_before_update: bool = False
    """Purge the subtree before recreating the container (one-shot)."""

    remove_passwords: bool = False
    """Suppress any path or key containing ``password``."""

    @field_validator("parse_base64_by_ids", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("states", mode="before")
    @classmethod
    def _stringify_label_keys(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            ident: {scalar_text(raw): label for raw, label in seed.items()} if isinstance(seed, dict) else seed
            for ident, seed in value.items()
        }

    def for_children(self) -> WalkOptions:
        """Return the options handed to nested walks: one-shot settings cleared."""
        if self.channel_name is None and not self.delete_before_update:
            return self
        return self.model_copy(update={"channel_name": None, "delete_before_update": False})

    def description_for(self, key: str) -> str:
        return self.descriptions.get(key) or key

    def label_seed(self, ident: str) -> dict[str, Any] | None:
        seed = self.states.get(ident)
        return seed if seed else None
