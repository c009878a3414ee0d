"""Scrubbing of ingested values before they are dumped to error logs.

When a subtree walk fails, the walker logs the offending value. Documents
from vehicle and energy endpoints carry OAuth tokens, passwords and long
encoded blobs, so the dump goes through :func:`redact_for_log` first.
"""

from __future__ import annotations

import re
from typing import Any

from pystatetree._constants import LOG_VALUE_MAX, SENSITIVE_TOKEN
from pystatetree._json import JsonKind, kind_of

_CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "token",
        "accesstoken",
        "refreshtoken",
        "idtoken",
        "authorization",
        "cookie",
        "secret",
        "clientsecret",
        "apikey",
    }
)

_KEY_SEPARATORS = re.compile(r"[\s_\-]")

_MAX_DEPTH = 20
_MAX_ITEMS = 50

REDACTED = "<redacted>"


def is_credential_key(key: Any, *, token: str = SENSITIVE_TOKEN) -> bool:
    """Whether *key* names a credential: a known token field or anything containing *token*."""
    folded = _KEY_SEPARATORS.sub("", str(key)).lower()
    return folded in _CREDENTIAL_KEYS or token.lower() in folded


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}…<truncated {len(text) - limit} chars>"


def redact_for_log(
    value: Any,
    *,
    max_string: int = LOG_VALUE_MAX,
    token: str = SENSITIVE_TOKEN,
    max_items: int = _MAX_ITEMS,
) -> Any:
    """Return a JSON-friendly copy of *value* with credentials masked.

    Long strings are clipped to *max_string* characters and arrays to
    *max_items* entries. Values that are not JSON shaped are replaced by a
    short type marker.
    """

    def scrub(node: Any, depth: int) -> Any:
        if depth > _MAX_DEPTH:
            return "<max-depth>"
        kind = kind_of(node)
        if kind in (JsonKind.NULL, JsonKind.BOOL, JsonKind.NUMBER):
            return node
        if kind is JsonKind.STRING:
            return _clip(node, max_string)
        if kind is JsonKind.OBJECT:
            return {
                str(key): REDACTED if is_credential_key(key, token=token) else scrub(child, depth + 1)
                for key, child in node.items()
            }
        if kind is JsonKind.ARRAY:
            items = [scrub(child, depth + 1) for child in node[:max_items]]
            if len(node) > max_items:
                items.append(f"<{len(node) - max_items} more>")
            return items
        if isinstance(node, (bytes, bytearray)):
            return f"<{len(node)} bytes>"
        return f"<{type(node).__name__}>"

    return scrub(value, 0)
