"""Best-effort payload decoding and sensitive-key filtering."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Any

from pystatetree._constants import BASE64_PATTERN, SENSITIVE_TOKEN
from pystatetree._json import is_json_string, loads
from pystatetree.models.options import WalkOptions

_logger = logging.getLogger(__name__)

_BASE64_RE = re.compile(BASE64_PATTERN)


def is_sensitive(name: str, token: str = SENSITIVE_TOKEN) -> bool:
    """Case-insensitive substring match of *token* against a path or key."""
    return token.lower() in str(name).lower()


def is_base64(value: Any) -> bool:
    if not value or not isinstance(value, str):
        return False
    return _BASE64_RE.match(value) is not None


def wants_base64(value: Any, ident: str, options: WalkOptions) -> bool:
    """Decide whether *value* (found at path or key *ident*) should be decoded."""
    if options.parse_base64 and is_base64(value):
        return True
    return ident in options.parse_base64_by_ids


def decode_base64(value: Any, *, context: str) -> Any:
    """Decode *value* as base64 text, parsing it as JSON when possible.

    Returns the parsed structure, the decoded text, or (on any failure) the
    original value unchanged.
    """
    if not isinstance(value, str):
        _logger.warning("Cannot parse base64 for %s: not a string (%s)", context, type(value).__name__)
        return value
    try:
        text = base64.b64decode(value).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError) as exc:
        _logger.warning("Cannot parse base64 for %s: %s", context, exc)
        return value
    if is_json_string(text):
        return loads(text)
    return text
