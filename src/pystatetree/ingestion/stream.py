"""Streaming telemetry frames.

The vehicle streaming endpoint pushes ``data:update`` messages whose
``value`` is a comma separated record. This module turns such a message into
the flat document the walker ingests (usually under ``<vehicle>.streamData``).
The socket client itself lives outside this package.
"""

from __future__ import annotations

from typing import Any

from pystatetree._json import loads
from pystatetree.exceptions import PayloadDecodeError

STREAM_FIELDS: tuple[str, ...] = (
    "timestamp",
    "speed",
    "odometer",
    "soc",
    "elevation",
    "est_heading",
    "est_lat",
    "est_lng",
    "power",
    "shift_state",
    "range",
    "est_range",
    "heading",
)

MSG_UPDATE = "data:update"
MSG_ERROR = "data:error"


def _as_message(message: str | bytes | dict[str, Any]) -> dict[str, Any]:
    if isinstance(message, dict):
        return message
    try:
        decoded = loads(message)
    except ValueError as exc:
        raise PayloadDecodeError(f"Invalid stream message: {exc}") from exc
    if not isinstance(decoded, dict):
        raise PayloadDecodeError("Stream message is not a JSON object")
    return decoded


def is_stream_error(message: str | bytes | dict[str, Any]) -> bool:
    return _as_message(message).get("msg_type") == MSG_ERROR


def parse_stream_frame(message: str | bytes | dict[str, Any]) -> dict[str, str] | None:
    """Return the record carried by a ``data:update`` message.

    Returns ``None`` for any other message type. Missing trailing columns map
    to empty strings; extra columns are ignored.

    Raises
    ------
    PayloadDecodeError
        If the message is not a JSON object or its ``value`` is not a string.
    """
    decoded = _as_message(message)
    if decoded.get("msg_type") != MSG_UPDATE:
        return None
    value = decoded.get("value")
    if not isinstance(value, str):
        raise PayloadDecodeError("Stream update without a string value")
    columns = value.split(",")
    return {field: columns[i] if i < len(columns) else "" for i, field in enumerate(STREAM_FIELDS)}
