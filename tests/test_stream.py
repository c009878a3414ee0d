from __future__ import annotations

import json

import pytest

from pystatetree import MemoryTreeStore, PayloadDecodeError, TreeWalker, WalkOptions, parse_stream_frame
from pystatetree.ingestion.stream import STREAM_FIELDS, is_stream_error

_FRAME = "1700000000000,55,12345.6,80,120,90,52.5,13.4,-5,D,200,180,91"


def test_parse_update_frame() -> None:
    record = parse_stream_frame(json.dumps({"msg_type": "data:update", "tag": "1", "value": _FRAME}))

    assert record is not None
    assert list(record) == list(STREAM_FIELDS)
    assert record["speed"] == "55"
    assert record["shift_state"] == "D"
    assert record["heading"] == "91"


def test_short_frame_pads_missing_columns() -> None:
    record = parse_stream_frame({"msg_type": "data:update", "value": "1700000000000,,42"})

    assert record is not None
    assert record["speed"] == ""
    assert record["odometer"] == "42"
    assert record["heading"] == ""


def test_other_message_types_are_ignored() -> None:
    assert parse_stream_frame({"msg_type": "control:hello"}) is None
    assert is_stream_error({"msg_type": "data:error", "value": "disconnected"})
    assert not is_stream_error(b'{"msg_type": "data:update", "value": ""}')


@pytest.mark.parametrize("message", ["not json", "[1, 2]", {"msg_type": "data:update", "value": 5}])
def test_invalid_messages_raise(message: object) -> None:
    with pytest.raises(PayloadDecodeError):
        parse_stream_frame(message)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_stream_record_walks_into_tree() -> None:
    store = MemoryTreeStore()
    walker = TreeWalker(store)
    record = parse_stream_frame({"msg_type": "data:update", "value": _FRAME})

    await walker.walk("car.streamData", record, WalkOptions(channel_name="Stream data"))

    assert store.nodes["car.streamData"].name == "Stream data"
    assert store.get_value("car.streamData.speed") == "55"
    assert store.get_value("car.streamData.speed_km") == 88.51
    assert store.get_value("car.streamData.shift_state") == "D"
    assert "car.streamData.shift_state_km" not in store.nodes
