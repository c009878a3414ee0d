from __future__ import annotations

from pystatetree._redact import REDACTED, is_credential_key, redact_for_log


def test_redact_for_log_masks_credentials() -> None:
    payload = {
        "vehicle_id": 42,
        "access_token": "abc",
        "Refresh-Token": "def",
        "userPassword": "pw",
        "nested": [{"api key": "k", "odometer": 12.5}],
    }

    redacted = redact_for_log(payload)
    assert redacted["vehicle_id"] == 42
    assert redacted["access_token"] == REDACTED
    assert redacted["Refresh-Token"] == REDACTED
    assert redacted["userPassword"] == REDACTED
    assert redacted["nested"][0]["api key"] == REDACTED
    assert redacted["nested"][0]["odometer"] == 12.5


def test_credential_token_is_configurable() -> None:
    assert is_credential_key("pin_code", token="pin")
    assert not is_credential_key("pin_code")
    assert redact_for_log({"pinCode": "1234"}, token="pin") == {"pinCode": REDACTED}


def test_redact_for_log_clips_strings_and_arrays() -> None:
    redacted = redact_for_log({"value": "x" * 600, "list": list(range(5))}, max_string=10, max_items=3)
    assert redacted["value"] == "x" * 10 + "…<truncated 590 chars>"
    assert redacted["list"] == [0, 1, 2, "<2 more>"]


def test_redact_for_log_marks_non_json_values() -> None:
    redacted = redact_for_log({"blob": b"\x00\x01", "obj": object(), "flag": True})
    assert redacted == {"blob": "<2 bytes>", "obj": "<object>", "flag": True}
