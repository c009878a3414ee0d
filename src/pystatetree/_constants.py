"""Constants shared across the ingestion engine."""

from __future__ import annotations

# Fields rounded to two decimals before storage (energy site / battery payloads).
TRIM_DECIMAL_KEYS: tuple[str, ...] = (
    "percentage_charged",
    "battery_power",
    "energy_left",
    "load_power",
    "grid_power",
    "solar_power",
    "battery",
    "solar",
)
TRIM_DECIMAL_MARKERS: tuple[str, ...] = ("_imported", "_exported")
DECIMAL_PLACES = 2

# Distance fields reported in miles that get a kilometre companion leaf.
DISTANCE_KEYS: tuple[str, ...] = ("odometer", "range", "speed")
DISTANCE_SUFFIX = "_range"
COMPANION_SUFFIX = "_km"
MILES_TO_KM = 1.609344

SENSITIVE_TOKEN = "password"

# Literal element fields used to name array entries, lowest priority first.
ARRAY_NAME_FIELDS: tuple[str, ...] = ("id", "name", "label", "labelText", "start_date_time")
ARRAY_ID_SUFFIX = "Id"
ARRAY_NAME_SUFFIX = "Name"

BASE64_PATTERN = r"^([0-9a-zA-Z+/]{4})*(([0-9a-zA-Z+/]{2}==)|([0-9a-zA-Z+/]{3}=))"

# Integers with more digits than this are kept as strings when parsing JSON.
MAX_SAFE_INT_DIGITS = 15

LOG_VALUE_MAX = 512
