# Project: meteo-chart
# Owner: GreenUnicorn
"""
validator.py — Structural checks on a loaded RawWeatherPayload.

Checks run in a fixed order (metadata, units, hourly presence, hourly
lengths, hourly values, time format, daily arrays) and stop at the first
failure, so the same broken file always produces the same message.
"""

import logging
from datetime import datetime

from meteo_chart.errors import ValidationError
from meteo_chart.models import DAILY_KEYS, OPTIONAL_HOURLY, REQUIRED_HOURLY, RawWeatherPayload
from meteo_chart.normalize import parse_astro_instant

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate(payload: RawWeatherPayload) -> RawWeatherPayload:
    """Validate a loaded payload.

    Args:
        payload: Output of one of the loader.load_* functions.

    Returns:
        The same payload, unchanged.

    Raises:
        ValidationError: Naming the first failing field group.
    """
    try:
        _check_metadata(payload)
        _check_units(payload)
        _check_hourly_present(payload)
        _check_hourly_lengths(payload)
        _check_hourly_values(payload)
        _check_hourly_times(payload)
        _check_daily(payload)
    except ValidationError as e:
        logger.warning("Validation failed (%s): %s", e.field_group, e)
        raise
    return payload


def _check_metadata(payload: RawWeatherPayload) -> None:
    metadata = payload.metadata
    if (
        not isinstance(metadata, dict)
        or not _is_number(metadata.get("latitude"))
        or not _is_number(metadata.get("longitude"))
    ):
        raise ValidationError("metadata", "Metadata (latitude/longitude) is missing or invalid")


def _check_units(payload: RawWeatherPayload) -> None:
    units = payload.units
    if not isinstance(units, dict) or not isinstance(units.get("temperature"), str):
        raise ValidationError("units", "Temperature units are missing or invalid")


def _check_hourly_present(payload: RawWeatherPayload) -> None:
    hourly = payload.hourly
    if not isinstance(hourly, dict):
        raise ValidationError("hourly", "Hourly data is missing")
    for key in REQUIRED_HOURLY:
        if not isinstance(hourly.get(key), list):
            raise ValidationError("hourly", f"Hourly data is missing or invalid: '{key}'")
    for key in OPTIONAL_HOURLY:
        if key in hourly and not isinstance(hourly[key], list):
            raise ValidationError("hourly", f"Hourly data is invalid: '{key}' is not a list")


def _check_hourly_lengths(payload: RawWeatherPayload) -> None:
    hourly = payload.hourly
    expected = len(hourly["time"])
    for key in REQUIRED_HOURLY + OPTIONAL_HOURLY:
        if key in hourly and len(hourly[key]) != expected:
            raise ValidationError(
                "hourly-length",
                f"Hourly array '{key}' has {len(hourly[key])} values, expected {expected} (same as 'time')",
            )


def _check_hourly_values(payload: RawWeatherPayload) -> None:
    hourly = payload.hourly
    for key in REQUIRED_HOURLY[1:] + OPTIONAL_HOURLY:
        for i, value in enumerate(hourly.get(key) or []):
            if value is not None and not _is_number(value):
                raise ValidationError("hourly", f"Hourly array '{key}' has a non-numeric value at index {i}: {value!r}")


def _check_hourly_times(payload: RawWeatherPayload) -> None:
    for i, value in enumerate(payload.hourly["time"]):
        try:
            datetime.fromisoformat(value)
        except (TypeError, ValueError):
            raise ValidationError("hourly-time", f"Invalid timestamp at index {i}: {value!r}")


def _check_daily(payload: RawWeatherPayload) -> None:
    daily = payload.daily
    if daily is None:
        return
    if not all(isinstance(daily.get(key), list) for key in DAILY_KEYS):
        raise ValidationError("daily", "Daily sunrise/sunset data is invalid")
    lengths = {len(daily[key]) for key in DAILY_KEYS}
    if len(lengths) != 1:
        raise ValidationError("daily", "Daily arrays 'time', 'sunrise' and 'sunset' differ in length")
    for key in DAILY_KEYS:
        for i, value in enumerate(daily[key]):
            try:
                if key == "time":
                    datetime.fromisoformat(value)
                else:
                    parse_astro_instant(daily["time"][i], value, None)
            except (TypeError, ValueError):
                raise ValidationError("daily", f"Invalid daily '{key}' at index {i}: {value!r}")
