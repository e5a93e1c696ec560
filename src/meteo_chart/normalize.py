# Project: meteo-chart
# Owner: GreenUnicorn
"""
normalize.py — Turn a validated payload's parallel arrays into a list of
WeatherRecord, one per timestamp, in chart units.

Input order is kept as-is; nothing is sorted.
"""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from meteo_chart.errors import ValidationError
from meteo_chart.models import DailyAstroEntry, RawWeatherPayload, WeatherRecord
from meteo_chart.utils import round_half_away

logger = logging.getLogger(__name__)

MS_TO_KMH = 3.6

# Lower-cased unit string -> factor to km/h
WIND_FACTORS = {
    "m/s": MS_TO_KMH,
    "ms-1": MS_TO_KMH,
    "m s-1": MS_TO_KMH,
    "km/h": 1.0,
    "kmh": 1.0,
    "mph": 1.609344,
    "kn": 1.852,
    "kt": 1.852,
}

# Wind unit assumed when a source does not state one
DEFAULT_WIND_UNIT = {
    "static": "m/s",
    "csv": "m/s",
    "forecast": "km/h",
}


def wind_factor(payload: RawWeatherPayload) -> float:
    """Return the factor converting the payload's wind speeds to km/h.

    Raises:
        ValidationError: If the stated unit is not one we know.
    """
    unit = (payload.units or {}).get("windspeed") or DEFAULT_WIND_UNIT.get(payload.source, "km/h")
    try:
        return WIND_FACTORS[unit.strip().lower()]
    except KeyError:
        raise ValidationError("units", f"Unsupported wind speed unit: {unit!r}")


def source_timezone(metadata: dict) -> Optional[tzinfo]:
    """Resolve the zone the payload's local timestamps are expressed in.

    Tries an IANA name in metadata['timezone'], then a fixed offset from
    'utc_offset_seconds' (Open-Meteo) or 'utc_timeoffset' hours (meteoblue).
    Returns None when the source states nothing.
    """
    name = metadata.get("timezone")
    if isinstance(name, str) and name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("Unknown timezone name %r, falling back to offset", name)

    seconds = metadata.get("utc_offset_seconds")
    if seconds is None and metadata.get("utc_timeoffset") is not None:
        seconds = float(metadata["utc_timeoffset"]) * 3600
    if seconds is not None:
        return timezone(timedelta(seconds=seconds))
    return None


def parse_instant(value: str, tz: Optional[tzinfo]) -> datetime:
    """Parse an ISO timestamp and attach `tz` if it carries no offset."""
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None and tz is not None:
        dt = dt.replace(tzinfo=tz)
    return dt


def parse_astro_instant(day: str, value: str, tz: Optional[tzinfo]) -> datetime:
    """Parse a sunrise/sunset value; bare 'HH:MM' times are placed on `day`."""
    if isinstance(value, str) and len(value) <= 5 and ":" in value:
        value = f"{day[:10]}T{value}"
    return parse_instant(value, tz)


def _round1(value) -> Optional[float]:
    return None if value is None else round_half_away(value, 1)


def _daily_entries(payload: RawWeatherPayload, tz: Optional[tzinfo]) -> Optional[tuple[DailyAstroEntry, ...]]:
    daily = payload.daily
    if not daily:
        return None
    return tuple(
        DailyAstroEntry(
            day=datetime.fromisoformat(day).date(),
            sunrise=parse_astro_instant(day, sunrise, tz),
            sunset=parse_astro_instant(day, sunset, tz),
        )
        for day, sunrise, sunset in zip(daily["time"], daily["sunrise"], daily["sunset"])
    )


def normalize(payload: RawWeatherPayload) -> list[WeatherRecord]:
    """Map a validated payload onto WeatherRecord objects.

    Args:
        payload: A payload that passed validator.validate().

    Returns:
        One record per entry of hourly['time'], in the same order.
        temperature, precipitation, windspeed, windgust and snowfall are
        rounded to one decimal (ties away from zero); cloud cover to an
        integer. Wind speeds are converted to km/h. Null precipitation and
        snowfall count as 0; other nulls stay None.

    Raises:
        ValidationError: If the wind speed unit is unknown.
    """
    hourly = payload.hourly
    factor = wind_factor(payload)
    tz = source_timezone(payload.metadata)
    daily = _daily_entries(payload, tz)

    times = hourly["time"]
    n = len(times)
    gusts = hourly.get("windgust") or [None] * n
    clouds = hourly.get("cloudcover") or [None] * n
    snow = hourly.get("snowfall") or [None] * n

    records = []
    for i, time_str in enumerate(times):
        wind = hourly["windspeed"][i]
        gust = gusts[i]
        cloud = clouds[i]
        records.append(WeatherRecord(
            time=parse_instant(time_str, tz),
            temperature=_round1(hourly["temperature"][i]),
            precipitation=round_half_away(hourly["precipitation"][i] or 0, 1),
            windspeed=None if wind is None else round_half_away(wind * factor, 1),
            windgust=None if gust is None else round_half_away(gust * factor, 1),
            cloudcover=None if cloud is None else int(round_half_away(cloud, 0)),
            snowfall=None if "snowfall" not in hourly else round_half_away(snow[i] or 0, 1),
            daily=daily,
        ))

    logger.debug("Normalized %d records from %s source", len(records), payload.source)
    return records
