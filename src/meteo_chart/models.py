# Project: meteo-chart
# Owner: GreenUnicorn
"""
models.py — Immutable data types shared by the loading pipeline.

RawWeatherPayload keeps the source's parallel arrays under canonical key
names; WeatherRecord is one normalized hourly observation.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

# Hourly arrays every source must provide
REQUIRED_HOURLY = ("time", "temperature", "precipitation", "windspeed")

# Hourly arrays only some sources provide
OPTIONAL_HOURLY = ("windgust", "cloudcover", "snowfall")

DAILY_KEYS = ("time", "sunrise", "sunset")


@dataclass(frozen=True)
class RawWeatherPayload:
    """Source-shaped weather data, before validation.

    Attributes:
        source: 'static', 'forecast' or 'csv'.
        metadata: latitude, longitude and optional timezone details.
        units: unit strings, at least 'temperature'.
        hourly: parallel lists keyed by REQUIRED_HOURLY / OPTIONAL_HOURLY names.
        daily: parallel 'time', 'sunrise' and 'sunset' lists, if the source has them.
    """

    source: str
    metadata: Optional[dict[str, Any]]
    units: Optional[dict[str, Any]]
    hourly: Optional[dict[str, Any]]
    daily: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class DailyAstroEntry:
    day: date
    sunrise: datetime
    sunset: datetime


@dataclass(frozen=True)
class WeatherRecord:
    """One hourly observation in chart units.

    temperature °C, precipitation mm, windspeed/windgust km/h,
    cloudcover integer %, snowfall cm. `daily` is the same tuple object for
    every record of a load; the per-day lookup happens in derived.py.
    """

    time: datetime
    temperature: Optional[float]
    precipitation: float
    windspeed: Optional[float]
    windgust: Optional[float] = None
    cloudcover: Optional[int] = None
    snowfall: Optional[float] = None
    daily: Optional[tuple[DailyAstroEntry, ...]] = None


@dataclass(frozen=True)
class DateWindow:
    """Inclusive [start, end] filter; None means unbounded on that side."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
