# Project: meteo-chart
# Owner: GreenUnicorn
"""
derived.py — Presentation values computed per record: weather icon,
day/night state and the sunrise/sunset times of the record's day.

All functions are pure; calling them twice on the same record gives the
same answer.
"""

from typing import Optional

from meteo_chart.models import DailyAstroEntry, WeatherRecord
from meteo_chart.utils import fmt_hour

# Fallback daylight hours when the source has no sunrise/sunset: [start, end)
DAY_START_HOUR = 6
DAY_END_HOUR = 21

CLEAR_MAX_CLOUD = 10      # % cloud cover below which the sky is clear
PARTLY_MAX_CLOUD = 70     # % cloud cover below which it is partly cloudy

ICON_EMOJI: dict[str, str] = {
    "snow": "❄️",
    "rain": "🌧",
    "clear-day": "☀️",
    "clear-night": "🌙",
    "partly-cloudy-day": "⛅",
    "partly-cloudy-night": "☁️",
    "overcast-day": "☁️",
    "overcast-night": "☁️",
}


def find_astro_entry(record: WeatherRecord) -> Optional[DailyAstroEntry]:
    """Return the first daily entry whose day matches the record's date."""
    if not record.daily:
        return None
    day = record.time.date()
    for entry in record.daily:
        if entry.day == day:
            return entry
    return None


def is_daytime(record: WeatherRecord) -> bool:
    """True between sunrise (inclusive) and sunset (exclusive).

    Uses the sunrise/sunset of the record's day when available, otherwise
    the fixed DAY_START_HOUR..DAY_END_HOUR range.
    """
    entry = find_astro_entry(record)
    if entry is not None:
        return entry.sunrise <= record.time < entry.sunset
    return DAY_START_HOUR <= record.time.hour < DAY_END_HOUR


def resolve_icon(record: WeatherRecord) -> str:
    """Pick an icon name for a record.

    Priority: snow, then rain, then cloud cover split by day/night.
    Missing snowfall or cloud cover counts as 0.
    """
    if (record.snowfall or 0) > 0:
        return "snow"
    if (record.precipitation or 0) > 0:
        return "rain"

    suffix = "day" if is_daytime(record) else "night"
    cloud = record.cloudcover or 0
    if cloud < CLEAR_MAX_CLOUD:
        return f"clear-{suffix}"
    if cloud < PARTLY_MAX_CLOUD:
        return f"partly-cloudy-{suffix}"
    return f"overcast-{suffix}"


def sun_times(record: WeatherRecord) -> tuple[str, str]:
    """Return ('HH:MM', 'HH:MM') sunrise/sunset for the record's day, or ('', '')."""
    entry = find_astro_entry(record)
    if entry is None:
        return "", ""
    return fmt_hour(entry.sunrise), fmt_hour(entry.sunset)


def describe(record: WeatherRecord) -> dict:
    """Bundle every derived value for one record (used by tooltips and tables)."""
    icon = resolve_icon(record)
    sunrise, sunset = sun_times(record)
    return {
        "icon": icon,
        "emoji": ICON_EMOJI[icon],
        "daytime": is_daytime(record),
        "sunrise": sunrise,
        "sunset": sunset,
    }
