# Project: meteo-chart
# Owner: GreenUnicorn
"""
session.py — Dashboard session state as immutable snapshots.

Every trigger (first load, location change, window change) takes the current
SessionState and returns a new one. Loads are numbered: a result is only
committed if its generation is still the latest, so a slow response for an
old location can never overwrite data for the new one.
"""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from meteo_chart.errors import LocationNotFoundError, WeatherDataError, describe_error
from meteo_chart.geocode import geocode
from meteo_chart.loader import load_source
from meteo_chart.models import DateWindow, RawWeatherPayload, WeatherRecord
from meteo_chart.normalize import normalize
from meteo_chart.validator import validate
from meteo_chart.window import default_window, filter_records, full_span, reconcile_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    config: dict
    latitude: float
    longitude: float
    place_name: str
    elevation: Optional[float] = None
    payload: Optional[RawWeatherPayload] = None
    records: tuple[WeatherRecord, ...] = ()
    window: Optional[DateWindow] = None
    filtered: tuple[WeatherRecord, ...] = ()
    error: Optional[str] = None
    location_error: Optional[str] = None
    generation: int = 0


def initial_state(config: dict) -> SessionState:
    """Build the empty session for a configuration (nothing loaded yet)."""
    location = config["location"]
    return SessionState(
        config=config,
        latitude=location["latitude"],
        longitude=location["longitude"],
        place_name=location["name"],
        elevation=location.get("elevation"),
    )


def load_records(config: dict, latitude: float, longitude: float) -> tuple[RawWeatherPayload, list[WeatherRecord]]:
    """Run loader, validator and normalizer for one load.

    Raises:
        WeatherDataError: From whichever stage fails first.
    """
    payload = validate(load_source(config, latitude=latitude, longitude=longitude))
    return payload, normalize(payload)


def begin_load(state: SessionState) -> tuple[SessionState, int]:
    """Start a new load; any earlier in-flight load becomes stale."""
    generation = state.generation + 1
    return dataclasses.replace(state, generation=generation), generation


def commit_load(
    state: SessionState,
    generation: int,
    payload: RawWeatherPayload,
    records: list[WeatherRecord],
    now: Optional[datetime] = None,
) -> SessionState:
    """Store a successful load and refilter.

    The first successful load picks the default window (full span for
    static and CSV data, now..end of tomorrow for forecasts); later loads
    keep the user's window, clamped to the new data span.
    """
    if generation != state.generation:
        logger.info("Dropping stale load result (generation %d, current %d)", generation, state.generation)
        return state

    if state.window is None:
        if payload.source == "forecast":
            window = default_window(records, now=now)
        else:
            window = full_span(records)
    else:
        window = reconcile_window(state.window, records)

    return dataclasses.replace(
        state,
        payload=payload,
        records=tuple(records),
        window=window,
        filtered=tuple(filter_records(records, window)),
        error=None,
    )


def fail_load(state: SessionState, generation: int, exc: Exception) -> SessionState:
    """Record a failed load; previously displayed records stay in place."""
    if generation != state.generation:
        logger.info("Dropping stale load error (generation %d, current %d)", generation, state.generation)
        return state
    return dataclasses.replace(state, error=describe_error(exc))


def reload(state: SessionState, now: Optional[datetime] = None) -> SessionState:
    """Load data for the current coordinates and commit the result."""
    state, generation = begin_load(state)
    try:
        payload, records = load_records(state.config, state.latitude, state.longitude)
    except WeatherDataError as e:
        logger.warning("Load failed: %s", e)
        return fail_load(state, generation, e)
    logger.info("Loaded %d records for %s", len(records), state.place_name)
    return commit_load(state, generation, payload, records, now=now)


def set_window(state: SessionState, start: Optional[datetime], end: Optional[datetime]) -> SessionState:
    """Change the date window and refilter the current records."""
    window = DateWindow(start=start, end=end)
    return dataclasses.replace(
        state,
        window=window,
        filtered=tuple(filter_records(state.records, window)),
    )


def set_window_dates(state: SessionState, start_day: Optional[date], end_day: Optional[date]) -> SessionState:
    """Apply day-level picks from the date inputs.

    Only a bound whose day actually changed is rebuilt (start of day for the
    start, end of day for the end); an unchanged bound keeps its exact time,
    such as the "now" start of the forecast default window. Returns the same
    state when neither day changed.
    """
    window = state.window or DateWindow()
    start, end = window.start, window.end
    if start_day != (start.date() if start else None):
        start = None if start_day is None else datetime.combine(start_day, time.min)
    if end_day != (end.date() if end else None):
        end = None if end_day is None else datetime.combine(end_day, time.max)
    if start is window.start and end is window.end:
        return state
    return set_window(state, start, end)


def apply_location(state: SessionState, location: dict) -> SessionState:
    """Switch to a resolved location (see geocode.geocode)."""
    return dataclasses.replace(
        state,
        latitude=location["latitude"],
        longitude=location["longitude"],
        place_name=location["name"],
        elevation=location.get("elevation"),
        location_error=None,
    )


def search_location(state: SessionState, place: str, now: Optional[datetime] = None) -> SessionState:
    """Geocode a place name, then reload the forecast for it.

    On failure the coordinates and data are left untouched and only
    location_error is set.
    """
    try:
        location = geocode(place)
    except LocationNotFoundError:
        return dataclasses.replace(state, location_error=f'City "{place}" not found.')
    except WeatherDataError as e:
        logger.warning("Location search failed: %s", e)
        return dataclasses.replace(state, location_error=f"Search failed: {e}")
    return reload(apply_location(state, location), now=now)
