# Project: meteo-chart
# Owner: GreenUnicorn
"""
test_session.py — Tests for session.py: load cycles, stale results,
window handling and location search.

Loaders and the geocoder are monkeypatched — no network calls.
"""

import copy
from datetime import date, datetime, time, timedelta

import pytest

from meteo_chart.config import DEFAULT_CONFIG
from meteo_chart.errors import LocationNotFoundError, LocationSearchError, MalformedPayloadError
from meteo_chart.models import DateWindow, RawWeatherPayload
from meteo_chart.normalize import normalize
from meteo_chart.session import (
    apply_location,
    begin_load,
    commit_load,
    fail_load,
    initial_state,
    load_records,
    reload,
    search_location,
    set_window,
    set_window_dates,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_payload(start: str = "2024-05-01T00:00", hours: int = 72, source: str = "forecast",
                  latitude: float = 47.2) -> RawWeatherPayload:
    base = datetime.fromisoformat(start)
    times = [(base + timedelta(hours=i)).isoformat(timespec="minutes") for i in range(hours)]
    return RawWeatherPayload(
        source=source,
        metadata={"latitude": latitude, "longitude": -1.5},
        units={"temperature": "°C", "windspeed": "km/h"},
        hourly={
            "time": times,
            "temperature": [12.0] * hours,
            "precipitation": [0.0] * hours,
            "windspeed": [10.0] * hours,
        },
    )


@pytest.fixture()
def config():
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture()
def state(config):
    return initial_state(config)


NOW = datetime(2024, 5, 1, 9, 30)


# ---------------------------------------------------------------------------
# initial_state / load_records
# ---------------------------------------------------------------------------

def test_initial_state_from_config(state):
    assert state.latitude == DEFAULT_CONFIG["location"]["latitude"]
    assert state.place_name == DEFAULT_CONFIG["location"]["name"]
    assert state.records == ()
    assert state.window is None
    assert state.generation == 0


def test_load_records_runs_whole_pipeline(monkeypatch, config):
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: _make_payload(hours=3))
    payload, records = load_records(config, 47.2, -1.5)
    assert payload.source == "forecast"
    assert len(records) == 3


# ---------------------------------------------------------------------------
# commit_load / fail_load
# ---------------------------------------------------------------------------

def test_first_forecast_load_uses_today_tomorrow_window(state):
    payload = _make_payload()
    state, gen = begin_load(state)
    state = commit_load(state, gen, payload, normalize(payload), now=NOW)

    assert state.window == DateWindow(start=NOW, end=datetime(2024, 5, 2, 23, 59, 59))
    assert state.filtered[0].time == datetime(2024, 5, 1, 10, 0)
    assert state.filtered[-1].time == datetime(2024, 5, 2, 23, 0)
    assert state.error is None


def test_first_static_load_uses_full_span(state):
    payload = _make_payload(source="static", hours=5)
    state, gen = begin_load(state)
    state = commit_load(state, gen, payload, normalize(payload), now=NOW)

    assert len(state.filtered) == 5
    assert state.window.start == datetime(2024, 5, 1, 0, 0)
    assert state.window.end == datetime(2024, 5, 1, 4, 0)


def test_stale_result_is_dropped(state):
    """A result from an older load must not overwrite a newer one."""
    old_payload = _make_payload(latitude=1.0)
    new_payload = _make_payload(latitude=2.0)

    state, old_gen = begin_load(state)
    state, new_gen = begin_load(state)
    state = commit_load(state, new_gen, new_payload, normalize(new_payload), now=NOW)
    state = commit_load(state, old_gen, old_payload, normalize(old_payload), now=NOW)

    assert state.payload is new_payload


def test_stale_error_is_dropped(state):
    state, old_gen = begin_load(state)
    state, _ = begin_load(state)
    state = fail_load(state, old_gen, MalformedPayloadError("late failure"))
    assert state.error is None


def test_failure_keeps_previous_records(state):
    payload = _make_payload()
    state, gen = begin_load(state)
    state = commit_load(state, gen, payload, normalize(payload), now=NOW)
    before = state.filtered

    state, gen = begin_load(state)
    state = fail_load(state, gen, MalformedPayloadError("Unexpected API response structure"))

    assert state.filtered == before
    assert state.error.startswith("Error: Unexpected API response structure")


# ---------------------------------------------------------------------------
# reload
# ---------------------------------------------------------------------------

def test_reload_success(monkeypatch, state):
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: _make_payload())
    state = reload(state, now=NOW)
    assert len(state.records) == 72
    assert state.generation == 1


def test_reload_validation_failure_shows_no_data(monkeypatch, state):
    broken = RawWeatherPayload(source="static", metadata=None, units=None, hourly=None)
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: broken)

    state = reload(state, now=NOW)

    assert state.records == ()
    assert state.filtered == ()
    assert "latitude/longitude" in state.error


def test_reload_non_numeric_value_sets_error(monkeypatch, state):
    payload = _make_payload(hours=2)
    payload.hourly["temperature"] = ["12.3", 13.0]
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: payload)

    state = reload(state, now=NOW)

    assert state.records == ()
    assert "non-numeric value" in state.error
    assert "Troubleshooting:" in state.error


def test_reload_non_utf8_static_file_sets_error(tmp_path, config):
    path = tmp_path / "meteo.json"
    path.write_bytes(b"\xff\xfe{}")
    config["source"] = {"kind": "static", "path": str(path), "csv_strict": False}

    state = reload(initial_state(config), now=NOW)

    assert state.records == ()
    assert "not valid UTF-8" in state.error


def test_reload_keeps_user_window_clamped(monkeypatch, state):
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: _make_payload())
    state = reload(state, now=NOW)
    state = set_window(state, datetime(2024, 4, 1), datetime(2024, 5, 1, 5, 0))

    monkeypatch.setattr(
        "meteo_chart.session.load_source",
        lambda config, **kw: _make_payload(start="2024-05-01T03:00"),
    )
    state = reload(state, now=NOW)

    assert state.window.start == datetime(2024, 5, 1, 3, 0)
    assert state.window.end == datetime(2024, 5, 1, 5, 0)
    assert len(state.filtered) == 3


# ---------------------------------------------------------------------------
# set_window
# ---------------------------------------------------------------------------

def test_set_window_refilters(monkeypatch, state):
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: _make_payload())
    state = reload(state, now=NOW)

    state = set_window(state, datetime(2024, 5, 3, 0, 0), datetime(2024, 5, 3, 23, 59))

    assert len(state.filtered) == 24
    assert state.filtered[0].time.day == 3


def test_set_window_reversed_is_empty(monkeypatch, state):
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: _make_payload())
    state = reload(state, now=NOW)

    state = set_window(state, datetime(2024, 5, 3), datetime(2024, 5, 2))

    assert state.filtered == ()
    assert state.error is None



def test_set_window_dates_changing_end_keeps_now_start(monkeypatch, state):
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: _make_payload())
    state = reload(state, now=NOW)

    state = set_window_dates(state, date(2024, 5, 1), date(2024, 5, 3))

    assert state.window == DateWindow(start=NOW, end=datetime.combine(date(2024, 5, 3), time.max))
    assert state.filtered[0].time == datetime(2024, 5, 1, 10, 0)
    assert state.filtered[-1].time == datetime(2024, 5, 3, 23, 0)


def test_set_window_dates_changing_start_keeps_end(monkeypatch, state):
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: _make_payload())
    state = reload(state, now=NOW)

    state = set_window_dates(state, date(2024, 5, 2), date(2024, 5, 2))

    assert state.window == DateWindow(start=datetime(2024, 5, 2, 0, 0), end=datetime(2024, 5, 2, 23, 59, 59))
    assert len(state.filtered) == 24


def test_set_window_dates_unchanged_returns_same_state(monkeypatch, state):
    monkeypatch.setattr("meteo_chart.session.load_source", lambda config, **kw: _make_payload())
    state = reload(state, now=NOW)

    assert set_window_dates(state, date(2024, 5, 1), date(2024, 5, 2)) is state


# ---------------------------------------------------------------------------
# apply_location / search_location
# ---------------------------------------------------------------------------

LYON = {"latitude": 45.76, "longitude": 4.83, "name": "Lyon, France", "elevation": 173.0}


def test_apply_location(state):
    state = apply_location(state, LYON)
    assert (state.latitude, state.longitude) == (45.76, 4.83)
    assert state.place_name == "Lyon, France"
    assert state.elevation == 173.0


def test_search_location_reloads_with_new_coordinates(monkeypatch, state):
    captured = {}

    def fake_load_source(config, latitude=None, longitude=None):
        captured["coords"] = (latitude, longitude)
        return _make_payload()

    monkeypatch.setattr("meteo_chart.session.geocode", lambda place: LYON)
    monkeypatch.setattr("meteo_chart.session.load_source", fake_load_source)

    state = search_location(state, "Lyon", now=NOW)

    assert captured["coords"] == (45.76, 4.83)
    assert state.place_name == "Lyon, France"
    assert state.location_error is None
    assert state.records


def test_search_location_not_found_keeps_coordinates(monkeypatch, state):
    def not_found(place):
        raise LocationNotFoundError(f'City "{place}" not found.')

    monkeypatch.setattr("meteo_chart.session.geocode", not_found)
    before = (state.latitude, state.longitude)

    state = search_location(state, "Atlantis")

    assert (state.latitude, state.longitude) == before
    assert state.location_error == 'City "Atlantis" not found.'


def test_search_location_failure(monkeypatch, state):
    def failing(place):
        raise LocationSearchError("Search failed for 'Lyon': HTTP error: 503")

    monkeypatch.setattr("meteo_chart.session.geocode", failing)

    state = search_location(state, "Lyon")

    assert state.location_error.startswith("Search failed")
    assert state.generation == 0
