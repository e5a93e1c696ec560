# Project: meteo-chart
# Owner: GreenUnicorn
"""
test_geocode.py — Unit tests for geocode.py.

All tests mock fetch_json — no real network calls.
"""

import pytest

from meteo_chart.errors import HttpError, LocationNotFoundError, LocationSearchError, NotFoundError
from meteo_chart.geocode import fetch_elevation, geocode


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_result(name="Nantes, Loire-Atlantique, Pays de la Loire, France", lat="47.2186371", lon="-1.5541362") -> dict:
    return {"lat": lat, "lon": lon, "display_name": name}


def _fake_api(search_results, elevation=(21.0,), calls=None):
    """Return a fetch_json replacement answering search and elevation queries."""
    def fake_fetch_json(url, params=None, label=None):
        if calls is not None:
            calls.append((url, params))
        if "elevation" in url:
            return {"elevation": list(elevation)}
        return search_results
    return fake_fetch_json


# ---------------------------------------------------------------------------
# geocode — successful cases
# ---------------------------------------------------------------------------

def test_geocode_returns_coordinates_name_and_elevation(monkeypatch):
    monkeypatch.setattr("meteo_chart.geocode.fetch_json", _fake_api([_make_result()]))

    result = geocode("Nantes")

    assert result["latitude"] == pytest.approx(47.2186371)
    assert result["longitude"] == pytest.approx(-1.5541362)
    assert result["name"].startswith("Nantes")
    assert result["elevation"] == 21.0


def test_geocode_query_is_restricted_to_france(monkeypatch):
    calls = []
    monkeypatch.setattr("meteo_chart.geocode.fetch_json", _fake_api([_make_result()], calls=calls))

    geocode("Brest")

    search_url, search_params = calls[0]
    assert search_params == {"format": "json", "q": "Brest,france", "limit": 1}
    elevation_url, elevation_params = calls[1]
    assert elevation_url.endswith("/v1/elevation")
    assert elevation_params == {"latitude": pytest.approx(47.2186371), "longitude": pytest.approx(-1.5541362)}


def test_geocode_uses_first_result_only(monkeypatch):
    results = [
        _make_result(name="Paris, Île-de-France, France", lat="48.8566", lon="2.3522"),
        _make_result(name="Paris, Hautes-Alpes, France", lat="44.6", lon="6.2"),
    ]
    monkeypatch.setattr("meteo_chart.geocode.fetch_json", _fake_api(results))

    assert geocode("Paris")["latitude"] == pytest.approx(48.8566)


# ---------------------------------------------------------------------------
# geocode — failures
# ---------------------------------------------------------------------------

def test_geocode_empty_results_raise_not_found(monkeypatch):
    monkeypatch.setattr("meteo_chart.geocode.fetch_json", _fake_api([]))
    with pytest.raises(LocationNotFoundError, match="not found"):
        geocode("xyznonexistent")


def test_location_not_found_is_value_error():
    """LocationNotFoundError must stay a subclass of ValueError and NotFoundError."""
    assert issubclass(LocationNotFoundError, ValueError)
    assert issubclass(LocationNotFoundError, NotFoundError)


def test_geocode_request_failure_raises_search_error(monkeypatch):
    def failing(url, params=None, label=None):
        raise HttpError(503)

    monkeypatch.setattr("meteo_chart.geocode.fetch_json", failing)
    with pytest.raises(LocationSearchError, match="Search failed"):
        geocode("Nantes")


def test_geocode_unexpected_response_raises_search_error(monkeypatch):
    monkeypatch.setattr("meteo_chart.geocode.fetch_json", _fake_api({"error": "rate limited"}))
    with pytest.raises(LocationSearchError):
        geocode("Nantes")


def test_geocode_elevation_failure_raises_search_error(monkeypatch):
    monkeypatch.setattr("meteo_chart.geocode.fetch_json", _fake_api([_make_result()], elevation=()))
    with pytest.raises(LocationSearchError, match="Elevation"):
        geocode("Nantes")


def test_fetch_elevation(monkeypatch):
    monkeypatch.setattr("meteo_chart.geocode.fetch_json", lambda url, **kw: {"elevation": [1234.0]})
    assert fetch_elevation(45.9, 6.87) == 1234.0
