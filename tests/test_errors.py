# Project: meteo-chart
# Owner: GreenUnicorn
"""Tests for errors.py — user-facing diagnostics."""

from meteo_chart.errors import (
    HttpError,
    LoadError,
    LocationSearchError,
    MalformedPayloadError,
    NotFoundError,
    ValidationError,
    WeatherDataError,
    describe_error,
)


def test_http_error_keeps_status():
    e = HttpError(502)
    assert e.status == 502
    assert "502" in str(e)


def test_validation_error_keeps_field_group():
    e = ValidationError("units", "Temperature units are missing or invalid")
    assert e.field_group == "units"
    assert isinstance(e, WeatherDataError)
    assert not isinstance(e, LoadError)


def test_describe_error_starts_with_cause():
    text = describe_error(MalformedPayloadError("Weather data file is not valid JSON"))
    assert text.splitlines()[0] == "Error: Weather data file is not valid JSON"
    assert "1. Check that the file content is valid JSON" in text


def test_describe_error_remediation_depends_on_kind():
    not_found = describe_error(NotFoundError("gone"))
    invalid = describe_error(ValidationError("hourly-length", "bad lengths"))
    assert "exists at the configured path" in not_found
    assert "as many values as 'time'" in invalid


def test_describe_error_generic_load_error_has_steps():
    text = describe_error(LoadError("connection refused"))
    assert text.splitlines()[0] == "Error: connection refused"
    assert "1. Check your internet connection" in text


def test_describe_error_location_search_steps():
    text = describe_error(LocationSearchError("Search failed for 'Nantes': timeout"))
    assert "Try a different spelling of the city name" in text
    assert "points to a readable file" not in text


def test_describe_error_without_steps():
    assert describe_error(RuntimeError("boom")) == "Error: boom"
