# Project: meteo-chart
# Owner: GreenUnicorn
"""
loader.py — Load raw weather data from a static JSON package, the
Open-Meteo forecast API or a station CSV file.

Each loader issues at most one request and returns a RawWeatherPayload with
canonical key names. Structural checks beyond "does it parse" are left to
validator.py.

API docs: https://open-meteo.com/en/docs
"""

import logging
from pathlib import Path
from typing import Any

from meteo_chart.errors import HttpError, LoadError, MalformedPayloadError, NotFoundError
from meteo_chart.models import RawWeatherPayload
from meteo_chart.utils import fetch, fetch_json, parse_json

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

# Open-Meteo hourly field -> canonical hourly key
HOURLY_VARIABLES = {
    "temperature_2m": "temperature",
    "rain": "precipitation",
    "wind_speed_10m": "windspeed",
    "cloud_cover": "cloudcover",
    "wind_gusts_10m": "windgust",
    "snowfall": "snowfall",
}

DAILY_VARIABLES = ["sunrise", "sunset"]

DEFAULT_MODEL = "meteofrance_seamless"

# Station CSV layout (Météo-France daily climatology export)
CSV_COLUMNS = [
    "NUM_POSTE", "NOM_USUEL", "LAT", "LON", "ALTI", "AAAAMMJJ", "RR", "TM", "FFM",
]
CSV_DELIMITER = ";"


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read_text(source: str, label: str) -> str:
    """Return the body of a local file or a URL."""
    if _is_url(source):
        return fetch(source, label=label).text

    path = Path(source)
    if not path.exists():
        logger.error("%s not found at %s", label, path)
        raise NotFoundError(f"{label} not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.error("%s at %s is not UTF-8: %s", label, path, e)
        raise MalformedPayloadError(f"{label} is not valid UTF-8 text: {path}") from e
    except OSError as e:
        logger.error("Cannot read %s at %s: %s", label, path, e)
        raise LoadError(f"Cannot read {label.lower()} {path}: {e}") from e


# ─────────────────────────────────────────────────────────────
# Static JSON package
# ─────────────────────────────────────────────────────────────

def load_static(source: str) -> RawWeatherPayload:
    """Load a static JSON weather package from a path or URL.

    Expected shape::

        {
          "metadata": {"latitude": 47.2, "longitude": -1.55, ...},
          "units": {"temperature": "C", "windspeed": "ms-1", ...},
          "data_1h": {"time": [...], "temperature": [...],
                      "precipitation": [...], "windspeed": [...]},
          "data_day": {"time": [...], "sunrise": [...], "sunset": [...]}
        }

    Only 'data_day' is optional. Missing sections are passed through as None
    so the validator can report them.

    Args:
        source: Local file path or http(s) URL.

    Returns:
        RawWeatherPayload with source='static'.

    Raises:
        NotFoundError: If the file or URL does not exist.
        HttpError: If the server answers with another non-2xx status.
        MalformedPayloadError: If the body is not a JSON object.
    """
    data = parse_json(_read_text(source, "Weather data file"), label="Weather data file")
    if not isinstance(data, dict):
        raise MalformedPayloadError("Weather data file is empty or not a JSON object")

    hourly = data.get("data_1h")
    if isinstance(hourly, dict):
        hourly = dict(hourly)
        # meteoblue names gusts 'windgusts' and cover 'totalcloudcover'
        if "windgusts" in hourly and "windgust" not in hourly:
            hourly["windgust"] = hourly.pop("windgusts")
        if "totalcloudcover" in hourly and "cloudcover" not in hourly:
            hourly["cloudcover"] = hourly.pop("totalcloudcover")

    daily = data.get("data_day")
    if not (isinstance(daily, dict) and "sunrise" in daily and "sunset" in daily):
        daily = None

    logger.info("Loaded static weather package from %s", source)
    return RawWeatherPayload(
        source="static",
        metadata=data.get("metadata"),
        units=data.get("units"),
        hourly=hourly,
        daily=daily,
    )


# ─────────────────────────────────────────────────────────────
# Open-Meteo forecast
# ─────────────────────────────────────────────────────────────

def load_forecast(
    latitude: float,
    longitude: float,
    forecast_days: int = 3,
    timezone: str = "auto",
    model: str = DEFAULT_MODEL,
) -> RawWeatherPayload:
    """Fetch an hourly forecast with daily sunrise/sunset from Open-Meteo.

    Args:
        latitude: Location latitude in decimal degrees.
        longitude: Location longitude in decimal degrees.
        forecast_days: Number of days to fetch (max 16).
        timezone: IANA zone name or 'auto' to use the location's zone.
        model: Open-Meteo model selector.

    Returns:
        RawWeatherPayload with source='forecast'.

    Raises:
        MalformedPayloadError: On any non-2xx status or if the response
            has no 'hourly' section.
        LoadError: If the request itself fails.
    """
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "hourly": ",".join(HOURLY_VARIABLES),
        "daily": ",".join(DAILY_VARIABLES),
        "timezone": timezone,
        "forecast_days": forecast_days,
        "models": model,
    }

    try:
        data = fetch_json(OPEN_METEO_URL, params=params, label="Open-Meteo forecast API")
    except (NotFoundError, HttpError) as e:
        raise MalformedPayloadError(str(e)) from e

    return _parse_forecast(data)


def _parse_forecast(data: Any) -> RawWeatherPayload:
    """Map an Open-Meteo response onto canonical payload keys.

    Raises:
        MalformedPayloadError: If the response has no 'hourly' section.
    """
    if not isinstance(data, dict) or not isinstance(data.get("hourly"), dict):
        raise MalformedPayloadError("Unexpected API response structure: missing 'hourly'")

    raw_hourly = data["hourly"]
    hourly: dict[str, Any] = {"time": raw_hourly.get("time")}
    for api_name, key in HOURLY_VARIABLES.items():
        if api_name in raw_hourly:
            hourly[key] = raw_hourly[api_name]

    metadata = {
        "latitude": data.get("latitude"),
        "longitude": data.get("longitude"),
        "timezone": data.get("timezone"),
        "utc_offset_seconds": data.get("utc_offset_seconds"),
        "elevation": data.get("elevation"),
    }

    hourly_units = data.get("hourly_units")
    units = None
    if isinstance(hourly_units, dict):
        units = {
            "temperature": hourly_units.get("temperature_2m"),
            "windspeed": hourly_units.get("wind_speed_10m"),
        }

    daily = data.get("daily")
    if not (isinstance(daily, dict) and "sunrise" in daily and "sunset" in daily):
        daily = None

    return RawWeatherPayload(
        source="forecast",
        metadata=metadata,
        units=units,
        hourly=hourly,
        daily=daily,
    )


# ─────────────────────────────────────────────────────────────
# Station CSV
# ─────────────────────────────────────────────────────────────

def _parse_number(raw: str, strict: bool, line_no: int, column: str) -> float:
    """Parse one CSV cell; unparsable cells become 0 unless strict."""
    try:
        return float(raw.strip().replace(",", "."))
    except ValueError:
        if strict:
            raise MalformedPayloadError(
                f"Invalid number {raw!r} in column {column} at line {line_no}"
            )
        logger.debug("Line %d column %s: %r is not a number, using 0", line_no, column, raw)
        return 0.0


def _format_date(raw: str) -> str:
    """Reformat 'YYYYMMDD' as 'YYYY-MM-DD'."""
    raw = raw.strip()
    return f"{raw[0:4]}-{raw[4:6]}-{raw[6:8]}"


def load_csv(source: str, strict: bool = False) -> RawWeatherPayload:
    """Load a semicolon-delimited daily station file.

    The first line is a header and is discarded. Each non-blank line is split
    into CSV_COLUMNS (missing trailing cells count as empty).

    Args:
        source: Local file path or http(s) URL.
        strict: If True, a cell that is not a number raises instead of
            silently becoming 0.

    Returns:
        RawWeatherPayload with source='csv'. Latitude and longitude come from
        the first data row; wind speed is in m/s.

    Raises:
        NotFoundError: If the file or URL does not exist.
        MalformedPayloadError: If the file has no data rows, or (strict) a
            numeric cell does not parse.
    """
    text = _read_text(source, "Station CSV file")
    lines = text.splitlines()[1:]

    hourly: dict[str, list] = {
        "time": [], "temperature": [], "precipitation": [], "windspeed": [],
    }
    metadata = None

    for line_no, line in enumerate(lines, start=2):
        if not line.strip():
            continue
        cells = line.split(CSV_DELIMITER)
        cells += [""] * (len(CSV_COLUMNS) - len(cells))
        row = dict(zip(CSV_COLUMNS, cells))

        if metadata is None:
            metadata = {
                "latitude": _parse_number(row["LAT"], strict, line_no, "LAT"),
                "longitude": _parse_number(row["LON"], strict, line_no, "LON"),
                "elevation": _parse_number(row["ALTI"], strict, line_no, "ALTI"),
                "name": row["NOM_USUEL"].strip(),
            }

        hourly["time"].append(_format_date(row["AAAAMMJJ"]))
        hourly["precipitation"].append(_parse_number(row["RR"], strict, line_no, "RR"))
        hourly["temperature"].append(_parse_number(row["TM"], strict, line_no, "TM"))
        hourly["windspeed"].append(_parse_number(row["FFM"], strict, line_no, "FFM"))

    if metadata is None:
        raise MalformedPayloadError("Station CSV file has no data rows")

    logger.info("Loaded %d rows from station CSV %s", len(hourly["time"]), source)
    return RawWeatherPayload(
        source="csv",
        metadata=metadata,
        units={"temperature": "°C", "windspeed": "m/s"},
        hourly=hourly,
    )


def load_source(config: dict, latitude: float | None = None, longitude: float | None = None) -> RawWeatherPayload:
    """Load from whichever source config['source']['kind'] names.

    Args:
        config: Parsed configuration (see config.py).
        latitude: Overrides [location].latitude for the forecast source.
        longitude: Overrides [location].longitude for the forecast source.

    Returns:
        The loaded RawWeatherPayload.

    Raises:
        ValueError: If the source kind is unknown.
    """
    source = config["source"]
    kind = source["kind"]

    if kind == "static":
        return load_static(source["path"])
    if kind == "csv":
        return load_csv(source["path"], strict=source.get("csv_strict", False))
    if kind == "forecast":
        location = config["location"]
        forecast = config.get("forecast", {})
        return load_forecast(
            latitude=location["latitude"] if latitude is None else latitude,
            longitude=location["longitude"] if longitude is None else longitude,
            forecast_days=forecast.get("forecast_days", 3),
            timezone=forecast.get("timezone", "auto"),
            model=forecast.get("model", DEFAULT_MODEL),
        )
    raise ValueError(f"Unknown data source kind: {kind!r}")
