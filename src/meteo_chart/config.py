# Project: meteo-chart
# Owner: GreenUnicorn
"""
config.py — Load and validate the TOML configuration file.

We use tomllib (Python 3.11+ stdlib) so no extra install is needed.
The config path defaults to "config.toml" in the current working directory,
but can be overridden for testing. The dashboard falls back to
DEFAULT_CONFIG when no file exists.
"""

import copy
import tomllib
from pathlib import Path


DEFAULT_CONFIG_PATH = Path("config.toml")

SOURCE_KINDS = ("forecast", "static", "csv")

DEFAULT_CONFIG: dict = {
    "location": {
        "latitude": 47.2184,
        "longitude": -1.5536,
        "name": "Nantes, France",
    },
    "source": {
        "kind": "forecast",
        "path": "data/meteo.json",
        "csv_strict": False,
    },
    "forecast": {
        "forecast_days": 3,
        "timezone": "auto",
        "model": "meteofrance_seamless",
    },
    "log": {
        "path": "logs/meteo_chart.log",
        "level": "INFO",
    },
}


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load and validate a TOML configuration file.

    Optional sections ([forecast], [log]) and keys are filled in from
    DEFAULT_CONFIG.

    Args:
        path: Path to the TOML config file.

    Returns:
        Nested dict of configuration values.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If required keys or sections are missing or invalid.
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Copy config.toml.example to config.toml and fill in your location."
        )

    with open(path, "rb") as f:
        config = tomllib.load(f)

    _validate(config)
    return _with_defaults(config)


def _with_defaults(config: dict) -> dict:
    merged = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in config.items():
        if isinstance(values, dict):
            merged.setdefault(section, {}).update(values)
        else:
            merged[section] = values
    return merged


def _validate(config: dict) -> None:
    """Validate that all required config sections and keys are present.

    Expected config schema::

        [location]
        latitude  = <float>   # decimal degrees, e.g. 47.2184
        longitude = <float>   # decimal degrees, e.g. -1.5536
        name      = <str>     # display name, e.g. "Nantes, France"

        [source]
        kind       = <str>    # "forecast", "static" or "csv"
        path       = <str>    # file path or URL (static and csv only)
        csv_strict = <bool>   # reject unparsable CSV numbers instead of using 0

        [forecast]            # optional
        forecast_days = <int> # 1-16
        timezone      = <str> # IANA name or "auto"
        model         = <str> # Open-Meteo model selector

        [log]                 # optional
        path  = <str>
        level = <str>         # DEBUG, INFO, WARNING, ERROR

    Args:
        config: Parsed TOML config dict.

    Raises:
        ValueError: If any required section or key is absent or invalid.
    """
    for section in ("location", "source"):
        if section not in config:
            raise ValueError(f"Missing required config section: [{section}]")

    location = config["location"]
    for key in ("latitude", "longitude", "name"):
        if key not in location:
            raise ValueError(f"Missing required config key: [location].{key}")

    source = config["source"]
    if "kind" not in source:
        raise ValueError("Missing required config key: [source].kind")
    if source["kind"] not in SOURCE_KINDS:
        raise ValueError(
            f"Invalid [source].kind: {source['kind']!r} (expected one of {', '.join(SOURCE_KINDS)})"
        )
    if source["kind"] in ("static", "csv") and "path" not in source:
        raise ValueError("Missing required config key: [source].path")

    days = config.get("forecast", {}).get("forecast_days")
    if days is not None and not 1 <= days <= 16:
        raise ValueError("[forecast].forecast_days must be between 1 and 16")
