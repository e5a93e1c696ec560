# Project: meteo-chart
# Owner: GreenUnicorn
"""
errors.py — Exception types for loading, validating and locating weather data.

Every error is terminal for the load that raised it: nothing is retried.
describe_error() turns any of them into the text shown on the dashboard.
"""


class WeatherDataError(Exception):
    """Base class for every error surfaced to the user."""


class LoadError(WeatherDataError):
    """The data source could not be fetched or parsed."""


class NotFoundError(LoadError):
    """The resource (file, URL or city) does not exist."""


class HttpError(LoadError):
    """The server answered with a non-2xx status other than 404."""

    def __init__(self, status: int, message: str | None = None):
        self.status = status
        super().__init__(message or f"HTTP error: {status}")


class MalformedPayloadError(LoadError):
    """The body is not the expected format or lacks its top-level section."""


class LocationSearchError(LoadError):
    """The geocoding or elevation lookup failed for a reason other than no match."""


class LocationNotFoundError(NotFoundError, ValueError):
    """Raised when the geocoder returns no result for a place name."""


class ValidationError(WeatherDataError):
    """The payload parsed but is incomplete or inconsistent.

    Attributes:
        field_group: One of 'metadata', 'units', 'hourly', 'hourly-length',
            'hourly-time' or 'daily'. Identifies the first failing check.
    """

    def __init__(self, field_group: str, message: str):
        self.field_group = field_group
        super().__init__(message)


_REMEDIATION = {
    NotFoundError: [
        "Check that the data file exists at the configured path",
        "Check the [source] path in config.toml",
        "Try opening the URL directly in a browser",
    ],
    HttpError: [
        "Check that the server hosting the data is running",
        "Try opening the URL directly in a browser",
        "Reload the page",
    ],
    MalformedPayloadError: [
        "Check that the file content is valid JSON (or CSV for station data)",
        "Check that the file was not truncated while downloading",
        "Check the log file for the full parser error",
    ],
    ValidationError: [
        "Check the format of the data file",
        "Every hourly array must have as many values as 'time'",
        "Latitude and longitude must be numbers",
        "Hourly values must be numbers or null",
    ],
    LocationSearchError: [
        "Check your internet connection",
        "The geocoding service may be rate-limiting requests; wait a minute and retry",
        "Try a different spelling of the city name",
    ],
    # Fallback for every other LoadError; keep last
    LoadError: [
        "Check your internet connection",
        "Check that the [source] path in config.toml points to a readable file",
        "Reload the page",
    ],
}


def describe_error(exc: Exception) -> str:
    """Build the user-facing diagnostic for a failed load.

    Args:
        exc: The exception that ended the load.

    Returns:
        The error message followed by numbered troubleshooting steps
        (when the error kind has any).
    """
    lines = [f"Error: {exc}"]
    for kind, steps in _REMEDIATION.items():
        if isinstance(exc, kind):
            lines.append("")
            lines.append("Troubleshooting:")
            lines.extend(f"{i}. {step}" for i, step in enumerate(steps, start=1))
            break
    return "\n".join(lines)
