# Project: meteo-chart
# Owner: GreenUnicorn
"""
utils.py — Shared utilities: single-attempt HTTP fetch, rounding and
date formatting.
"""

import json
import logging
import math
from datetime import date, datetime
from typing import Any

import requests

from meteo_chart.errors import HttpError, LoadError, MalformedPayloadError, NotFoundError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10
USER_AGENT = "meteo-chart/0.1 (weather dashboard)"


def fmt_day(value: date) -> str:
    """Format a date or datetime as a short label like 'Mon 24 Feb'."""
    return value.strftime("%a %d %b")


def fmt_hour(value: datetime) -> str:
    """Format a datetime as 'HH:MM'."""
    return value.strftime("%H:%M")


def round_half_away(value: float, digits: int = 1) -> float:
    """Round to `digits` decimals, ties away from zero.

    Python's round() uses banker's rounding and is at the mercy of binary
    representation (round(12.35, 1) == 12.3), so we scale, nudge by a tiny
    epsilon and floor/ceil instead.

    Args:
        value: Number to round.
        digits: Number of decimals to keep.

    Returns:
        Rounded value, e.g. 12.35 -> 12.4, -12.35 -> -12.4, 69.5 (digits=0) -> 70.
    """
    factor = 10 ** digits
    scaled = abs(value) * factor
    rounded = math.floor(scaled + 0.5 + 1e-9) / factor
    return math.copysign(rounded, value) if rounded else 0.0


def fetch(
    url: str,
    params: dict | None = None,
    label: str = "request",
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> requests.Response:
    """Issue exactly one GET request and map failures to LoadError types.

    Args:
        url: Absolute URL to fetch.
        params: Optional query parameters.
        label: Human-readable name for the call, used in log and error messages.
        timeout: Socket timeout in seconds.

    Returns:
        The successful response.

    Raises:
        NotFoundError: On HTTP 404.
        HttpError: On any other non-2xx status.
        LoadError: If the request itself fails (DNS, connection, timeout).
    """
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    try:
        r = requests.get(url, params=params, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        logger.error("%s failed: %s", label, e)
        raise LoadError(f"{label} failed: {e}") from e

    if r.status_code == 404:
        logger.error("%s returned 404 for %s", label, url)
        raise NotFoundError(f"{label}: resource not found at {url}")
    if not r.ok:
        logger.error("%s returned HTTP %d", label, r.status_code)
        raise HttpError(r.status_code, f"{label}: HTTP error {r.status_code}")
    return r


def parse_json(text: str, label: str = "payload") -> Any:
    """Parse a JSON body, raising MalformedPayloadError on failure."""
    try:
        return json.loads(text)
    except ValueError as e:
        logger.error("%s is not valid JSON: %s", label, e)
        raise MalformedPayloadError(f"{label} is not valid JSON") from e


def fetch_json(url: str, params: dict | None = None, label: str = "request") -> Any:
    """Fetch a URL once and parse its body as JSON."""
    r = fetch(url, params=params, label=label)
    return parse_json(r.text, label=label)
