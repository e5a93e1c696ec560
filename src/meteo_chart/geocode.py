# Project: meteo-chart
# Owner: GreenUnicorn
"""
geocode.py — Look up coordinates and elevation for a French place name.

Coordinates come from OpenStreetMap Nominatim (search restricted to France),
elevation from the Open-Meteo Elevation API. Both are free, no API key.
Nominatim docs: https://nominatim.org/release-docs/latest/api/Search/
"""

import logging

from meteo_chart.errors import LoadError, LocationNotFoundError, LocationSearchError
from meteo_chart.utils import fetch_json

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://nominatim.openstreetmap.org/search"
ELEVATION_URL = "https://api.open-meteo.com/v1/elevation"
COUNTRY = "france"


def fetch_elevation(latitude: float, longitude: float) -> float:
    """Return the terrain elevation in metres for a coordinate.

    Raises:
        LocationSearchError: If the request fails or the response has no value.
    """
    params = {"latitude": latitude, "longitude": longitude}
    try:
        data = fetch_json(ELEVATION_URL, params=params, label="Elevation API")
        return float(data["elevation"][0])
    except LoadError as e:
        raise LocationSearchError(f"Elevation lookup failed: {e}") from e
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise LocationSearchError("Elevation lookup failed: unexpected response") from e


def geocode(place: str) -> dict:
    """Look up coordinates for a place name in France.

    Args:
        place: Free-text city name, e.g. 'Nantes'.

    Returns:
        Dict with keys: latitude (float), longitude (float), name (str,
        the geocoder's display name) and elevation (float, metres).

    Raises:
        LocationNotFoundError: If the search returns no result.
        LocationSearchError: If either request fails.
    """
    params = {
        "format": "json",
        "q": f"{place},{COUNTRY}",
        "limit": 1,
    }

    try:
        results = fetch_json(GEOCODING_URL, params=params, label=f"Geocoding API for '{place}'")
    except LoadError as e:
        raise LocationSearchError(f"Search failed for '{place}': {e}") from e

    if not isinstance(results, list):
        raise LocationSearchError(f"Search failed for '{place}': unexpected response")
    if not results:
        logger.info("No geocoding result for %r", place)
        raise LocationNotFoundError(f'City "{place}" not found. Try a more specific name.')

    result = results[0]
    try:
        latitude = float(result["lat"])
        longitude = float(result["lon"])
    except (KeyError, TypeError, ValueError) as e:
        raise LocationSearchError(f"Search failed for '{place}': unexpected response") from e

    elevation = fetch_elevation(latitude, longitude)
    logger.info("Resolved %r to %.4f, %.4f (%.0f m)", place, latitude, longitude, elevation)

    return {
        "latitude": latitude,
        "longitude": longitude,
        "name": result.get("display_name", place),
        "elevation": elevation,
    }
