"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"

METERS_PER_MILE = 1609.344
DEFAULT_RADIUS_MILES = 5
DETAIL_FIELDS = "name,formatted_address,address_components,formatted_phone_number,website,rating,user_ratings_total,types"

# (default, ceiling) for the number of places enriched per request
_RESULT_CAPS = {False: (20, 50), True: (10, 15)}


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""

    def __init__(self, message: str, status: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status


def _raise_for_status(operation: str, payload: Dict[str, Any], allowed: set) -> None:
    status = payload.get("status")
    if status not in allowed:
        logger.error("%s failed: status=%s, error_message=%s", operation, status, payload.get("error_message"))
        raise GooglePlacesError(f"Google Places API error: {status}", status=status)


def text_search(query: str, api_key: str, radius_meters: Optional[int] = None) -> Dict[str, Any]:
    params: Dict[str, Any] = {"query": query, "key": api_key}
    if radius_meters:
        params["radius"] = radius_meters
    response = _SESSION.get(f"{_BASE_URL}/textsearch/json", params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    _raise_for_status("text_search", payload, {"OK", "ZERO_RESULTS"})
    return payload


def place_details(place_id: str, api_key: str) -> Dict[str, Any]:
    params = {"place_id": place_id, "key": api_key, "fields": DETAIL_FIELDS}
    response = _SESSION.get(f"{_BASE_URL}/details/json", params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    _raise_for_status("place_details", payload, {"OK"})
    return payload.get("result", {})


def miles_to_meters(miles: float) -> int:
    return round(miles * METERS_PER_MILE)


def result_cap(requested: Optional[int], serverless: bool = False) -> int:
    """Clamp the requested result count to the deployment's ceiling."""
    default, ceiling = _RESULT_CAPS[bool(serverless)]
    return min(requested or default, ceiling)


def search_businesses(
    industry: str,
    location: str,
    api_key: str,
    radius_miles: Optional[float] = None,
    max_results: Optional[int] = None,
    serverless: bool = False,
) -> List[Dict[str, Any]]:
    """Search for ``industry`` businesses around ``location``.

    ``ZERO_RESULTS`` yields an empty list. Any other non-OK status raises
    :class:`GooglePlacesError`.
    """
    query = f"{industry} in {location}"
    radius_meters = miles_to_meters(radius_miles or DEFAULT_RADIUS_MILES)
    logger.info("Running Places text search for query=%s radius=%dm", query, radius_meters)

    payload = text_search(query=query, api_key=api_key, radius_meters=radius_meters)
    results = payload.get("results") or []
    limit = result_cap(max_results, serverless)
    logger.info("Places returned %d results; keeping at most %d", len(results), limit)
    return results[:limit]
