#!/usr/bin/env python3
"""
Google Maps Platform client for the MCP server.
Wraps the Geocoding, Places (New), and Distance Matrix REST APIs and
normalizes every success and failure into an Outcome.
"""

import logging
from urllib.parse import quote

import httpx

from config import Config
from models.maps_models import (
    DistanceMatrixResult,
    GeocodeResult,
    Outcome,
    PlaceDetails,
)
from utils.http_client import create_http_client

logger = logging.getLogger("maps.api")

PLACE_FIELDS = ["id", "displayName", "formattedAddress", "location", "types", "googleMapsLinks"]
PLACE_FIELD_MASK = ",".join(PLACE_FIELDS)
SEARCH_FIELD_MASK = ",".join(f"places.{field}" for field in PLACE_FIELDS)

RATE_LIMITED = "Rate limit exceeded. Please wait a moment before making more requests."
TIMED_OUT = "Request timed out. Please try again."

# Status code -> caller-actionable message, per operation. "timeout" covers
# httpx timeouts; anything missing falls back to the generic API error.
GEOCODE_ERRORS = {
    403: "Access denied. Please check your Google Maps API key has Geocoding API enabled in Google Cloud Console.",
    429: RATE_LIMITED,
    400: "Invalid address format. Please provide a valid address.",
    "timeout": TIMED_OUT,
}
PLACE_DETAILS_ERRORS = {
    404: "Place not found. Please verify the place_id is correct or try using a search query instead.",
    403: "Access denied. Please check your Google Maps API key has Places API (New) enabled in Google Cloud Console.",
    429: RATE_LIMITED,
    400: "Invalid request. Please check that the place_id format is correct.",
    "timeout": TIMED_OUT,
}
PLACE_SEARCH_ERRORS = {
    404: "Search endpoint not found. Please verify your API configuration.",
    403: "Access denied. Please check your Google Maps API key has Places API (New) enabled in Google Cloud Console.",
    429: RATE_LIMITED,
    400: "Invalid search query. Please provide a valid search term.",
    "timeout": "Request timed out. Please try again with a simpler query.",
}
DISTANCE_MATRIX_ERRORS = {
    403: "Access denied. Please check your Google Maps API key has Distance Matrix API enabled in Google Cloud Console.",
    429: RATE_LIMITED,
    400: "Invalid request. Please check that origins and destinations are valid addresses or coordinates.",
    "timeout": "Request timed out. Please try again with fewer locations.",
}


def api_error_message(status_code):
    """Generic message for upstream failures outside the known taxonomy."""
    return (
        f"API error ({status_code or 'unknown'}). "
        "Please try again or contact support if the issue persists."
    )


class GoogleMapsAPI:
    """Client for the Google Maps REST APIs used by the tools.

    Holds the API key and base URLs for its whole lifetime. Every public
    method returns an ``Outcome`` instead of raising for upstream failures.
    """

    def __init__(
        self,
        api_key,
        base_url=Config.GOOGLE_MAPS_BASE_URL,
        places_base_url=Config.GOOGLE_PLACES_BASE_URL,
        http_client: httpx.AsyncClient = None,
    ):
        if not api_key:
            raise ValueError("Google Maps API key not configured")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._places_base_url = places_base_url.rstrip("/")
        self._client = http_client or create_http_client()

    async def aclose(self):
        await self._client.aclose()

    def _places_headers(self, field_mask):
        return {"X-Goog-Api-Key": self._api_key, "X-Goog-FieldMask": field_mask}

    async def _request_json(self, label, errors, method, url, **kwargs):
        """Perform one HTTP call and return its JSON body as an Outcome."""
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("%s request timed out: %s", label, e)
            return Outcome.failure(errors["timeout"])
        except httpx.HTTPError as e:
            logger.warning("%s request failed: %s", label, e)
            return Outcome.failure(
                f"Network error: {e}. Please check your connection and try again."
            )
        except Exception as e:
            logger.exception("%s request raised unexpectedly", label)
            return Outcome.failure(str(e) or "Unknown error occurred")

        status = response.status_code
        if status == 200:
            try:
                body = response.json()
            except ValueError:
                body = None
            if not isinstance(body, dict):
                logger.warning("%s returned a body that is not a JSON object", label)
                return Outcome.failure(
                    f"{label} returned an unreadable response. Please try again."
                )
            return Outcome.success(body)

        logger.warning("%s returned HTTP %s", label, status)
        if response.is_success:
            return Outcome.failure(
                f"{label} request failed with status {status}. Please try again."
            )
        return Outcome.failure(errors.get(status) or api_error_message(status))

    async def geocode_address(self, address):
        """Geocode an address; returns at most MAX_GEOCODE_RESULTS matches."""
        outcome = await self._request_json(
            "Geocoding",
            GEOCODE_ERRORS,
            "GET",
            f"{self._base_url}/geocode/json",
            params={"address": address, "key": self._api_key},
        )
        if not outcome.ok:
            return outcome

        data = outcome.value
        status = data.get("status")
        if status == "ZERO_RESULTS":
            return Outcome.success([])
        if status != "OK" or data.get("results") is None:
            logger.warning("Geocoding status %s for %r", status, address)
            return Outcome.failure(f"Geocoding failed with status: {status}")

        try:
            results = [
                GeocodeResult.from_api(item)
                for item in (data.get("results") or [])[: Config.MAX_GEOCODE_RESULTS]
            ]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Unexpected geocoding payload: %s", e)
            return Outcome.failure("Geocoding returned an unexpected response format.")
        return Outcome.success(results)

    async def get_place_details_by_id(self, place_id):
        """Fetch one place by its Google Place ID."""
        outcome = await self._request_json(
            "Place details",
            PLACE_DETAILS_ERRORS,
            "GET",
            f"{self._places_base_url}/places/{quote(place_id, safe='')}",
            headers=self._places_headers(PLACE_FIELD_MASK),
        )
        if not outcome.ok:
            return outcome
        return self._to_place(outcome.value)

    async def search_place_by_text(self, query):
        """Run a text search and return details of the top match."""
        outcome = await self._request_json(
            "Place search",
            PLACE_SEARCH_ERRORS,
            "POST",
            f"{self._places_base_url}/places:searchText",
            headers=self._places_headers(SEARCH_FIELD_MASK),
            json={"textQuery": query, "maxResultCount": 1},
        )
        if not outcome.ok:
            return outcome

        places = outcome.value.get("places") or []
        if not places:
            return Outcome.failure("No places found for the given query")
        return self._to_place(places[0])

    def _to_place(self, data):
        try:
            return Outcome.success(PlaceDetails.from_api(data))
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("Unexpected place payload: %s", e)
            return Outcome.failure("Places API returned an unexpected response format.")

    async def calculate_distance_matrix(self, origins, destinations, mode="driving"):
        """Compute distance and duration for every origin/destination pair."""
        mode = getattr(mode, "value", mode)
        outcome = await self._request_json(
            "Distance Matrix",
            DISTANCE_MATRIX_ERRORS,
            "GET",
            f"{self._base_url}/distancematrix/json",
            params={
                "origins": "|".join(origins),
                "destinations": "|".join(destinations),
                "mode": mode,
                "key": self._api_key,
            },
        )
        if not outcome.ok:
            return outcome

        data = outcome.value
        status = data.get("status")
        if status != "OK":
            logger.warning("Distance Matrix status %s", status)
            return Outcome.failure(f"Distance Matrix API failed with status: {status}")

        try:
            result = DistanceMatrixResult(
                origin_addresses=data.get("origin_addresses") or [],
                destination_addresses=data.get("destination_addresses") or [],
                rows=data.get("rows") or [],
            )
        except ValueError as e:
            logger.warning("Unexpected distance matrix payload: %s", e)
            return Outcome.failure(
                "Distance Matrix API returned an unexpected response format."
            )
        return Outcome.success(result)
