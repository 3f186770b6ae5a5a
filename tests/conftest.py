"""Pytest config: PYTHONPATH, env, and shared Google Maps client fixtures."""
import json
import os
import sys
from pathlib import Path

import httpx
import pytest

root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root))
os.environ.setdefault("GOOGLE_MAPS_API_KEY", "test-key")

from utils.http_client import create_http_client  # noqa: E402
from utils.maps_api import GoogleMapsAPI  # noqa: E402


class RecordingHandler:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code=200, body=None, exc=None):
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.exc = exc
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc(f"simulated {self.exc.__name__}", request=request)
        return httpx.Response(self.status_code, content=json.dumps(self.body).encode())

    @property
    def last_request(self):
        return self.requests[-1]


@pytest.fixture
def make_api():
    """Build a GoogleMapsAPI whose HTTP calls go to a RecordingHandler."""

    def _make(status_code=200, body=None, exc=None):
        handler = RecordingHandler(status_code, body, exc)
        http_client = create_http_client(transport=httpx.MockTransport(handler))
        api = GoogleMapsAPI(
            "test-key",
            base_url="https://maps.test/maps/api",
            places_base_url="https://places.test/v1",
            http_client=http_client,
        )
        return api, handler

    return _make


def geocode_item(index, lat=48.8584, lng=2.2945):
    return {
        "place_id": f"place-{index}",
        "formatted_address": f"{index} Example Street",
        "geometry": {"location": {"lat": lat, "lng": lng}},
    }


def place_payload(**overrides):
    payload = {
        "id": "ChIJN1t_tDeuEmsRUsoyG83frY4",
        "displayName": {"text": "Google Sydney", "languageCode": "en"},
        "formattedAddress": "48 Pirrama Rd, Pyrmont NSW 2009, Australia",
        "location": {"latitude": -33.866489, "longitude": 151.1958561},
        "types": ["corporate_office", "point_of_interest", "establishment"],
        "googleMapsLinks": {
            "mapsUri": "https://maps.google.com/?cid=1",
            "directionsUri": "https://www.google.com/maps/dir//1",
        },
    }
    payload.update(overrides)
    return payload


def matrix_payload(origins=("A", "B"), destinations=("X",), status="OK"):
    rows = []
    for i, _ in enumerate(origins):
        elements = []
        for j, _ in enumerate(destinations):
            elements.append(
                {
                    "status": "OK",
                    "distance": {"text": f"{i + j + 1} km", "value": 1000 * (i + j + 1) + 7},
                    "duration": {"text": f"{i + j + 5} mins", "value": 60 * (i + j + 5) + 3},
                }
            )
        rows.append({"elements": elements})
    return {
        "status": status,
        "origin_addresses": list(origins),
        "destination_addresses": list(destinations),
        "rows": rows,
    }
