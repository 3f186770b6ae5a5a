#!/usr/bin/env python3
"""
Schema and model layer for the Google Maps tools.
Input models validate tool arguments; result models hold normalized
upstream responses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_core import PydanticCustomError

from config import Config

T = TypeVar("T")

RESPONSE_FORMAT_DESCRIPTION = (
    'Output format: "markdown" for human-readable text or "json" for structured data'
)


class ResponseFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"


class TravelMode(str, Enum):
    DRIVING = "driving"
    WALKING = "walking"
    BICYCLING = "bicycling"
    TRANSIT = "transit"


# ---------- Tool inputs ----------


class GeocodeInput(BaseModel):
    """Arguments for google_maps_geocode_address."""

    model_config = ConfigDict(extra="forbid")

    address: str = Field(
        ...,
        min_length=1,
        max_length=Config.MAX_ADDRESS_LENGTH,
        description=(
            'Full or partial address to geocode. Examples: "Eiffel Tower", '
            '"1600 Amphitheatre Parkway, Mountain View, CA", "Tokyo Station, Japan"'
        ),
    )
    response_format: ResponseFormat = Field(
        ResponseFormat.MARKDOWN, description=RESPONSE_FORMAT_DESCRIPTION
    )


class PlaceDetailsInput(BaseModel):
    """Arguments for google_maps_get_place_details.

    Exactly one of ``place_id`` or ``query`` must be given.
    """

    model_config = ConfigDict(extra="forbid")

    place_id: Optional[str] = Field(
        None,
        min_length=1,
        description=(
            'Google Place ID (e.g., "ChIJN1t_tDeuEmsRUsoyG83frY4"). '
            "Use this for precise place lookup."
        ),
    )
    query: Optional[str] = Field(
        None,
        min_length=1,
        description=(
            'Search query for the place (e.g., "Statue of Liberty", '
            '"Starbucks near Central Park"). Use this when you don\'t have a place_id.'
        ),
    )
    response_format: ResponseFormat = Field(
        ResponseFormat.MARKDOWN, description=RESPONSE_FORMAT_DESCRIPTION
    )

    @model_validator(mode="after")
    def _check_exactly_one_identifier(self):
        if self.place_id is None and self.query is None:
            raise PydanticCustomError(
                "missing_place_identifier", "Either place_id or query must be provided"
            )
        if self.place_id is not None and self.query is not None:
            raise PydanticCustomError(
                "conflicting_place_identifier",
                "Provide either place_id or query, not both",
            )
        return self


class DistanceMatrixInput(BaseModel):
    """Arguments for google_maps_calculate_distance_matrix."""

    model_config = ConfigDict(extra="forbid")

    origins: List[str] = Field(
        ...,
        min_length=1,
        max_length=Config.MAX_LOCATIONS,
        description=(
            "Array of origin addresses or lat/lng coordinates. Examples: "
            '["New York, NY"], ["40.7128,-74.0060"], ["Times Square, NYC", "Central Park, NYC"]'
        ),
    )
    destinations: List[str] = Field(
        ...,
        min_length=1,
        max_length=Config.MAX_LOCATIONS,
        description=(
            "Array of destination addresses or lat/lng coordinates. Examples: "
            '["Boston, MA"], ["42.3601,-71.0589"], ["Harvard University", "MIT"]'
        ),
    )
    mode: TravelMode = Field(
        TravelMode.DRIVING,
        description=(
            'Travel mode for distance calculation. Options: "driving", '
            '"walking", "bicycling", "transit"'
        ),
    )
    response_format: ResponseFormat = Field(
        ResponseFormat.MARKDOWN, description=RESPONSE_FORMAT_DESCRIPTION
    )


def format_validation_error(exc: ValidationError) -> str:
    """Turn a pydantic ValidationError into 'field: message' pairs."""
    messages = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{path}: {err['msg']}" if path else err["msg"])
    return "; ".join(messages)


# ---------- Upstream results ----------


class GeocodeResult(BaseModel):
    place_id: str
    address: str
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)

    @classmethod
    def from_api(cls, item):
        location = item["geometry"]["location"]
        return cls(
            place_id=item["place_id"],
            address=item["formatted_address"],
            latitude=location["lat"],
            longitude=location["lng"],
        )


class Location(BaseModel):
    latitude: float
    longitude: float


class GoogleMapsLinks(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    maps_uri: Optional[str] = Field(None, alias="mapsUri")
    directions_uri: Optional[str] = Field(None, alias="directionsUri")


class PlaceDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: Optional[str] = Field(None, alias="displayName")
    formatted_address: str = Field("", alias="formattedAddress")
    location: Location
    types: List[str] = Field(default_factory=list)
    google_maps_links: GoogleMapsLinks = Field(
        default_factory=GoogleMapsLinks, alias="googleMapsLinks"
    )

    @classmethod
    def from_api(cls, data):
        """Map a Places API (New) place object; absent optional fields stay empty."""
        return cls(
            id=data.get("id"),
            display_name=(data.get("displayName") or {}).get("text") or None,
            formatted_address=data.get("formattedAddress") or "",
            location=data.get("location"),
            types=data.get("types") or [],
            google_maps_links=data.get("googleMapsLinks") or {},
        )

    def to_dict(self):
        data = self.model_dump(by_alias=True)
        data["googleMapsLinks"] = self.google_maps_links.model_dump(
            by_alias=True, exclude_none=True
        )
        return data


class Measurement(BaseModel):
    text: str
    value: int


class DistanceElement(BaseModel):
    status: str
    distance: Optional[Measurement] = None
    duration: Optional[Measurement] = None
    duration_in_traffic: Optional[Measurement] = None

    @property
    def ok(self):
        return self.status == "OK"


class DistanceRow(BaseModel):
    elements: List[DistanceElement] = Field(default_factory=list)


class DistanceMatrixResult(BaseModel):
    origin_addresses: List[str] = Field(default_factory=list)
    destination_addresses: List[str] = Field(default_factory=list)
    rows: List[DistanceRow] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_dense_grid(self):
        if len(self.rows) != len(self.origin_addresses):
            raise ValueError(
                f"expected {len(self.origin_addresses)} rows, got {len(self.rows)}"
            )
        width = len(self.destination_addresses)
        for index, row in enumerate(self.rows):
            if len(row.elements) != width:
                raise ValueError(
                    f"row {index} has {len(row.elements)} elements, expected {width}"
                )
        return self

    @property
    def total_elements(self):
        return len(self.origin_addresses) * len(self.destination_addresses)

    def to_dict(self):
        return self.model_dump(exclude_none=True)


# ---------- Outcomes ----------


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Success value or failure message returned by every upstream call."""

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None

    @classmethod
    def success(cls, value):
        return cls(value=value)

    @classmethod
    def failure(cls, message):
        return cls(error=message)


@dataclass(frozen=True)
class ToolResponse:
    """Rendered tool output handed back to the transport."""

    text: str
    is_error: bool = False
    metadata: Optional[dict] = None


READ_ONLY_ANNOTATIONS = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}


@dataclass(frozen=True)
class ToolDescriptor:
    """Catalog entry for one tool: what it is called, what it accepts, who runs it.

    ``handler`` is an async callable ``(api, params) -> ToolResponse`` that
    receives the validated input model. ``truncation_hint`` is appended to the
    notice when its output is cut at the character limit.
    """

    name: str
    title: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[..., Awaitable[ToolResponse]]
    truncation_hint: str = ""
    annotations: Dict[str, bool] = field(
        default_factory=lambda: dict(READ_ONLY_ANNOTATIONS)
    )

    @property
    def input_schema(self):
        return self.input_model.model_json_schema()
