#!/usr/bin/env python3
"""
Place details tool for the Google Maps MCP server.
Looks up a place by Google Place ID or by free-text search.
"""

from models.maps_models import (
    PlaceDetailsInput,
    ResponseFormat,
    ToolDescriptor,
    ToolResponse,
)
from utils.formatting import JSON_HINT, error_block, place_to_json, place_to_markdown

DESCRIPTION = """Get detailed information about a place using Google Places API (New).

Retrieves name, address, coordinates, place types, and Google Maps links for a single place. Look up by place_id (precise) or by query (text search, top match only).

Args:
  - place_id (string, optional): Google Place ID (e.g., "ChIJN1t_tDeuEmsRUsoyG83frY4")
  - query (string, optional): Search text (e.g., "Statue of Liberty", "Starbucks near Central Park")
  - response_format ('json' | 'markdown'): Output format (default: 'markdown')

Note: Provide exactly one of place_id or query.

Returns:
  For JSON format: {"id": string, "displayName": string | null, "formattedAddress": string,
                    "location": {"latitude": number, "longitude": number}, "types": string[],
                    "googleMapsLinks": {"mapsUri": string, "directionsUri": string}}
  For Markdown format: labelled place fields

Examples:
  - "Get details for Statue of Liberty" -> { query: "Statue of Liberty" }
  - "What's at place ChIJN1t...?" -> { place_id: "ChIJN1t_tDeuEmsRUsoyG83frY4" }
  - Don't use when you just need coordinates (use google_maps_geocode_address instead)

Error Handling:
  - "Place not found" if place_id is invalid - verify the ID or use query instead
  - "No places found" if query matches nothing - try a different search term
  - "Access denied" if the API key lacks Places API (New) permission - enable it in Google Cloud Console
  - "Rate limit exceeded" if quota is exhausted - wait before retrying"""


async def get_place_details_tool(api, params: PlaceDetailsInput) -> ToolResponse:
    """Resolve the place by id or text query and render its details."""
    if params.place_id:
        outcome = await api.get_place_details_by_id(params.place_id)
    else:
        outcome = await api.search_place_by_text(params.query)

    if not outcome.ok:
        return ToolResponse(error_block("Place Details", outcome.error), is_error=True)

    place = outcome.value
    if params.response_format == ResponseFormat.JSON:
        text = place_to_json(place)
    else:
        text = place_to_markdown(place)

    return ToolResponse(
        text,
        metadata={
            "place_id": place.id,
            "location": place.location.model_dump(),
            "query": params.query or params.place_id,
        },
    )


PLACE_DETAILS_TOOL = ToolDescriptor(
    name="google_maps_get_place_details",
    title="Get Place Details",
    description=DESCRIPTION,
    input_model=PlaceDetailsInput,
    handler=get_place_details_tool,
    truncation_hint=JSON_HINT,
)
