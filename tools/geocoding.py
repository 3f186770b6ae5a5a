#!/usr/bin/env python3
"""
Geocoding tool for the Google Maps MCP server.
Converts addresses into coordinates and Google Place IDs.
"""

from models.maps_models import GeocodeInput, ResponseFormat, ToolDescriptor, ToolResponse
from utils.formatting import JSON_HINT, error_block, geocode_to_json, geocode_to_markdown

DESCRIPTION = """Geocode an address to geographic coordinates using Google Maps Geocoding API.

Converts a human-readable address into latitude/longitude coordinates and a Google Place ID. Returns up to 3 best-matching results for ambiguous addresses. Does NOT perform reverse geocoding (coordinates to address).

Args:
  - address (string): Full or partial address to geocode (e.g., "Eiffel Tower", "1600 Amphitheatre Parkway, Mountain View, CA", "Tokyo Station, Japan")
  - response_format ('json' | 'markdown'): Output format (default: 'markdown')

Returns:
  For JSON format: array of {"place_id": string, "address": string, "latitude": number, "longitude": number}
  For Markdown format: numbered list of addresses with coordinates and place IDs

Examples:
  - "Find coordinates for Eiffel Tower" -> { address: "Eiffel Tower" }
  - "Geocode Tokyo Station" -> { address: "Tokyo Station, Japan" }
  - Don't use when you need detailed place information (use google_maps_get_place_details instead)

Error Handling:
  - Returns no results (not an error) if nothing matches the address
  - "Access denied" if the API key lacks Geocoding API permission - enable it in Google Cloud Console
  - "Rate limit exceeded" if quota is exhausted - wait before retrying
  - "Invalid address format" if the address is malformed - provide a clearer address"""


async def geocode_address_tool(api, params: GeocodeInput) -> ToolResponse:
    """Geocode params.address and render the matches."""
    outcome = await api.geocode_address(params.address)
    if not outcome.ok:
        return ToolResponse(error_block("Geocoding", outcome.error), is_error=True)

    results = outcome.value
    if params.response_format == ResponseFormat.JSON:
        text = geocode_to_json(results)
    else:
        text = geocode_to_markdown(params.address, results)

    return ToolResponse(
        text,
        metadata={"total_results": len(results), "query": params.address},
    )


GEOCODE_TOOL = ToolDescriptor(
    name="google_maps_geocode_address",
    title="Geocode Address",
    description=DESCRIPTION,
    input_model=GeocodeInput,
    handler=geocode_address_tool,
    truncation_hint=JSON_HINT,
)
