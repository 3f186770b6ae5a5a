#!/usr/bin/env python3
"""
Distance matrix tool for the Google Maps MCP server.
Computes travel distance and time for every origin/destination pair.
"""

from config import Config
from models.maps_models import (
    DistanceMatrixInput,
    ResponseFormat,
    ToolDescriptor,
    ToolResponse,
)
from utils.formatting import (
    DISTANCE_HINT,
    distance_matrix_summary,
    distance_matrix_to_json,
    distance_matrix_to_markdown,
    error_block,
)

DESCRIPTION = """Calculate travel distance and time between multiple origins and destinations using Google Distance Matrix API.

Computes distance and duration for every origin/destination pair (M origins x N destinations = M*N elements). Supports driving, walking, bicycling, and transit. Limited to 10 origins and 10 destinations per request.

Args:
  - origins (string[]): Origin addresses or "lat,lng" coordinates, max 10 (e.g., ["New York, NY"], ["40.7128,-74.0060"])
  - destinations (string[]): Destination addresses or "lat,lng" coordinates, max 10 (e.g., ["Boston, MA"], ["MIT"])
  - mode ('driving' | 'walking' | 'bicycling' | 'transit'): Travel mode (default: 'driving')
  - response_format ('json' | 'markdown'): Output format (default: 'markdown')

Returns:
  For JSON format: {"origin_addresses": string[], "destination_addresses": string[],
                    "rows": [{"elements": [{"status": string, "distance": {"text": string, "value": meters},
                    "duration": {"text": string, "value": seconds}}]}], "metadata": {...}}
  For Markdown format: results grouped by origin, then destination

Examples:
  - "How far from Times Square to Central Park?" -> { origins: ["Times Square, NYC"], destinations: ["Central Park, NYC"] }
  - "Walking distance from A to B and C" -> { origins: ["A"], destinations: ["B", "C"], mode: "walking" }
  - Don't use when you just need coordinates (use google_maps_geocode_address instead)

Error Handling:
  - "Access denied" if the API key lacks Distance Matrix API permission - enable it in Google Cloud Console
  - "Rate limit exceeded" if quota is exhausted - wait before retrying
  - "Invalid request" if origins/destinations are malformed - use valid addresses or coordinates
  - "Request timed out" if there are too many locations - reduce the number of origins/destinations

Note: Billing is based on elements (origins x destinations). Free tier includes 10,000 elements/month."""


async def calculate_distance_matrix_tool(api, params: DistanceMatrixInput) -> ToolResponse:
    """Run the distance matrix request and render the M x N grid."""
    mode = params.mode.value
    outcome = await api.calculate_distance_matrix(params.origins, params.destinations, mode)
    if not outcome.ok:
        return ToolResponse(error_block("Distance Matrix", outcome.error), is_error=True)

    result = outcome.value
    if params.response_format == ResponseFormat.JSON:
        text = distance_matrix_to_json(result, mode)
    else:
        text = distance_matrix_to_markdown(result, mode)

    return ToolResponse(
        text,
        metadata={
            **distance_matrix_summary(result, mode),
            "billing_info": Config.BILLING_NOTE,
        },
    )


DISTANCE_MATRIX_TOOL = ToolDescriptor(
    name="google_maps_calculate_distance_matrix",
    title="Calculate Distance Matrix",
    description=DESCRIPTION,
    input_model=DistanceMatrixInput,
    handler=calculate_distance_matrix_tool,
    truncation_hint=DISTANCE_HINT,
)
