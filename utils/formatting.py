#!/usr/bin/env python3
"""
Rendering utilities for the Google Maps tools.
Turns result models into markdown or JSON text and enforces the output size cap.
"""

import json

from config import Config

JSON_HINT = 'Try using response_format="json" for more compact output.'
DISTANCE_HINT = (
    'Try reducing the number of origins/destinations or use response_format="json".'
)


def to_json(data):
    return json.dumps(data, indent=2, ensure_ascii=False)


def error_block(title, message):
    """Error text with a title banner, used for upstream failures."""
    return f"{title} Error\n{'=' * 50}\n{message}"


def truncate_if_needed(text, limit=Config.CHARACTER_LIMIT, hint=""):
    """Cap text at limit characters; returns (text, was_truncated)."""
    if len(text) <= limit:
        return text, False
    notice = (
        f"[Response truncated: exceeded {limit} character limit. "
        f"Original length: {len(text)} characters."
    )
    if hint:
        notice += f" {hint}"
    return f"{text[:limit]}\n\n{notice}]", True


# ---------- Geocoding ----------


def geocode_to_json(results):
    return to_json([result.model_dump() for result in results])


def geocode_to_markdown(address, results):
    if not results:
        return f"No Results Found\n{'=' * 50}\nNo geocoding results found for: {address}"

    lines = ["# Geocoding Results", "", f"Query: {address}", f"Results: {len(results)}", ""]
    for index, item in enumerate(results, start=1):
        lines.append(f"## Result {index}")
        lines.append(f"- **Address**: {item.address}")
        lines.append(f"- **Coordinates**: {item.latitude}, {item.longitude}")
        lines.append(f"- **Place ID**: {item.place_id}")
        lines.append("")
    return "\n".join(lines)


# ---------- Place details ----------


def place_to_json(place):
    return to_json(place.to_dict())


def place_to_markdown(place):
    lines = [
        "# Place Details",
        "",
        f"**Name**: {place.display_name or 'N/A'}",
        f"**Address**: {place.formatted_address}",
        f"**Location**: {place.location.latitude}, {place.location.longitude}",
        f"**Place ID**: {place.id}",
    ]
    if place.types:
        lines.append(f"**Types**: {', '.join(place.types)}")
    links = place.google_maps_links
    if links.maps_uri:
        lines.append(f"**Google Maps**: {links.maps_uri}")
    if links.directions_uri:
        lines.append(f"**Directions**: {links.directions_uri}")
    return "\n".join(lines)


# ---------- Distance matrix ----------


def distance_matrix_summary(result, mode):
    """Summary block shared by the JSON body and the tool metadata."""
    return {
        "total_elements": result.total_elements,
        "origins_count": len(result.origin_addresses),
        "destinations_count": len(result.destination_addresses),
        "mode": mode,
    }


def distance_matrix_to_json(result, mode):
    body = result.to_dict()
    body["metadata"] = {
        **distance_matrix_summary(result, mode),
        "billing_note": Config.BILLING_NOTE,
    }
    return to_json(body)


def distance_matrix_to_markdown(result, mode):
    lines = [
        "# Distance Matrix Results",
        "",
        f"**Travel Mode**: {mode}",
        f"**Total Elements**: {result.total_elements} (origins × destinations)",
        "",
    ]
    for origin, row in zip(result.origin_addresses, result.rows):
        lines.append(f"## Origin: {origin}")
        lines.append("")
        for destination, element in zip(result.destination_addresses, row.elements):
            lines.append(f"### → {destination}")
            if element.ok:
                if element.distance:
                    lines.append(
                        f"- **Distance**: {element.distance.text} ({element.distance.value} meters)"
                    )
                if element.duration:
                    lines.append(
                        f"- **Duration**: {element.duration.text} ({element.duration.value} seconds)"
                    )
                if element.duration_in_traffic:
                    lines.append(
                        f"- **Duration in traffic**: {element.duration_in_traffic.text} "
                        f"({element.duration_in_traffic.value} seconds)"
                    )
            else:
                lines.append(f"- **Status**: {element.status}")
            lines.append("")

    lines.append("---")
    lines.append(f"**Billing Note**: {Config.BILLING_NOTE} (Essentials plan)")
    return "\n".join(lines)
