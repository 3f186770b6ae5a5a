"""Unit tests for ToolDispatcher: routing, validation, rendering, truncation."""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import geocode_item, matrix_payload, place_payload
from models.maps_models import (
    DistanceMatrixResult,
    GeocodeResult,
    Outcome,
    PlaceDetails,
    ToolResponse,
)
from tools.tool_registry import ToolDispatcher, to_call_tool_result, to_mcp_tool

GEOCODE = "google_maps_geocode_address"
PLACE = "google_maps_get_place_details"
MATRIX = "google_maps_calculate_distance_matrix"


def _mock_api():
    api = MagicMock()
    api.geocode_address = AsyncMock()
    api.get_place_details_by_id = AsyncMock()
    api.search_place_by_text = AsyncMock()
    api.calculate_distance_matrix = AsyncMock()
    return api


def _all_calls(api):
    return sum(
        method.await_count
        for method in (
            api.geocode_address,
            api.get_place_details_by_id,
            api.search_place_by_text,
            api.calculate_distance_matrix,
        )
    )


def test_list_tools_returns_catalog_with_annotations():
    tools = ToolDispatcher(_mock_api()).list_tools()
    assert [tool.name for tool in tools] == [GEOCODE, PLACE, MATRIX]
    for tool in tools:
        assert tool.annotations == {
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        }
        assert tool.input_schema["type"] == "object"


def test_to_mcp_tool_carries_schema_and_hints():
    tool = ToolDispatcher(_mock_api()).get_tool(MATRIX)
    mcp_tool = to_mcp_tool(tool)
    assert mcp_tool.name == MATRIX
    assert mcp_tool.inputSchema["properties"]["mode"]
    assert mcp_tool.annotations.readOnlyHint is True
    assert mcp_tool.annotations.destructiveHint is False


def test_to_call_tool_result_wraps_single_text_block():
    result = to_call_tool_result(ToolResponse("hello", metadata={"truncated": False}))
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert result.content[0].text == "hello"
    assert result.isError is False
    assert result.meta == {"truncated": False}


@pytest.mark.asyncio
async def test_unknown_tool_makes_no_upstream_call():
    api = _mock_api()
    response = await ToolDispatcher(api).invoke("google_maps_teleport", {})
    assert response.is_error
    assert "Unknown tool: google_maps_teleport" in response.text
    assert _all_calls(api) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "arguments, expected",
    [
        ({}, "Either place_id or query must be provided"),
        ({"place_id": "abc", "query": "cafe"}, "not both"),
    ],
)
async def test_place_identifier_rules_checked_before_network(arguments, expected):
    api = _mock_api()
    response = await ToolDispatcher(api).invoke(PLACE, arguments)
    assert response.is_error
    assert response.text.startswith(f"Error: Invalid arguments for {PLACE}:")
    assert expected in response.text
    assert _all_calls(api) == 0


@pytest.mark.asyncio
async def test_validation_error_names_the_field():
    api = _mock_api()
    response = await ToolDispatcher(api).invoke(
        MATRIX, {"origins": ["A"] * 11, "destinations": ["B"]}
    )
    assert response.is_error
    assert "origins:" in response.text
    assert _all_calls(api) == 0


@pytest.mark.asyncio
async def test_none_arguments_are_validated_as_empty():
    response = await ToolDispatcher(_mock_api()).invoke(GEOCODE, None)
    assert response.is_error
    assert "address:" in response.text


@pytest.mark.asyncio
async def test_geocode_zero_results_is_not_an_error():
    api = _mock_api()
    api.geocode_address.return_value = Outcome.success([])

    response = await ToolDispatcher(api).invoke(
        GEOCODE, {"address": "zzzzzznonexistentplace123", "response_format": "json"}
    )

    assert not response.is_error
    assert json.loads(response.text) == []
    assert response.metadata == {
        "total_results": 0,
        "query": "zzzzzznonexistentplace123",
        "truncated": False,
    }


@pytest.mark.asyncio
async def test_geocode_markdown_success():
    api = _mock_api()
    api.geocode_address.return_value = Outcome.success(
        [GeocodeResult.from_api(geocode_item(i)) for i in range(3)]
    )

    response = await ToolDispatcher(api).invoke(GEOCODE, {"address": "Main Street"})

    api.geocode_address.assert_awaited_once_with("Main Street")
    assert response.text.startswith("# Geocoding Results")
    assert response.metadata["total_results"] == 3


@pytest.mark.asyncio
async def test_upstream_failure_is_error_block():
    api = _mock_api()
    api.geocode_address.return_value = Outcome.failure("Rate limit exceeded.")

    response = await ToolDispatcher(api).invoke(GEOCODE, {"address": "Paris"})

    assert response.is_error
    assert response.text.startswith("Geocoding Error\n" + "=" * 50)
    assert response.text.endswith("Rate limit exceeded.")


@pytest.mark.asyncio
async def test_place_routes_by_id_or_query():
    api = _mock_api()
    place = PlaceDetails.from_api(place_payload())
    api.get_place_details_by_id.return_value = Outcome.success(place)
    api.search_place_by_text.return_value = Outcome.success(place)
    dispatcher = ToolDispatcher(api)

    by_id = await dispatcher.invoke(PLACE, {"place_id": place.id})
    by_query = await dispatcher.invoke(
        PLACE, {"query": "Google Sydney", "response_format": "json"}
    )

    api.get_place_details_by_id.assert_awaited_once_with(place.id)
    api.search_place_by_text.assert_awaited_once_with("Google Sydney")
    assert by_id.text.startswith("# Place Details")
    assert by_id.metadata["query"] == place.id
    assert json.loads(by_query.text)["displayName"] == "Google Sydney"
    assert by_query.metadata == {
        "place_id": place.id,
        "location": {"latitude": -33.866489, "longitude": 151.1958561},
        "query": "Google Sydney",
        "truncated": False,
    }


@pytest.mark.asyncio
async def test_place_failure_uses_place_details_banner():
    api = _mock_api()
    api.get_place_details_by_id.return_value = Outcome.failure("Place not found.")
    response = await ToolDispatcher(api).invoke(PLACE, {"place_id": "nope"})
    assert response.is_error
    assert response.text.startswith("Place Details Error")


@pytest.mark.asyncio
async def test_distance_matrix_two_by_one():
    api = _mock_api()
    api.calculate_distance_matrix.return_value = Outcome.success(
        DistanceMatrixResult.model_validate(matrix_payload(("A", "B"), ("X",)))
    )

    response = await ToolDispatcher(api).invoke(
        MATRIX,
        {"origins": ["A", "B"], "destinations": ["X"], "mode": "bicycling", "response_format": "json"},
    )

    api.calculate_distance_matrix.assert_awaited_once_with(["A", "B"], ["X"], "bicycling")
    body = json.loads(response.text)
    assert len(body["rows"]) == 2
    assert all(len(row["elements"]) == 1 for row in body["rows"])
    assert body["metadata"]["total_elements"] == 2
    assert response.metadata == {
        "total_elements": 2,
        "origins_count": 2,
        "destinations_count": 1,
        "mode": "bicycling",
        "billing_info": "10,000 elements/month free tier",
        "truncated": False,
    }


@pytest.mark.asyncio
async def test_oversized_output_is_truncated():
    api = _mock_api()
    api.calculate_distance_matrix.return_value = Outcome.success(
        DistanceMatrixResult.model_validate(matrix_payload(("A", "B"), ("X", "Y")))
    )

    response = await ToolDispatcher(api, character_limit=100).invoke(
        MATRIX, {"origins": ["A", "B"], "destinations": ["X", "Y"]}
    )

    assert not response.is_error
    assert response.metadata["truncated"] is True
    assert "exceeded 100 character limit" in response.text
    assert "reducing the number of origins/destinations" in response.text


@pytest.mark.asyncio
async def test_unexpected_exception_is_contained():
    api = _mock_api()
    api.geocode_address.side_effect = RuntimeError("socket exploded")

    response = await ToolDispatcher(api).invoke(GEOCODE, {"address": "Paris"})

    assert response.is_error
    assert response.text == "Error: socket exploded"


@pytest.mark.asyncio
async def test_end_to_end_zero_results_markdown(make_api):
    api, handler = make_api(body={"status": "ZERO_RESULTS", "results": []})

    response = await ToolDispatcher(api).invoke(GEOCODE, {"address": "zzzzzznonexistentplace123"})

    assert not response.is_error
    assert response.text.startswith("No Results Found")
    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_end_to_end_unknown_tool_sends_no_request(make_api):
    api, handler = make_api(body={"status": "OK", "results": []})
    response = await ToolDispatcher(api).invoke("geocode", {"address": "Paris"})
    assert response.is_error
    assert handler.requests == []


@pytest.mark.asyncio
async def test_end_to_end_access_denied(make_api):
    api, _ = make_api(status_code=403)
    response = await ToolDispatcher(api).invoke(
        MATRIX, {"origins": ["A"], "destinations": ["B"]}
    )
    assert response.is_error
    assert response.text.startswith("Distance Matrix Error")
    assert "Distance Matrix API enabled" in response.text
