#!/usr/bin/env python3
"""
Tool registry for the Google Maps MCP server.
Holds the tool catalog, validates and routes calls, and binds the catalog
to the MCP server.
"""

import logging

from mcp import types
from mcp.server.lowlevel import Server
from pydantic import ValidationError

from config import Config
from models.maps_models import ToolResponse, format_validation_error
from tools.distance_matrix import DISTANCE_MATRIX_TOOL
from tools.geocoding import GEOCODE_TOOL
from tools.place_details import PLACE_DETAILS_TOOL
from utils.formatting import truncate_if_needed

tool_logger = logging.getLogger("mcp.tools")

ALL_TOOLS = (GEOCODE_TOOL, PLACE_DETAILS_TOOL, DISTANCE_MATRIX_TOOL)


class ToolDispatcher:
    """Routes tool calls to the Google Maps client and renders the results.

    ``invoke`` never raises: unknown tools, invalid arguments, upstream
    failures, and unexpected exceptions all come back as a ToolResponse
    with ``is_error=True``.
    """

    def __init__(self, api, tools=ALL_TOOLS, character_limit=Config.CHARACTER_LIMIT):
        self._api = api
        self._tools = {tool.name: tool for tool in tools}
        self._character_limit = character_limit

    def list_tools(self):
        """Return the tool descriptors in catalog order."""
        return list(self._tools.values())

    def get_tool(self, name):
        return self._tools.get(name)

    async def invoke(self, name, arguments=None) -> ToolResponse:
        """Validate arguments, call the tool, and cap the rendered output."""
        tool = self._tools.get(name)
        if tool is None:
            tool_logger.warning("Unknown tool requested: %s", name)
            return ToolResponse(f"Error: Unknown tool: {name}", is_error=True)

        try:
            params = tool.input_model.model_validate(
                arguments if arguments is not None else {}
            )
        except ValidationError as e:
            message = format_validation_error(e)
            tool_logger.info("Rejected arguments for %s: %s", name, message)
            return ToolResponse(
                f"Error: Invalid arguments for {name}: {message}", is_error=True
            )

        tool_logger.info("Calling %s", name)
        try:
            response = await tool.handler(self._api, params)
            if response.is_error:
                tool_logger.warning("%s failed: %s", name, response.text.splitlines()[-1])
                return response

            text, truncated = truncate_if_needed(
                response.text, self._character_limit, tool.truncation_hint
            )
            if truncated:
                tool_logger.info(
                    "%s output truncated from %d characters", name, len(response.text)
                )
            return ToolResponse(
                text, metadata={**(response.metadata or {}), "truncated": truncated}
            )
        except Exception as e:
            tool_logger.exception("Tool %s raised an unexpected error", name)
            return ToolResponse(f"Error: {str(e) or 'Unknown error'}", is_error=True)


def to_mcp_tool(tool):
    """Convert a ToolDescriptor into the MCP tool listing entry."""
    return types.Tool(
        name=tool.name,
        title=tool.title,
        description=tool.description,
        inputSchema=tool.input_schema,
        annotations=types.ToolAnnotations(title=tool.title, **tool.annotations),
    )


def to_call_tool_result(response):
    """Wrap a ToolResponse as a single-text-block MCP result."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=response.text)],
        isError=response.is_error,
        _meta=response.metadata,
    )


def register_all_tools(server: Server, dispatcher: ToolDispatcher):
    """Register the tool catalog and call handler with the MCP server."""

    @server.list_tools()
    async def list_tools():
        return [to_mcp_tool(tool) for tool in dispatcher.list_tools()]

    # The dispatcher validates arguments itself so callers get field-level messages.
    @server.call_tool(validate_input=False)
    async def call_tool(name, arguments):
        response = await dispatcher.invoke(name, arguments)
        return to_call_tool_result(response)

    return server
