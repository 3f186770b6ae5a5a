#!/usr/bin/env python3
"""
Command-line client for a running Google Maps MCP server.
Lists the tools and calls them over streamable HTTP, printing results with rich.
"""

import argparse
import asyncio
import json

from fastmcp.client import Client
from fastmcp.client.transports import StreamableHttpTransport
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from config import Config

console = Console()


async def list_tools(base_url):
    transport = StreamableHttpTransport(url=f"{base_url}/mcp")
    async with Client(transport) as client:
        return await client.list_tools()


async def call_tool(base_url, tool_name, args):
    """Call one tool and return the raw MCP CallToolResult."""
    transport = StreamableHttpTransport(url=f"{base_url}/mcp")
    async with Client(transport) as client:
        return await client.call_tool_mcp(tool_name, args)


def print_tools(tools):
    table = Table(title="Google Maps MCP Tools", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Summary", style="green")
    for tool in tools:
        summary = (tool.description or "").splitlines()[0] if tool.description else ""
        table.add_row(tool.name, summary)
    console.print(table)


def print_result(result, response_format):
    text = "\n".join(
        block.text for block in result.content if getattr(block, "type", None) == "text"
    )
    if result.isError:
        console.print(f"[bold red]{text}[/bold red]")
    elif response_format == "json":
        try:
            console.print_json(text)
        except ValueError:
            # truncated JSON is no longer parseable
            console.print(text, markup=False)
    else:
        console.print(Markdown(text))

    if result.meta:
        console.print(f"[dim]metadata: {json.dumps(result.meta)}[/dim]")


def build_arguments(args):
    """Translate parsed CLI arguments into tool name and tool arguments."""
    response_format = "json" if args.json else "markdown"
    if args.command == "geocode":
        return "google_maps_geocode_address", {
            "address": args.address,
            "response_format": response_format,
        }
    if args.command == "place":
        tool_args = {"response_format": response_format}
        if args.id:
            tool_args["place_id"] = args.id
        if args.query:
            tool_args["query"] = args.query
        return "google_maps_get_place_details", tool_args
    return "google_maps_calculate_distance_matrix", {
        "origins": args.origin,
        "destinations": args.destination,
        "mode": args.mode,
        "response_format": response_format,
    }


def main():
    parser = argparse.ArgumentParser(description="Google Maps MCP client")
    parser.add_argument(
        "--url", default=Config.MCP_SERVER_URL, help="Server base URL (without /mcp)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("tools", help="List available tools")

    geocode = subparsers.add_parser("geocode", help="Geocode an address")
    geocode.add_argument("address")
    geocode.add_argument("--json", action="store_true", help="Request JSON output")

    place = subparsers.add_parser("place", help="Get place details")
    place.add_argument("--id", help="Google Place ID")
    place.add_argument("--query", help="Text search query")
    place.add_argument("--json", action="store_true", help="Request JSON output")

    distance = subparsers.add_parser("distance", help="Calculate a distance matrix")
    distance.add_argument("-o", "--origin", action="append", required=True)
    distance.add_argument("-d", "--destination", action="append", required=True)
    distance.add_argument(
        "--mode", choices=["driving", "walking", "bicycling", "transit"], default="driving"
    )
    distance.add_argument("--json", action="store_true", help="Request JSON output")

    args = parser.parse_args()

    try:
        if args.command == "tools":
            print_tools(asyncio.run(list_tools(args.url)))
            return
        tool_name, tool_args = build_arguments(args)
        result = asyncio.run(call_tool(args.url, tool_name, tool_args))
        print_result(result, tool_args.get("response_format"))
    except Exception as e:
        console.print(f"[bold red]Could not reach MCP server at {args.url}: {e}[/bold red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
