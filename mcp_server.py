#!/usr/bin/env python3
"""
Google Maps MCP Server.

Exposes geocoding, place details, and distance matrix lookups as MCP tools:
- Configuration centralized in config.py
- Upstream client and rendering in utils/ package
- Individual tools in tools/ package
- stdio transport by default, streamable HTTP with --transport http

ENV:
  GOOGLE_MAPS_API_KEY -> Google Maps Platform API key (required)
"""

import argparse
import asyncio
import contextlib
import logging
import sys
from pathlib import Path

import uvicorn
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from rich.console import Console
from rich.panel import Panel
from starlette.applications import Starlette
from starlette.routing import Mount

from config import Config
from tools.tool_registry import ToolDispatcher, register_all_tools
from utils.maps_api import GoogleMapsAPI

# stdout carries the stdio protocol, so everything human-facing goes to stderr.
console = Console(stderr=True)


def setup_logging(daemon_mode=False):
    """Log to logs/mcp_server.log, and to stderr unless running as a daemon."""
    logs_dir = Path(__file__).parent / Config.LOG_DIR
    logs_dir.mkdir(exist_ok=True)
    log_file = logs_dir / "mcp_server.log"
    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(detailed_formatter)
    handlers = [file_handler]
    if not daemon_mode:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(detailed_formatter)
        handlers.append(console_handler)

    logging.basicConfig(level=logging.INFO, handlers=handlers, force=True)
    logging.getLogger("mcp.tools").setLevel(logging.INFO)
    logging.getLogger("maps.api").setLevel(logging.INFO)
    # httpx logs full request URLs at INFO, query-string API key included
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    return log_file


def create_server(api):
    """Build the MCP server with every tool bound to the given client."""
    server = Server(Config.SERVER_NAME, version=Config.SERVER_VERSION)
    dispatcher = ToolDispatcher(api)
    register_all_tools(server, dispatcher)
    return server, dispatcher


def create_http_app(server):
    """Starlette app serving the MCP server over streamable HTTP at /mcp."""
    session_manager = StreamableHTTPSessionManager(app=server, stateless=True)

    async def handle_streamable_http(scope, receive, send):
        await session_manager.handle_request(scope, receive, send)

    @contextlib.asynccontextmanager
    async def lifespan(app):
        async with session_manager.run():
            yield

    return Starlette(
        routes=[Mount("/mcp", app=handle_streamable_http)], lifespan=lifespan
    )


async def run_stdio(server):
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream, write_stream, server.create_initialization_options()
        )


async def run_http(server, host, port):
    config = uvicorn.Config(create_http_app(server), host=host, port=port, log_level="info")
    await uvicorn.Server(config).serve()


async def run_server(transport="stdio", host=None, port=None, daemon_mode=False):
    """Run the Google Maps MCP server until the transport closes."""
    host = host or Config.SERVER_HOST
    port = port or Config.SERVER_PORT
    log_file = setup_logging(daemon_mode)

    api = GoogleMapsAPI(Config.require_api_key())
    server, dispatcher = create_server(api)

    if not daemon_mode:
        where = f"http://{host}:{port}/mcp" if transport == "http" else "stdio"
        console.print(
            Panel(
                f"Transport: {where}\n"
                f"Tools loaded: {len(dispatcher.list_tools())}\n"
                f"Logs: {log_file}\n"
                "API key configured: Yes",
                title="Google Maps MCP Server",
            )
        )
    logging.info("Google Maps MCP Server starting (transport=%s)", transport)
    logging.info("Daemon mode: %s", daemon_mode)

    try:
        if transport == "http":
            await run_http(server, host, port)
        else:
            await run_stdio(server)
    except KeyboardInterrupt:
        logging.info("Server shutting down...")
    except Exception as e:
        logging.error(f"Server error: {e}")
        if not daemon_mode:
            console.print(f"[bold red]Server error: {e}[/bold red]")
        raise
    finally:
        await api.aclose()


def main():
    parser = argparse.ArgumentParser(description="Google Maps MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument("--host", default=None, help="HTTP bind host")
    parser.add_argument("--port", type=int, default=None, help="HTTP port")
    parser.add_argument(
        "--daemon", action="store_true", help="Run in daemon mode (no UI)"
    )
    args = parser.parse_args()

    if not Config.has_api_key():
        console.print("[bold red]ERROR: GOOGLE_MAPS_API_KEY environment variable is not set[/bold red]")
        console.print("Please set it in your .env file or environment variables")
        sys.exit(1)

    try:
        asyncio.run(
            run_server(args.transport, args.host, args.port, daemon_mode=args.daemon)
        )
    except KeyboardInterrupt:
        pass
    except Exception:
        sys.exit(1)


if __name__ == "__main__":
    main()
