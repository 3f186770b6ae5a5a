#!/usr/bin/env python3
"""
HTTP client utilities for the Google Maps MCP server.
Builds httpx clients with the configured timeout and headers.
"""

import httpx

from config import Config


def create_http_client(timeout=None, transport=None) -> httpx.AsyncClient:
    """Create an HTTP client with a single per-call timeout and the server User-Agent."""
    timeout = httpx.Timeout(timeout if timeout is not None else Config.HTTP_TIMEOUT)
    headers = {"User-Agent": Config.USER_AGENT}
    return httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport)
