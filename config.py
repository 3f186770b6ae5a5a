#!/usr/bin/env python3
"""
Configuration module for the Google Maps MCP server.
Centralizes the API key, upstream endpoints, limits, and server settings.
"""

import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration class for Google Maps MCP server settings."""

    # API Keys
    GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")

    # Upstream endpoints
    GOOGLE_MAPS_BASE_URL = os.getenv(
        "GOOGLE_MAPS_BASE_URL", "https://maps.googleapis.com/maps/api"
    )
    GOOGLE_PLACES_BASE_URL = os.getenv(
        "GOOGLE_PLACES_BASE_URL", "https://places.googleapis.com/v1"
    )

    # HTTP Settings
    HTTP_TIMEOUT = 10.0
    USER_AGENT = "GoogleMapsMCP/1.0"

    # Tool Settings
    CHARACTER_LIMIT = 25000
    MAX_GEOCODE_RESULTS = 3
    MAX_LOCATIONS = 10
    MAX_ADDRESS_LENGTH = 500
    BILLING_NOTE = "10,000 elements/month free tier"

    # Server Settings
    SERVER_NAME = "google-maps-mcp"
    SERVER_VERSION = "1.0.0"
    SERVER_HOST = os.getenv("SERVER_HOST", "localhost")
    SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))
    MCP_SERVER_URL = os.getenv("MCP_SERVER_URL", f"http://{SERVER_HOST}:{SERVER_PORT}")

    # File Paths
    LOG_DIR = os.getenv("LOG_DIR", "logs")

    @classmethod
    def has_api_key(cls):
        """Check if the Google Maps API key is configured."""
        return bool(cls.GOOGLE_MAPS_API_KEY)

    @classmethod
    def require_api_key(cls):
        """Return the Google Maps API key, failing loudly when it is missing."""
        if not cls.has_api_key():
            raise RuntimeError(
                "GOOGLE_MAPS_API_KEY environment variable is not set. "
                "Set it in your .env file or environment variables."
            )
        return cls.GOOGLE_MAPS_API_KEY
