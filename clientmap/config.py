"""
Client Map Configuration
Loads settings from environment variables with sensible defaults.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

# Load .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


class Config:
    """Application configuration."""

    # Apps Script web app in front of the client sheet. Must be set in .env;
    # the sheets adapter refuses every call until it is.
    SHEETS_SCRIPT_URL = os.getenv('SHEETS_SCRIPT_URL', '')
    if not SHEETS_SCRIPT_URL:
        _logger.warning("SHEETS_SCRIPT_URL is not set. Copy .env.example to .env and configure it.")
    elif SHEETS_SCRIPT_URL.startswith('http://'):
        _logger.warning("SHEETS_SCRIPT_URL uses plain HTTP; client data would travel unencrypted. Use HTTPS.")

    # Directions link shown in map popups, filled with lat/lng
    DIRECTIONS_URL_TEMPLATE = os.getenv(
        'DIRECTIONS_URL_TEMPLATE',
        'https://www.google.com/maps/dir/?api=1&destination={lat},{lng}',
    )

    # Map view
    MAP_DEFAULT_LAT = float(os.getenv('MAP_DEFAULT_LAT', '-32.522'))
    MAP_DEFAULT_LNG = float(os.getenv('MAP_DEFAULT_LNG', '-55.765'))
    MAP_DEFAULT_ZOOM = int(os.getenv('MAP_DEFAULT_ZOOM', '6'))
    MAP_FOCUS_ZOOM = int(os.getenv('MAP_FOCUS_ZOOM', '16'))
    MAP_OUTPUT = os.getenv('MAP_OUTPUT', 'clients_map.html')

    # Device location: 'ip' asks an IP geolocation service, 'none' disables GPS
    GEOLOCATION_PROVIDER = os.getenv('GEOLOCATION_PROVIDER', 'ip').lower()
    GEOLOCATION_URL = os.getenv('GEOLOCATION_URL', 'http://ip-api.com/json/')


# Singleton instance
config = Config()
