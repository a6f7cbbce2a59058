"""
Device Geolocation
Resolves "where am I" for the form's GPS button. A terminal has no GPS, so the
default locator asks an IP geolocation service over HTTP.
"""

import logging
from typing import Optional, Tuple

import requests

from clientmap.config import config
from clientmap.errors import GeolocationError

logger = logging.getLogger(__name__)


class IPLocator:
    """Current position from an ip-api.com style JSON endpoint."""

    def __init__(self, url: Optional[str] = None, timeout: float = 10.0):
        self.url = url or config.GEOLOCATION_URL
        self.timeout = timeout

    def current_position(self) -> Tuple[float, float]:
        """
        Returns: (latitude, longitude)
        Raises: GeolocationError when the service refuses or the call fails
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Geolocation lookup failed: {e}")
            raise GeolocationError(f"Location service unavailable: {e}") from e

        if not isinstance(result, dict):
            raise GeolocationError(f"Unexpected location response: {result!r}")
        if result.get('status') == 'fail':
            raise GeolocationError(result.get('message') or 'Location denied')

        lat = result.get('lat', result.get('latitude'))
        lng = result.get('lon', result.get('longitude'))
        try:
            position = (float(lat), float(lng))
        except (TypeError, ValueError):
            raise GeolocationError(f"Location service returned no coordinates: {result!r}")

        logger.debug(f"Resolved position {position}")
        return position


def get_locator(provider: Optional[str] = None) -> Optional[IPLocator]:
    """
    Locator for the configured provider, or None when the capability is switched off.
    The form treats None as "device has no geolocation".
    """
    provider = (provider or config.GEOLOCATION_PROVIDER).lower()
    if provider == 'ip':
        return IPLocator()
    if provider != 'none':
        logger.warning(f"Unknown GEOLOCATION_PROVIDER '{provider}', geolocation disabled")
    return None
