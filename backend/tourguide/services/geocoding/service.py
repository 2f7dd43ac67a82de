"""Reverse geocoding via OpenStreetMap Nominatim.

Turns a (lat, lng) position into the raw Nominatim record consumed by
AddressCacheService.get_or_compute. The record is returned untouched;
standardization happens downstream.

Nominatim usage policy: identify with a User-Agent, max 1 request/second.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import ValidationError

from tourguide.models import Coordinates, GeocodingError

logger = logging.getLogger(__name__)


class ReverseGeocoder(ABC):
    """Abstract base class for reverse geocoders."""

    @abstractmethod
    async def reverse(self, lat: float, lng: float) -> dict[str, Any]:
        """Look up the address at a position.

        Args:
            lat: Latitude in degrees.
            lng: Longitude in degrees.

        Returns:
            The raw geocoder record, including a nested ``address`` object.

        Raises:
            GeocodingError: If the position is invalid or the lookup fails.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        pass


class NominatimReverseGeocoder(ReverseGeocoder):
    """Nominatim ``/reverse`` client.

    Uses a shared httpx client created on first use. Pass ``client`` to
    reuse an existing one (it is then not closed by ``close()``).
    """

    NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
    HEADERS = {
        "User-Agent": "GuiaTuristico/1.0 (contact@guiaturistico.app)",
        "Accept": "application/json",
    }

    def __init__(
        self,
        timeout: float = 10.0,
        language: str = "pt-BR",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._language = language
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self.HEADERS,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def reverse(self, lat: float, lng: float) -> dict[str, Any]:
        try:
            position = Coordinates(lat=lat, lng=lng)
        except ValidationError as e:
            raise GeocodingError(f"Invalid coordinates ({lat}, {lng})") from e

        params = {
            "lat": position.lat,
            "lon": position.lng,
            "format": "json",
            "addressdetails": 1,
            "accept-language": self._language,
        }
        client = self._get_client()
        try:
            response = await client.get(self.NOMINATIM_REVERSE_URL, params=params)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPError as e:
            logger.error(f"[GEOCODE] Reverse lookup failed at ({lat:.5f}, {lng:.5f}): {e}")
            raise GeocodingError(f"Reverse geocoding failed: {e}") from e
        except ValueError as e:
            raise GeocodingError("Reverse geocoding returned invalid JSON") from e

        if not isinstance(result, dict) or "error" in result:
            message = result.get("error") if isinstance(result, dict) else "unexpected payload"
            logger.info(f"[GEOCODE] No address at ({lat:.5f}, {lng:.5f}): {message}")
            raise GeocodingError(f"No address found: {message}")

        logger.info(
            f"[GEOCODE] ({lat:.5f}, {lng:.5f}) -> {(result.get('display_name') or '')[:80]}"
        )
        return result
