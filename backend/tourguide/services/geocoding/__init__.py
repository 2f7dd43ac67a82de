"""Reverse geocoding service module.

Provides the OpenStreetMap Nominatim client that feeds raw address
records into the address cache.
"""

from .service import NominatimReverseGeocoder, ReverseGeocoder

__all__ = [
    "NominatimReverseGeocoder",
    "ReverseGeocoder",
]
