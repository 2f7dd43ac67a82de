"""Tourist Guide Services.

Service layer components:
- Address cache: LRU+TTL address memoization with one-shot change detection
- Events: observer bus for ``addressUpdated`` broadcasts
- Standardizer: Nominatim record to StandardizedAddress mapping
- Geocoding: OpenStreetMap Nominatim reverse geocoding
"""

from .address_cache import (
    AddressCacheService,
    CallbackRegistry,
    ChangeTracker,
    create_address_cache_service,
    generate_cache_key,
)
from .events import EventBus, Observer
from .geocoding import NominatimReverseGeocoder, ReverseGeocoder
from .standardizer import standardize_address

__all__ = [
    # Address cache
    "AddressCacheService",
    "CallbackRegistry",
    "ChangeTracker",
    "create_address_cache_service",
    "generate_cache_key",
    # Events
    "EventBus",
    "Observer",
    # Geocoding
    "NominatimReverseGeocoder",
    "ReverseGeocoder",
    # Standardizer
    "standardize_address",
]
