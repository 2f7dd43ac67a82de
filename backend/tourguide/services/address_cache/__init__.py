"""Address cache and change-detection engine.

Caches standardized addresses, tracks the current/previous pair and
reports street, neighborhood and city transitions exactly once.
"""

from .callbacks import CallbackRegistry
from .history import AddressHistory, AddressSnapshot
from .service import (
    AddressCacheService,
    ChangeCallback,
    create_address_cache_service,
    generate_cache_key,
)
from .tracker import ChangeTracker, FieldTracker, change_signature

__all__ = [
    "AddressCacheService",
    "AddressHistory",
    "AddressSnapshot",
    "CallbackRegistry",
    "ChangeCallback",
    "ChangeTracker",
    "FieldTracker",
    "change_signature",
    "create_address_cache_service",
    "generate_cache_key",
]
