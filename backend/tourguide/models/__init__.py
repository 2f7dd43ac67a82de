"""Pydantic models and error types for the address engine."""

from .core import (
    AddressUpdatedEvent,
    CacheStats,
    ChangeDetails,
    Coordinates,
    FieldState,
    FieldValue,
    StandardizedAddress,
    TrackedField,
)
from .errors import (
    AddressCacheError,
    AppError,
    ErrorCode,
    GeocodingError,
    InvalidCallbackError,
    InvalidConfigurationError,
    ServiceDestroyedError,
)

__all__ = [
    "AddressUpdatedEvent",
    "CacheStats",
    "ChangeDetails",
    "Coordinates",
    "FieldState",
    "FieldValue",
    "StandardizedAddress",
    "TrackedField",
    "AddressCacheError",
    "AppError",
    "ErrorCode",
    "GeocodingError",
    "InvalidCallbackError",
    "InvalidConfigurationError",
    "ServiceDestroyedError",
]
