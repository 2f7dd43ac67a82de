"""Error types for the address engine and the API envelope they map to."""

from enum import Enum

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Error codes returned in API error envelopes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    GEOCODING_ERROR = "GEOCODING_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error payload shared by all failing API responses."""

    code: ErrorCode
    message: str = Field(..., description="Technical error message")
    user_message: str = Field(..., description="Message safe to show to travellers")


class AddressCacheError(Exception):
    """Base class for address engine errors."""

    code: ErrorCode = ErrorCode.API_ERROR


class InvalidConfigurationError(AddressCacheError, ValueError):
    """Raised when cache or service settings are out of range."""

    code = ErrorCode.CONFIGURATION_ERROR


class InvalidCallbackError(AddressCacheError, TypeError):
    """Raised when a callback or observer cannot be invoked."""

    code = ErrorCode.VALIDATION_ERROR


class ServiceDestroyedError(AddressCacheError, RuntimeError):
    """Raised when a destroyed AddressCacheService is used again."""

    code = ErrorCode.SERVICE_UNAVAILABLE


class GeocodingError(AddressCacheError):
    """Raised when the reverse geocoder cannot produce a raw record."""

    code = ErrorCode.GEOCODING_ERROR
