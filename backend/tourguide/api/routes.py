"""API routes for the tourist guide address engine.

- POST /address/standardize: standardize (and cache) a raw Nominatim record
- GET  /address/reverse: reverse geocode a position, then standardize it
- GET  /address/current: current/previous address with change details
- GET  /address/cache, DELETE /address/cache: cache stats and reset

Change details served here are non-consuming: reading them never marks a
transition as notified.
"""

import logging
import threading
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field

from tourguide.models import (
    AppError,
    CacheStats,
    ChangeDetails,
    GeocodingError,
    StandardizedAddress,
    TrackedField,
)
from tourguide.services.address_cache import (
    AddressCacheService,
    create_address_cache_service,
)
from tourguide.services.geocoding import NominatimReverseGeocoder, ReverseGeocoder

logger = logging.getLogger(__name__)

router = APIRouter()

_state_lock = threading.Lock()


def get_address_cache(request: Request) -> AddressCacheService:
    """Return the application's AddressCacheService, creating it on first use."""
    state = request.app.state
    if getattr(state, "address_cache", None) is None:
        with _state_lock:
            if getattr(state, "address_cache", None) is None:
                state.address_cache = create_address_cache_service()
    return state.address_cache


def get_geocoder(request: Request) -> ReverseGeocoder:
    state = request.app.state
    if getattr(state, "geocoder", None) is None:
        with _state_lock:
            if getattr(state, "geocoder", None) is None:
                state.geocoder = NominatimReverseGeocoder()
    return state.geocoder


class AddressResponse(BaseModel):
    """Response model for address standardization."""
    success: bool
    address: Optional[StandardizedAddress] = None
    full_address: Optional[str] = None
    cache_size: int = 0
    error: Optional[AppError] = None


class CurrentAddressResponse(BaseModel):
    """Response model for the current snapshot pair."""
    current: Optional[StandardizedAddress] = None
    previous: Optional[StandardizedAddress] = None
    changes: dict[TrackedField, ChangeDetails] = Field(default_factory=dict)


class ClearCacheResponse(BaseModel):
    success: bool
    cache_size: int


def _address_response(service: AddressCacheService, raw_data: Any) -> AddressResponse:
    address = service.get_or_compute(raw_data)
    return AddressResponse(
        success=True,
        address=address,
        full_address=address.full_address(),
        cache_size=service.cache_size,
    )


@router.post("/address/standardize", response_model=AddressResponse)
async def standardize(
    raw_data: dict[str, Any],
    service: AddressCacheService = Depends(get_address_cache),
) -> AddressResponse:
    """Standardize a raw Nominatim record through the address cache.

    Repeating an identical record is a cache hit and never re-triggers
    change notifications.
    """
    return _address_response(service, raw_data)


@router.get("/address/reverse", response_model=AddressResponse)
async def reverse(
    lat: float = Query(..., description="Latitude in degrees"),
    lng: float = Query(..., description="Longitude in degrees"),
    service: AddressCacheService = Depends(get_address_cache),
    geocoder: ReverseGeocoder = Depends(get_geocoder),
) -> AddressResponse:
    """Reverse geocode a position and standardize the result."""
    try:
        raw_data = await geocoder.reverse(lat, lng)
    except GeocodingError as e:
        return AddressResponse(
            success=False,
            cache_size=service.cache_size,
            error=AppError(
                code=e.code,
                message=str(e),
                user_message="Could not find an address for your position.",
            ),
        )
    return _address_response(service, raw_data)


@router.get("/address/current", response_model=CurrentAddressResponse)
async def current_address(
    service: AddressCacheService = Depends(get_address_cache),
) -> CurrentAddressResponse:
    return CurrentAddressResponse(
        current=service.current_address,
        previous=service.previous_address,
        changes={field: service.get_change_details(field) for field in TrackedField},
    )


@router.get("/address/cache", response_model=CacheStats)
async def cache_stats(
    service: AddressCacheService = Depends(get_address_cache),
) -> CacheStats:
    return service.stats()


@router.delete("/address/cache", response_model=ClearCacheResponse)
async def clear_cache(
    service: AddressCacheService = Depends(get_address_cache),
) -> ClearCacheResponse:
    service.clear_cache()
    logger.info("[API] Address cache cleared")
    return ClearCacheResponse(success=True, cache_size=service.cache_size)
