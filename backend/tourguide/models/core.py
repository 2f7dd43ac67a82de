"""Core data models for the tourist guide address engine.

This module contains the Pydantic models shared by the address cache,
the change tracker and the HTTP layer: standardized addresses, the
per-field change details handed to callbacks, and the events broadcast
to observers.
"""

import time
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TrackedField(str, Enum):
    """Address components watched for transitions."""

    STREET = "street"
    NEIGHBORHOOD = "neighborhood"
    CITY = "city"


class FieldState(str, Enum):
    """Notification state of a single tracked field.

    - no_prior_value: fewer than two addresses have been computed
    - unchanged: previous and current values are equal
    - changed_unnotified: a new transition nobody has consumed yet
    - changed_notified: the current transition was already reported
    """

    NO_PRIOR_VALUE = "no_prior_value"
    UNCHANGED = "unchanged"
    CHANGED_UNNOTIFIED = "changed_unnotified"
    CHANGED_NOTIFIED = "changed_notified"


class Coordinates(BaseModel):
    """Geographic coordinates with validation.

    Latitude must be between -90 and 90 degrees.
    Longitude must be between -180 and 180 degrees.
    """

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class StandardizedAddress(BaseModel):
    """Address normalized from a raw geocoder record.

    Field names follow the Brazilian postal structure the guide speaks
    aloud (logradouro, bairro, municipio, UF) using English identifiers.
    """

    street: Optional[str] = Field(None, description="Street / road name")
    house_number: Optional[str] = Field(None, description="House number")
    neighborhood: Optional[str] = Field(None, description="Neighborhood (bairro)")
    city: Optional[str] = Field(None, description="Municipality")
    state: Optional[str] = Field(None, description="Full state name")
    state_code: Optional[str] = Field(
        None, description="Two-letter state abbreviation (e.g. SP)"
    )
    postal_code: Optional[str] = Field(None, description="Postal code (CEP)")
    country: str = Field(default="Brasil", description="Country name")

    def street_label(self) -> str:
        """Street with house number, e.g. ``Avenida Paulista, 1578``."""
        if not self.street:
            return ""
        if self.house_number:
            return f"{self.street}, {self.house_number}"
        return self.street

    def city_label(self) -> str:
        """City with state code, e.g. ``São Paulo, SP``."""
        if not self.city:
            return ""
        if self.state_code:
            return f"{self.city}, {self.state_code}"
        return self.city

    def full_address(self) -> str:
        parts = [
            self.street_label(),
            self.neighborhood,
            self.city_label(),
            self.postal_code,
        ]
        return ", ".join(part for part in parts if part)

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.full_address() or 'Empty address'}"


class FieldValue(BaseModel):
    """One side of a field transition."""

    value: Optional[str] = Field(None, description="Raw field value")
    label: Optional[str] = Field(
        None, description="Combined, human-readable label for the field"
    )


class ChangeDetails(BaseModel):
    """Before/after data passed to field change callbacks."""

    field: TrackedField
    has_changed: bool
    current: FieldValue = Field(default_factory=FieldValue)
    previous: FieldValue = Field(default_factory=FieldValue)
    timestamp: float = Field(
        default_factory=time.time, description="Unix time the details were built"
    )


class AddressUpdatedEvent(BaseModel):
    """Broadcast to every observer after each successful lookup."""

    type: Literal["addressUpdated"] = "addressUpdated"
    address: StandardizedAddress
    cache_size: int = Field(..., ge=0)


class CacheStats(BaseModel):
    """Point-in-time view of the bounded cache."""

    size: int = Field(..., ge=0)
    max_size: int = Field(..., gt=0)
    expiration_seconds: float = Field(..., ge=0)
