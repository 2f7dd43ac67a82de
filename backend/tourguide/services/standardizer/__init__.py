"""Raw geocoder record standardization."""

from .service import (
    AddressStandardizer,
    address_details,
    extract_state_code,
    neighborhood_label,
    standardize_address,
)

__all__ = [
    "AddressStandardizer",
    "address_details",
    "extract_state_code",
    "neighborhood_label",
    "standardize_address",
]
