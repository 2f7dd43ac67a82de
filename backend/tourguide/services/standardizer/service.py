"""Nominatim record to StandardizedAddress mapping.

Accepts the JSON returned by Nominatim ``/reverse`` or ``/search`` with
``addressdetails=1``. OSM ``addr:*`` tags take priority over Nominatim's
own keys when both are present.
"""

import logging
import re
from typing import Any, Callable, Optional

from tourguide.models import StandardizedAddress

logger = logging.getLogger(__name__)

AddressStandardizer = Callable[[Any], StandardizedAddress]

_ISO_STATE_PATTERN = re.compile(r"^BR-([A-Z]{2})$")
_STATE_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")

# Lookup order per field; first non-empty value wins
STREET_KEYS = ("addr:street", "road", "street", "pedestrian")
HOUSE_NUMBER_KEYS = ("addr:housenumber", "house_number")
NEIGHBORHOOD_KEYS = ("addr:neighbourhood", "neighbourhood", "suburb", "quarter")
# hamlet is a subdivision of a municipality, not a municipality
CITY_KEYS = ("addr:city", "city", "town", "municipality", "village")
STATE_KEYS = ("addr:state", "state")
POSTCODE_KEYS = ("addr:postcode", "postcode")


def _first(address: dict, keys: tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = address.get(key)
        if value:
            return str(value)
    return None


def extract_state_code(iso3166_code: Any) -> Optional[str]:
    """Return ``SP`` for ``BR-SP``, None for anything else."""
    if not iso3166_code or not isinstance(iso3166_code, str):
        return None
    match = _ISO_STATE_PATTERN.match(iso3166_code)
    return match.group(1) if match else None


def address_details(raw_data: Any) -> dict:
    """Return the nested ``address`` object of a raw record, or an empty dict."""
    if not isinstance(raw_data, dict):
        return {}
    address = raw_data.get("address")
    return address if isinstance(address, dict) else {}


def standardize_address(raw_data: Any) -> StandardizedAddress:
    """Map a raw geocoder record to a StandardizedAddress.

    Records without an ``address`` object produce an empty address rather
    than an error.
    """
    address = address_details(raw_data)
    if not address:
        logger.debug("[STANDARDIZE] Raw record has no address object")
        return StandardizedAddress()

    state = _first(address, STATE_KEYS)
    state_code = address.get("state_code") or extract_state_code(
        address.get("ISO3166-2-lvl4")
    )
    if state and _STATE_CODE_PATTERN.match(state):
        state_code = state

    country = address.get("country")
    if country in ("Brasil", "Brazil") or not country:
        country = "Brasil"

    return StandardizedAddress(
        street=_first(address, STREET_KEYS),
        house_number=_first(address, HOUSE_NUMBER_KEYS),
        neighborhood=_first(address, NEIGHBORHOOD_KEYS),
        city=_first(address, CITY_KEYS),
        state=state,
        state_code=state_code or None,
        postal_code=_first(address, POSTCODE_KEYS),
        country=country,
    )


def neighborhood_label(raw_data: Any) -> Optional[str]:
    """Combine neighbourhood and suburb, e.g. ``Jardins, Jardim Paulista``."""
    address = address_details(raw_data)
    if not address:
        return None
    neighbourhood = address.get("neighbourhood") or None
    suburb = address.get("suburb") or None
    if neighbourhood and suburb and neighbourhood != suburb:
        return f"{neighbourhood}, {suburb}"
    return neighbourhood or suburb or address.get("quarter") or None
