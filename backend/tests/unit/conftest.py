"""Shared fixtures for unit tests."""

from typing import Any, Callable, Optional

import pytest

from tourguide.config import AddressCacheSettings
from tourguide.services.address_cache import AddressCacheService


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _raw_address(
    road: Optional[str] = "Rua Augusta",
    house_number: Optional[str] = None,
    neighbourhood: Optional[str] = "Consolação",
    city: Optional[str] = "São Paulo",
    postcode: Optional[str] = None,
    **extra: Any,
) -> dict:
    fields = {
        "road": road,
        "house_number": house_number,
        "neighbourhood": neighbourhood,
        "city": city,
        "postcode": postcode,
        "country_code": "br",
        **extra,
    }
    return {"address": {k: v for k, v in fields.items() if v is not None}}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_raw() -> Callable[..., dict]:
    return _raw_address


@pytest.fixture
def service(clock: FakeClock):
    svc = AddressCacheService(
        settings=AddressCacheSettings(max_size=50, expiration_seconds=300),
        clock=clock,
        start_sweep=False,
    )
    yield svc
    svc.destroy()
