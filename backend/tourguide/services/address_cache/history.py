"""Current/previous address snapshot pair."""

from dataclasses import dataclass
from typing import Any, Optional

from tourguide.models import StandardizedAddress


@dataclass(frozen=True)
class AddressSnapshot:
    """A computed address together with the raw record it came from."""

    address: StandardizedAddress
    raw_data: Any = None


class AddressHistory:
    """Holds the last two computed addresses.

    ``update`` shifts current into previous and stores the new snapshot in a
    single assignment, so readers never see one side updated without the other.
    """

    def __init__(self) -> None:
        self._pair: tuple[Optional[AddressSnapshot], Optional[AddressSnapshot]] = (None, None)

    def update(self, address: StandardizedAddress, raw_data: Any = None) -> None:
        self._pair = (self._pair[1], AddressSnapshot(address, raw_data))

    @property
    def previous(self) -> Optional[AddressSnapshot]:
        return self._pair[0]

    @property
    def current(self) -> Optional[AddressSnapshot]:
        return self._pair[1]

    @property
    def previous_address(self) -> Optional[StandardizedAddress]:
        return self._pair[0].address if self._pair[0] else None

    @property
    def current_address(self) -> Optional[StandardizedAddress]:
        return self._pair[1].address if self._pair[1] else None

    def has_history(self) -> bool:
        return self._pair[0] is not None and self._pair[1] is not None

    def clear(self) -> None:
        self._pair = (None, None)
