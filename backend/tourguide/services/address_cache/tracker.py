"""One-shot transition tracking for street, neighborhood and city.

Each tracked field remembers the last transition it reported, encoded as a
signature ``"<previous>=><current>"``. A transition is reported exactly
once: the consuming check marks it notified, and the same before/after pair
is not reported again until a different transition has been reported.
"""

from dataclasses import dataclass
from typing import Optional

from tourguide.models import FieldState, StandardizedAddress, TrackedField

SIGNATURE_SEPARATOR = "=>"


def change_signature(previous_value: Optional[str], current_value: Optional[str]) -> str:
    """Encode a before/after pair for one field."""
    return f"{previous_value}{SIGNATURE_SEPARATOR}{current_value}"


def field_value(address: Optional[StandardizedAddress], field: TrackedField) -> Optional[str]:
    if address is None:
        return None
    return getattr(address, field.value)


@dataclass
class FieldTracker:
    """Notification state for a single field.

    ``last_notified`` is None until the field reports its first transition.
    """

    field: TrackedField
    last_notified: Optional[str] = None

    def state(
        self,
        previous: Optional[StandardizedAddress],
        current: Optional[StandardizedAddress],
    ) -> FieldState:
        if previous is None or current is None:
            return FieldState.NO_PRIOR_VALUE
        before = field_value(previous, self.field)
        after = field_value(current, self.field)
        if before == after:
            return FieldState.UNCHANGED
        if change_signature(before, after) == self.last_notified:
            return FieldState.CHANGED_NOTIFIED
        return FieldState.CHANGED_UNNOTIFIED

    def consume(
        self,
        previous: Optional[StandardizedAddress],
        current: Optional[StandardizedAddress],
    ) -> bool:
        """Report an unnotified transition and mark it notified."""
        if self.state(previous, current) is not FieldState.CHANGED_UNNOTIFIED:
            return False
        self.last_notified = change_signature(
            field_value(previous, self.field), field_value(current, self.field)
        )
        return True

    def reset(self) -> None:
        self.last_notified = None


class ChangeTracker:
    """Per-field one-shot change detection over a snapshot pair."""

    def __init__(self, fields: tuple[TrackedField, ...] = tuple(TrackedField)) -> None:
        self._trackers: dict[TrackedField, FieldTracker] = {
            field: FieldTracker(field) for field in fields
        }

    def _tracker(self, field: TrackedField) -> FieldTracker:
        try:
            return self._trackers[field]
        except KeyError:
            raise ValueError(f"Field {field!r} is not tracked") from None

    def state(
        self,
        field: TrackedField,
        previous: Optional[StandardizedAddress],
        current: Optional[StandardizedAddress],
    ) -> FieldState:
        return self._tracker(field).state(previous, current)

    def has_changed(
        self,
        field: TrackedField,
        previous: Optional[StandardizedAddress],
        current: Optional[StandardizedAddress],
    ) -> bool:
        """Consuming check: True once per distinct transition, then False."""
        return self._tracker(field).consume(previous, current)

    def is_changed(
        self,
        field: TrackedField,
        previous: Optional[StandardizedAddress],
        current: Optional[StandardizedAddress],
    ) -> bool:
        """Non-consuming comparison of the raw values."""
        if previous is None and current is None:
            return False
        return field_value(previous, field) != field_value(current, field)

    def get_signature(self, field: TrackedField) -> Optional[str]:
        return self._tracker(field).last_notified

    def clear_signature(self, field: TrackedField) -> bool:
        tracker = self._tracker(field)
        had_signature = tracker.last_notified is not None
        tracker.reset()
        return had_signature

    def clear_all(self) -> None:
        for tracker in self._trackers.values():
            tracker.reset()

    @property
    def fields(self) -> tuple[TrackedField, ...]:
        return tuple(self._trackers)

    def notified_fields(self) -> list[TrackedField]:
        """Fields that have reported at least one transition."""
        return [f for f, t in self._trackers.items() if t.last_notified is not None]
