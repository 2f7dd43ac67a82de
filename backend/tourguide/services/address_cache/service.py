"""Address cache service.

Memoizes standardized addresses keyed by raw geocoder fields, keeps the
current/previous address pair, reports street, neighborhood and city
transitions exactly once, and broadcasts every lookup to observers.

Flow of ``get_or_compute``:
1. Derive a cache key from the raw record (absent key bypasses the cache)
2. Cache hit: return the cached address, no snapshot update, no detection
3. Cache miss: standardize, store, shift the snapshot pair, run one-shot
   change detection for every field with a registered callback
4. Invoke field callbacks, then broadcast ``addressUpdated`` (hit or miss)

A daemon sweep removes expired entries every ``sweep_interval_seconds``.
``destroy()`` stops the sweep and drops all state; any later use raises
ServiceDestroyedError.
"""

import logging
import threading
import time
from typing import Any, Callable, Optional

from tourguide.config import AddressCacheSettings
from tourguide.models import (
    AddressUpdatedEvent,
    CacheStats,
    ChangeDetails,
    FieldState,
    FieldValue,
    ServiceDestroyedError,
    StandardizedAddress,
    TrackedField,
)
from tourguide.services.address_cache.callbacks import CallbackRegistry
from tourguide.services.address_cache.history import AddressHistory, AddressSnapshot
from tourguide.services.address_cache.tracker import ChangeTracker, field_value
from tourguide.services.events import EventBus, Observer
from tourguide.services.standardizer import (
    AddressStandardizer,
    address_details,
    neighborhood_label,
    standardize_address,
)
from tourguide.utils.cache import BoundedCache
from tourguide.utils.timer import SweepTimer

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "|"

ChangeCallback = Callable[[ChangeDetails], Any]
EventFunction = Callable[[AddressUpdatedEvent], Any]


def generate_cache_key(raw_data: Any) -> Optional[str]:
    """Build a cache key from the six identifying address fields.

    Order: street, house number, neighbourhood, city, postcode, country code.
    Empty components are dropped before joining.

    Returns:
        The key, or None when the record has no address object or every
        component is empty.

    Example:
        >>> generate_cache_key({"address": {"road": "Rua Augusta", "city": "São Paulo"}})
        'Rua Augusta|São Paulo'
    """
    address = address_details(raw_data)
    if not address:
        return None
    components = [
        address.get("road") or address.get("street") or "",
        address.get("house_number") or "",
        address.get("neighbourhood") or address.get("suburb") or "",
        address.get("city") or address.get("town") or address.get("municipality") or "",
        address.get("postcode") or "",
        address.get("country_code") or "",
    ]
    key = KEY_SEPARATOR.join(str(c) for c in components if str(c).strip())
    return key or None


class AddressCacheService:
    """Cache, snapshot tracking and change notification for address lookups.

    Foreground calls and the background sweep share one re-entrant lock, so
    no caller observes a half-updated snapshot pair or a partially swept
    cache. Field callbacks and observers run after the lock is released,
    each inside its own failure boundary.

    Attributes:
        _cache: Bounded LRU+TTL store of standardized addresses.
        _history: Current/previous snapshot pair.
        _tracker: One-shot per-field transition tracking.
        _callbacks: One change callback slot per tracked field.
        _events: Observer registry for ``addressUpdated`` events.
    """

    def __init__(
        self,
        settings: Optional[AddressCacheSettings] = None,
        standardizer: Optional[AddressStandardizer] = None,
        clock: Callable[[], float] = time.monotonic,
        start_sweep: bool = True,
    ) -> None:
        self._settings = settings or AddressCacheSettings()
        self._standardizer = standardizer or standardize_address
        self._cache: BoundedCache[StandardizedAddress] = BoundedCache(
            max_size=self._settings.max_size,
            expiration_seconds=self._settings.expiration_seconds,
            clock=clock,
        )
        self._history = AddressHistory()
        self._tracker = ChangeTracker()
        self._callbacks: CallbackRegistry[TrackedField] = CallbackRegistry()
        self._events: EventBus[AddressUpdatedEvent] = EventBus()
        self._lock = threading.RLock()
        self._destroyed = False
        self._sweep = SweepTimer(
            self._sweep_expired,
            interval_seconds=self._settings.sweep_interval_seconds,
        )
        if start_sweep:
            self._sweep.start()

    # ─── Lifecycle ───

    def _ensure_active(self) -> None:
        if self._destroyed:
            raise ServiceDestroyedError("AddressCacheService has been destroyed")

    def destroy(self) -> None:
        """Stop the sweep and release every cached value and subscriber.

        Safe to call more than once; only the first call does anything.
        """
        with self._lock:
            if self._destroyed:
                return
            self._destroyed = True

        # Joined outside the lock: an in-flight tick needs it to see _destroyed
        self._sweep.cancel()

        with self._lock:
            self._cache.clear()
            self._history.clear()
            self._tracker.clear_all()
            self._callbacks.clear()
            self._events.clear()
        logger.info("[ADDRESS] Address cache service destroyed")

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def _sweep_expired(self) -> None:
        with self._lock:
            if self._destroyed:
                return
            removed = self._cache.clean_expired()
        if removed:
            logger.info(f"[ADDRESS] Cleaned {removed} expired cache entries")

    def clean_expired_entries(self) -> int:
        """Run the expiration sweep now.

        Returns:
            Number of entries removed.
        """
        self._ensure_active()
        with self._lock:
            return self._cache.clean_expired()

    def clear_cache(self) -> None:
        """Forget cached addresses, snapshots and notified transitions.

        Callbacks and observers stay registered.
        """
        with self._lock:
            self._ensure_active()
            self._cache.clear()
            self._history.clear()
            self._tracker.clear_all()

    # ─── Lookup ───

    def get_or_compute(self, raw_data: Any) -> StandardizedAddress:
        """Return the standardized address for a raw geocoder record.

        Args:
            raw_data: Raw record with a nested ``address`` object.

        Returns:
            The cached address on a hit, otherwise a freshly standardized one.

        Raises:
            ServiceDestroyedError: If the service was destroyed.
        """
        cache_key = generate_cache_key(raw_data)
        notifications: list[tuple[TrackedField, ChangeDetails]] = []

        with self._lock:
            self._ensure_active()
            address = self._cache.get(cache_key) if cache_key is not None else None

            if address is None:
                address = self._standardizer(raw_data)
                if cache_key is not None:
                    self._cache.set(cache_key, address, raw_data)
                else:
                    logger.debug("[ADDRESS] No cache key for raw record, bypassing cache")
                self._history.update(address, raw_data)
                notifications = self._detect_changes()
            else:
                logger.debug(f"[ADDRESS] Cache hit for {cache_key}")

            cache_size = self._cache.size

        for field, details in notifications:
            logger.info(
                f"[ADDRESS] {field.value} changed: "
                f"{details.previous.value!r} -> {details.current.value!r}"
            )
            self._callbacks.execute(field, details)

        self._events.publish(AddressUpdatedEvent(address=address, cache_size=cache_size))
        return address

    def _detect_changes(self) -> list[tuple[TrackedField, ChangeDetails]]:
        # Only fields with a callback consume their transition here; others
        # stay unnotified for explicit has_*_changed() calls.
        notifications = []
        previous = self._history.previous_address
        current = self._history.current_address
        for field in self._tracker.fields:
            if not self._callbacks.has(field):
                continue
            if self._tracker.has_changed(field, previous, current):
                notifications.append((field, self._build_details(field)))
        return notifications

    # ─── Change detection ───

    def has_field_changed(self, field: TrackedField) -> bool:
        """Consuming check: True once per distinct transition of ``field``."""
        with self._lock:
            self._ensure_active()
            return self._tracker.has_changed(
                field,
                self._history.previous_address,
                self._history.current_address,
            )

    def has_street_changed(self) -> bool:
        return self.has_field_changed(TrackedField.STREET)

    def has_neighborhood_changed(self) -> bool:
        return self.has_field_changed(TrackedField.NEIGHBORHOOD)

    def has_city_changed(self) -> bool:
        return self.has_field_changed(TrackedField.CITY)

    def get_field_state(self, field: TrackedField) -> FieldState:
        with self._lock:
            self._ensure_active()
            return self._tracker.state(
                field,
                self._history.previous_address,
                self._history.current_address,
            )

    def get_change_details(self, field: TrackedField) -> ChangeDetails:
        """Non-consuming view of the current transition of ``field``."""
        with self._lock:
            self._ensure_active()
            return self._build_details(field)

    def get_street_change_details(self) -> ChangeDetails:
        return self.get_change_details(TrackedField.STREET)

    def get_neighborhood_change_details(self) -> ChangeDetails:
        return self.get_change_details(TrackedField.NEIGHBORHOOD)

    def get_city_change_details(self) -> ChangeDetails:
        return self.get_change_details(TrackedField.CITY)

    def _build_details(self, field: TrackedField) -> ChangeDetails:
        previous = self._history.previous
        current = self._history.current
        return ChangeDetails(
            field=field,
            has_changed=self._tracker.is_changed(
                field,
                previous.address if previous else None,
                current.address if current else None,
            ),
            current=self._field_value(field, current),
            previous=self._field_value(field, previous),
        )

    @staticmethod
    def _field_value(field: TrackedField, snapshot: Optional[AddressSnapshot]) -> FieldValue:
        if snapshot is None:
            return FieldValue()
        address = snapshot.address
        if field is TrackedField.STREET:
            label = address.street_label()
        elif field is TrackedField.NEIGHBORHOOD:
            label = neighborhood_label(snapshot.raw_data) or address.neighborhood
        else:
            label = address.city_label()
        return FieldValue(value=field_value(address, field), label=label or None)

    # ─── Field callbacks ───

    def set_change_callback(
        self, field: TrackedField, callback: Optional[ChangeCallback]
    ) -> None:
        """Register (or clear with None) the change callback for ``field``.

        Raises:
            InvalidCallbackError: If ``callback`` is neither callable nor None.
        """
        with self._lock:
            self._ensure_active()
            self._callbacks.register(field, callback)

    def get_change_callback(self, field: TrackedField) -> Optional[ChangeCallback]:
        self._ensure_active()
        return self._callbacks.get(field)

    def set_street_change_callback(self, callback: Optional[ChangeCallback]) -> None:
        self.set_change_callback(TrackedField.STREET, callback)

    def set_neighborhood_change_callback(self, callback: Optional[ChangeCallback]) -> None:
        self.set_change_callback(TrackedField.NEIGHBORHOOD, callback)

    def set_city_change_callback(self, callback: Optional[ChangeCallback]) -> None:
        self.set_change_callback(TrackedField.CITY, callback)

    def get_street_change_callback(self) -> Optional[ChangeCallback]:
        return self.get_change_callback(TrackedField.STREET)

    def get_neighborhood_change_callback(self) -> Optional[ChangeCallback]:
        return self.get_change_callback(TrackedField.NEIGHBORHOOD)

    def get_city_change_callback(self) -> Optional[ChangeCallback]:
        return self.get_change_callback(TrackedField.CITY)

    # ─── Observers ───

    def subscribe(self, observer: Observer[AddressUpdatedEvent]) -> None:
        self._ensure_active()
        self._events.subscribe(observer)

    def unsubscribe(self, observer: Observer[AddressUpdatedEvent]) -> bool:
        self._ensure_active()
        return self._events.unsubscribe(observer)

    def subscribe_function(self, fn: EventFunction) -> None:
        self._ensure_active()
        self._events.subscribe_function(fn)

    def unsubscribe_function(self, fn: EventFunction) -> bool:
        self._ensure_active()
        return self._events.unsubscribe_function(fn)

    @property
    def observer_count(self) -> int:
        return self._events.observer_count + self._events.function_count

    # ─── Introspection ───

    @property
    def settings(self) -> AddressCacheSettings:
        return self._settings

    @property
    def cache_size(self) -> int:
        self._ensure_active()
        return self._cache.size

    @property
    def current_address(self) -> Optional[StandardizedAddress]:
        self._ensure_active()
        return self._history.current_address

    @property
    def previous_address(self) -> Optional[StandardizedAddress]:
        self._ensure_active()
        return self._history.previous_address

    @property
    def sweep_running(self) -> bool:
        return self._sweep.is_running

    def stats(self) -> CacheStats:
        self._ensure_active()
        return CacheStats(
            size=self._cache.size,
            max_size=self._cache.max_size,
            expiration_seconds=self._cache.expiration_seconds,
        )

    def __repr__(self) -> str:
        if self._destroyed:
            return f"{type(self).__name__}(destroyed)"
        return (
            f"{type(self).__name__}(cache={self._cache.size}/{self._cache.max_size}, "
            f"current={self._history.current_address!s}, "
            f"previous={self._history.previous_address!s})"
        )


def create_address_cache_service(
    settings: Optional[AddressCacheSettings] = None,
    standardizer: Optional[AddressStandardizer] = None,
    start_sweep: bool = True,
) -> AddressCacheService:
    """Create an independent AddressCacheService.

    Settings default to the environment (see ``AddressCacheSettings.from_env``).
    The caller owns the instance and must call ``destroy()`` when done.
    """
    if settings is None:
        settings = AddressCacheSettings.from_env()
    service = AddressCacheService(
        settings=settings,
        standardizer=standardizer,
        start_sweep=start_sweep,
    )
    logger.info(
        f"[ADDRESS] Cache service created: max_size={settings.max_size}, "
        f"ttl={settings.expiration_seconds}s, sweep={settings.sweep_interval_seconds}s"
    )
    return service
