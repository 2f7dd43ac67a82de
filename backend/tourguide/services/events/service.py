"""Observer-pattern event bus.

Subscribers are either objects exposing ``update(event)`` or plain
functions taking the event. Publishing iterates a snapshot of the
registry, so observers may subscribe or unsubscribe from inside a
notification. A failing subscriber is logged and skipped; it never stops
delivery to the others and never reaches the publisher.
"""

import logging
import threading
from typing import Any, Callable, Generic, Protocol, TypeVar, runtime_checkable

from tourguide.models import InvalidCallbackError

logger = logging.getLogger(__name__)

E = TypeVar("E")
E_contra = TypeVar("E_contra", contravariant=True)


@runtime_checkable
class Observer(Protocol[E_contra]):
    """Anything with an ``update(event)`` method."""

    def update(self, event: E_contra) -> Any: ...


class EventBus(Generic[E]):
    """Subscribe/unsubscribe/publish dispatcher for one event type."""

    def __init__(self) -> None:
        self._observers: list[Observer[E]] = []
        self._functions: list[Callable[[E], Any]] = []
        self._lock = threading.RLock()

    def subscribe(self, observer: Observer[E]) -> None:
        """Register an observer object. Subscribing twice is a no-op.

        Raises:
            InvalidCallbackError: If ``observer`` has no callable ``update``.
        """
        if not callable(getattr(observer, "update", None)):
            raise InvalidCallbackError(
                f"Observer {type(observer).__name__} has no callable update()"
            )
        with self._lock:
            if not any(o is observer for o in self._observers):
                self._observers = [*self._observers, observer]

    def unsubscribe(self, observer: Observer[E]) -> bool:
        with self._lock:
            remaining = [o for o in self._observers if o is not observer]
            removed = len(remaining) != len(self._observers)
            self._observers = remaining
            return removed

    def subscribe_function(self, fn: Callable[[E], Any]) -> None:
        if not callable(fn):
            raise InvalidCallbackError(
                f"Function observer must be callable, got {type(fn).__name__}"
            )
        with self._lock:
            if fn not in self._functions:
                self._functions = [*self._functions, fn]

    def unsubscribe_function(self, fn: Callable[[E], Any]) -> bool:
        with self._lock:
            remaining = [f for f in self._functions if f != fn]
            removed = len(remaining) != len(self._functions)
            self._functions = remaining
            return removed

    def publish(self, event: E) -> int:
        """Deliver ``event`` to every subscriber.

        Returns:
            Number of subscribers that handled the event without raising.
        """
        with self._lock:
            observers = list(self._observers)
            functions = list(self._functions)

        event_type = getattr(event, "type", type(event).__name__)
        delivered = 0
        for observer in observers:
            try:
                observer.update(event)
                delivered += 1
            except Exception:
                logger.exception(
                    f"[EVENTS] Observer {type(observer).__name__} failed on {event_type}"
                )
        for fn in functions:
            try:
                fn(event)
                delivered += 1
            except Exception:
                logger.exception(
                    f"[EVENTS] Function observer {getattr(fn, '__name__', fn)} "
                    f"failed on {event_type}"
                )
        return delivered

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    @property
    def function_count(self) -> int:
        return len(self._functions)

    def clear(self) -> None:
        with self._lock:
            self._observers = []
            self._functions = []
