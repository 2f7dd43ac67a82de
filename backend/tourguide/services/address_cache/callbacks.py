"""Named single-slot callback registry.

Each callback type (one per tracked field) holds at most one callable.
Registering again replaces the previous callback; registering ``None``
clears the slot. Callback failures are logged and never re-raised.
"""

import logging
from typing import Any, Callable, Generic, Hashable, Optional, TypeVar

from tourguide.models import InvalidCallbackError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class CallbackRegistry(Generic[K]):
    """Registry mapping a callback type to one optional callable."""

    def __init__(self) -> None:
        self._callbacks: dict[K, Callable[..., Any]] = {}

    def register(self, callback_type: K, callback: Optional[Callable[..., Any]]) -> None:
        """Store ``callback`` for ``callback_type``.

        Args:
            callback_type: Slot to fill.
            callback: A callable, or None to clear the slot.

        Raises:
            InvalidCallbackError: If ``callback`` is neither callable nor None.
        """
        if callback is None:
            self._callbacks.pop(callback_type, None)
            return
        if not callable(callback):
            raise InvalidCallbackError(
                f"Callback for {callback_type!r} must be callable or None, "
                f"got {type(callback).__name__}"
            )
        self._callbacks[callback_type] = callback

    def get(self, callback_type: K) -> Optional[Callable[..., Any]]:
        return self._callbacks.get(callback_type)

    def has(self, callback_type: K) -> bool:
        return callback_type in self._callbacks

    def execute(self, callback_type: K, *args: Any) -> bool:
        """Invoke the callback for ``callback_type`` inside a failure boundary.

        Returns:
            True if a callback ran to completion, False if none was
            registered or it raised.
        """
        callback = self._callbacks.get(callback_type)
        if callback is None:
            return False
        try:
            callback(*args)
            return True
        except Exception:
            name = getattr(callback_type, "value", callback_type)
            logger.exception(f"[CALLBACKS] Error in {name} change callback")
            return False

    def unregister(self, callback_type: K) -> bool:
        return self._callbacks.pop(callback_type, None) is not None

    def clear(self) -> None:
        self._callbacks.clear()

    def registered_types(self) -> list[K]:
        return list(self._callbacks)

    def __len__(self) -> int:
        return len(self._callbacks)
