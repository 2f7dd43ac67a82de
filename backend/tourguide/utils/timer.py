"""Recurring background timer with explicit cancellation.

Runs a callable every ``interval_seconds`` on a daemon thread so it never
keeps the interpreter alive. Cancellation is an ``Event``: setting it wakes
the sleeping thread immediately and ``cancel()`` joins the thread, so once
``cancel()`` returns no new tick can start.
"""

import logging
import threading
from typing import Callable, Optional

from tourguide.models import InvalidConfigurationError

logger = logging.getLogger(__name__)


class SweepTimer:
    """Daemon thread invoking ``task`` periodically until cancelled."""

    def __init__(
        self,
        task: Callable[[], None],
        interval_seconds: float,
        name: str = "address-cache-sweep",
    ) -> None:
        if interval_seconds <= 0:
            raise InvalidConfigurationError(
                f"interval_seconds must be > 0, got {interval_seconds!r}"
            )
        self._task = task
        self._interval = float(interval_seconds)
        self._name = name
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None or self._cancelled.is_set():
            return
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.debug(f"[TIMER] Started {self._name} every {self._interval}s")

    def _run(self) -> None:
        # wait() returns True as soon as cancel() sets the event
        while not self._cancelled.wait(self._interval):
            try:
                self._task()
            except Exception:
                logger.exception(f"[TIMER] {self._name} tick failed")

    def cancel(self, timeout: float = 2.0) -> None:
        """Stop the timer and wait for an in-flight tick to finish."""
        self._cancelled.set()
        thread = self._thread
        # Cancelled from inside a tick: the loop exits once the tick returns
        if thread is None or thread is threading.current_thread():
            return
        thread.join(timeout=timeout)
        if thread.is_alive():
            # is_running stays True until the in-flight tick returns
            logger.warning(f"[TIMER] {self._name} did not stop within {timeout}s")
            return
        self._thread = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()
