from __future__ import annotations

import threading
from typing import Callable, List

from github_finder.logging import get_logger

LOGGER = get_logger(__name__)

Callback = Callable[[], None]


class MemoryPressureSignal:
    """Zero-argument signal the host fires when the process is short on memory.

    The host decides what counts as memory pressure (an OS notification, a
    watchdog, a test) and calls :meth:`emit`. Subscribers are invoked in
    registration order on the emitting thread.
    """

    def __init__(self) -> None:
        self._subscribers: List[Callback] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callback) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback: Callback) -> None:
        with self._lock:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                LOGGER.debug("Ignoring unsubscribe of unknown callback %r", callback)

    def emit(self) -> int:
        """Notify every subscriber and return how many ran without error."""
        with self._lock:
            subscribers = list(self._subscribers)

        LOGGER.info("Memory pressure signalled; notifying %d subscriber(s)", len(subscribers))
        delivered = 0
        for callback in subscribers:
            try:
                callback()
            except Exception:  # noqa: BLE001
                LOGGER.exception("Memory pressure subscriber %r failed", callback)
                continue
            delivered += 1
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)


__all__ = ["MemoryPressureSignal"]
