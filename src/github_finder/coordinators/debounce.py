from __future__ import annotations

import asyncio
from typing import Callable, Generic, Optional, TypeVar

from github_finder.logging import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Deliver only the last submitted value once input pauses for ``delay`` seconds.

    Every :meth:`submit` cancels the pending timer and starts a new one on the
    running event loop. :meth:`cancel` stops the pending dispatch and ignores
    anything submitted afterwards.
    """

    def __init__(self, delay: float, callback: Callable[[T], None]) -> None:
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def submit(self, value: T) -> None:
        if self._cancelled:
            LOGGER.debug("Debouncer cancelled; dropping %r", value)
            return
        self._reset()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, value)

    def cancel(self) -> None:
        self._cancelled = True
        self._reset()

    def _reset(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: T) -> None:
        self._handle = None
        if self._cancelled:
            return
        self._callback(value)


__all__ = ["Debouncer"]
