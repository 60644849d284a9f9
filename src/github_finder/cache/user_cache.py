from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from github_finder.cache.pressure import MemoryPressureSignal
from github_finder.logging import get_logger
from github_finder.models import UserProfile

LOGGER = get_logger(__name__)

DEFAULT_TTL_SECONDS = 60.0 * 5


@dataclass(frozen=True)
class _CacheEntry:
    value: UserProfile
    expires_at: float


class ExpiringUserCache:
    """Thread-safe login -> profile store with a fixed time-to-live.

    Expiry is lazy: a stale entry stays in storage until the lookup that finds
    it removes it. There is no capacity bound; under memory pressure the whole
    cache is dropped at once.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[UserProfile]:
        """Return the cached profile, or ``None`` if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                LOGGER.debug("Cache miss for %s", key)
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                LOGGER.debug("Cache entry for %s expired; purged", key)
                return None
            LOGGER.debug("Cache hit for %s", key)
            return entry.value

    def put(self, key: str, value: UserProfile) -> None:
        with self._lock:
            self._entries[key] = _CacheEntry(value=value, expires_at=self._clock() + self.ttl_seconds)

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
        LOGGER.debug("Cleared %d cached profile(s)", dropped)

    def expires_at(self, key: str) -> Optional[float]:
        """Raw expiration timestamp for ``key`` without applying expiry."""
        with self._lock:
            entry = self._entries.get(key)
            return entry.expires_at if entry else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------
    # Memory pressure
    # ------------------------------------------------------------------

    def attach(self, signal: MemoryPressureSignal) -> None:
        signal.subscribe(self.clear)

    def detach(self, signal: MemoryPressureSignal) -> None:
        signal.unsubscribe(self.clear)


__all__ = ["DEFAULT_TTL_SECONDS", "ExpiringUserCache"]
