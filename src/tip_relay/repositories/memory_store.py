"""In-memory implementation of CacheStore.

Holds at most one entry. A background reclaimer thread discards the entry
once it expires; reads check expiry themselves, so the reclaimer only bounds
memory.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tip_relay.config import settings
from tip_relay.exceptions import EntryNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    key: str
    payload: bytes
    expires_at: float


class MemoryCacheStore:
    """Single-slot expiring store guarded by a lock.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Writing any key replaces the slot and resets its expiry. Entries are
    swapped whole under the lock, so readers see either the previous entry
    or the new one.

    Example:
        ```python
        store = MemoryCacheStore.create(gc_interval=60)
        store.start()
        store.set("current", b"{...}", ttl=300)
        payload = store.get("current")
        store.close()
        ```
    """

    def __init__(
        self,
        gc_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the store.

        Args:
            gc_interval: Seconds between reclaimer sweeps. Defaults to settings.
            clock: Monotonic time source in seconds.
        """
        self._gc_interval = gc_interval or settings.cache_gc_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: _Entry | None = None
        self._stop = threading.Event()
        self._reclaimer: threading.Thread | None = None

    @classmethod
    def create(
        cls,
        gc_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "MemoryCacheStore":
        """Factory method to create MemoryCacheStore with defaults.

        Args:
            gc_interval: Reclaimer interval in seconds. If None, uses settings.
            clock: Time source, replaceable in tests.

        Returns:
            Configured MemoryCacheStore
        """
        return cls(gc_interval=gc_interval, clock=clock)

    def set(self, key: str, payload: bytes, ttl: float) -> None:
        """Store a payload, replacing whatever the slot held.

        Args:
            key: The storage key
            payload: Opaque bytes
            ttl: Time-to-live in seconds
        """
        entry = _Entry(key=key, payload=bytes(payload), expires_at=self._clock() + ttl)
        with self._lock:
            self._entry = entry

    def get(self, key: str) -> bytes:
        """Return the live payload stored under a key.

        Raises:
            EntryNotFoundError: If the key is absent or its entry has expired
        """
        with self._lock:
            entry = self._entry
            now = self._clock()
        if entry is None or entry.key != key or now >= entry.expires_at:
            raise EntryNotFoundError(f"cache entry {key!r} not found")
        return entry.payload

    def delete(self, key: str) -> bool:
        """Delete the entry stored under a key.

        Returns:
            True if a live entry was removed, False otherwise
        """
        with self._lock:
            entry = self._entry
            if entry is None or entry.key != key:
                return False
            self._entry = None
            return self._clock() < entry.expires_at

    def purge_expired(self) -> int:
        """Discard the entry if it has expired.

        Returns:
            Number of entries discarded (0 or 1)
        """
        with self._lock:
            if self._entry is not None and self._clock() >= self._entry.expires_at:
                self._entry = None
                return 1
        return 0

    def stats(self) -> dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with slot occupancy and remaining TTL
        """
        with self._lock:
            entry = self._entry
            now = self._clock()
        live = entry is not None and now < entry.expires_at
        return {
            "has_entry": live,
            "key": entry.key if live else None,
            "ttl_remaining": entry.expires_at - now if live else 0.0,
            "gc_interval": self._gc_interval,
        }

    def start(self) -> None:
        """Start the background reclaimer thread."""
        if self._reclaimer is not None:
            return
        self._stop.clear()
        self._reclaimer = threading.Thread(
            target=self._reclaim_loop,
            name="cache-reclaimer",
            daemon=True,
        )
        self._reclaimer.start()

    def close(self) -> None:
        """Stop the reclaimer thread."""
        self._stop.set()
        if self._reclaimer is not None:
            self._reclaimer.join(timeout=1.0)
            self._reclaimer = None

    def _reclaim_loop(self) -> None:
        while not self._stop.wait(self._gc_interval):
            if self.purge_expired():
                logger.debug("Reclaimed expired cache entry")

    @property
    def is_running(self) -> bool:
        """Whether the reclaimer thread is alive."""
        return self._reclaimer is not None and self._reclaimer.is_alive()
