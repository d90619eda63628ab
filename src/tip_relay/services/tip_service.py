"""Tip cache service.

Keeps the latest tip record under a single sentinel key with a fixed TTL.
"""

from tip_relay.codec import decode_record, encode_record
from tip_relay.config import settings
from tip_relay.entities import TipRecord
from tip_relay.protocols import CacheStore


class TipCacheService:
    """Publishes and reads the current tip record.

    Example:
        ```python
        service = TipCacheService.create(store=MemoryCacheStore.create())
        service.publish(record)
        latest = service.current()
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        ttl: float | None = None,
        key: str | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Cache storage backend (required).
            ttl: Time-to-live of the cached record in seconds. Defaults to settings.
            key: Sentinel key of the record. Defaults to settings.
        """
        self._store = store
        self._ttl = ttl or settings.cache_ttl
        self._key = key or settings.cache_key

    @classmethod
    def create(
        cls,
        store: CacheStore,
        ttl: float | None = None,
        key: str | None = None,
    ) -> "TipCacheService":
        """Factory method to create TipCacheService with defaults.

        Args:
            store: Cache storage backend (required).
            ttl: Time-to-live in seconds. If None, uses settings.
            key: Sentinel key. If None, uses settings.

        Returns:
            Configured TipCacheService instance
        """
        return cls(store=store, ttl=ttl, key=key)

    def publish(self, record: TipRecord) -> None:
        """Replace the cached record and restart its TTL."""
        self._store.set(self._key, encode_record(record), self._ttl)

    def current(self) -> TipRecord:
        """Return the cached record.

        Raises:
            EntryNotFoundError: If nothing live is cached
            CorruptEntryError: If the cached bytes cannot be decoded
        """
        return decode_record(self._store.get(self._key))

    @property
    def ttl(self) -> float:
        return self._ttl
