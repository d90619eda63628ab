"""Cache storage protocol.

Defines the interface for an expiring key/value backend holding opaque
byte payloads. The default implementation keeps a single slot in memory.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for expiring cache backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.
    """

    def set(self, key: str, payload: bytes, ttl: float) -> None:
        """Store a payload, replacing any previous value.

        Args:
            key: The storage key
            payload: Opaque bytes, encoded by the caller
            ttl: Time-to-live in seconds
        """
        ...

    def get(self, key: str) -> bytes:
        """Return the live payload stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored payload

        Raises:
            EntryNotFoundError: If the key was never set, was deleted, or expired
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete the entry stored under a key.

        Args:
            key: The storage key

        Returns:
            True if a live entry was removed, False otherwise
        """
        ...

    def purge_expired(self) -> int:
        """Physically discard expired entries.

        Returns:
            Number of entries discarded
        """
        ...
