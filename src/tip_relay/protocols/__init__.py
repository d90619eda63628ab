"""Protocol interfaces for swappable implementations.

Protocols enable:
- Swapping the in-memory store or the WebSocket client for another backend
- Unit testing with fake implementations
- Clear separation of concerns
"""

from .cache_store import CacheStore
from .feed_connection import FeedConnection, FeedConnector

__all__ = [
    "CacheStore",
    "FeedConnection",
    "FeedConnector",
]
