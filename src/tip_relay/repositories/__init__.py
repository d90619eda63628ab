"""Repository layer for data access.

This layer hides the concrete backends (in-memory store, aiohttp WebSocket
client) behind protocol-based interfaces so services can be tested against
fakes.
"""

from tip_relay.protocols import CacheStore, FeedConnection, FeedConnector

from .memory_store import MemoryCacheStore
from .websocket_feed import WebSocketFeedConnection, WebSocketFeedConnector

__all__ = [
    "CacheStore",
    "FeedConnection",
    "FeedConnector",
    "MemoryCacheStore",
    "WebSocketFeedConnection",
    "WebSocketFeedConnector",
]
