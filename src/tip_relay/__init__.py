"""Tip Relay - latest landed-tip percentiles, relayed from a WebSocket stream.

The relay subscribes to the upstream tip stream, keeps only the most recent
record in a single-slot expiring cache, and serves it over HTTP.

Layers:
    - protocols: Interface contracts (CacheStore, FeedConnection, FeedConnector)
    - repositories: In-memory store and aiohttp WebSocket client
    - services: Business logic (TipCacheService, FeedSubscriber)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API and feed contracts)
    - entities: Domain models (internal)
    - lifecycle: Process supervision and shutdown

Usage:
    ```python
    from tip_relay.repositories import MemoryCacheStore
    from tip_relay.services import FeedSubscriber, TipCacheService

    store = MemoryCacheStore.create()
    service = TipCacheService.create(store=store)
    subscriber = FeedSubscriber.create(service=service)
    ```

For the HTTP API:
    ```python
    from tip_relay.api import create_app

    app = create_app(service)
    ```
"""

from tip_relay.config import Settings, get_settings, settings
from tip_relay.entities import TipRecord
from tip_relay.exceptions import (
    CacheMissError,
    CorruptEntryError,
    EntryNotFoundError,
    FeedDecodeError,
    ShutdownWriteError,
    TipRelayError,
    UpstreamConnectError,
    UpstreamReadError,
)
from tip_relay.lifecycle import LifecycleState, RelayLifecycle
from tip_relay.protocols import CacheStore, FeedConnection, FeedConnector
from tip_relay.repositories import MemoryCacheStore, WebSocketFeedConnector
from tip_relay.services import FeedSubscriber, TipCacheService

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "settings",
    # Protocols (interfaces)
    "CacheStore",
    "FeedConnection",
    "FeedConnector",
    # Repositories (data access)
    "MemoryCacheStore",
    "WebSocketFeedConnector",
    # Services (business logic)
    "FeedSubscriber",
    "TipCacheService",
    # Lifecycle
    "LifecycleState",
    "RelayLifecycle",
    # Entities (domain models)
    "TipRecord",
    # Errors
    "TipRelayError",
    "UpstreamConnectError",
    "UpstreamReadError",
    "FeedDecodeError",
    "ShutdownWriteError",
    "CacheMissError",
    "EntryNotFoundError",
    "CorruptEntryError",
]
