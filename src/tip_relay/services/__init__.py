"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> TipCacheService -> CacheStore
    FeedSubscriber -> TipCacheService

The feed subscriber only writes and the handler only reads; the store is
the sole hand-off point between them.
"""

from .feed_subscriber import FeedSubscriber
from .tip_service import TipCacheService

__all__ = [
    "FeedSubscriber",
    "TipCacheService",
]
