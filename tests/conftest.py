"""Shared fixtures: a controllable clock and fake upstream connections."""

import asyncio

import pytest

from tip_relay.repositories import MemoryCacheStore
from tip_relay.services import TipCacheService

RECORD_1 = {
    "time": "T1",
    "landed_tips_25th_percentile": 1.0,
    "landed_tips_50th_percentile": 2.0,
    "landed_tips_75th_percentile": 3.0,
    "landed_tips_95th_percentile": 4.0,
    "landed_tips_99th_percentile": 5.0,
}


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeConnection:
    """FeedConnection fed from a queue.

    Queue items are message bodies, None for an upstream close, or an
    exception instance to raise from receive().
    """

    def __init__(self) -> None:
        self.queue: asyncio.Queue = asyncio.Queue()
        self.close_sent = False
        self.disposed = False
        self.ack_close = True
        self.close_error: Exception | None = None

    async def receive(self):
        item = await self.queue.get()
        if isinstance(item, Exception):
            raise item
        return item

    async def send_close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.close_sent = True
        if self.ack_close:
            self.queue.put_nowait(None)

    async def dispose(self) -> None:
        self.disposed = True


class FakeConnector:
    """FeedConnector that hands out one FakeConnection or fails."""

    def __init__(self, connection: FakeConnection, error: Exception | None = None) -> None:
        self.connection = connection
        self.error = error
        self.urls: list[str] = []

    async def connect(self, url: str) -> FakeConnection:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.connection


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore.create(gc_interval=60, clock=clock)


@pytest.fixture
def service(store: MemoryCacheStore) -> TipCacheService:
    return TipCacheService(store=store, ttl=300, key="current")


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def connector(connection: FakeConnection) -> FakeConnector:
    return FakeConnector(connection)
