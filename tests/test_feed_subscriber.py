"""Tests for the feed subscriber read loop."""

import asyncio
import json
import logging

import pytest

from tip_relay.exceptions import (
    EntryNotFoundError,
    FeedDecodeError,
    UpstreamConnectError,
    UpstreamReadError,
)
from tip_relay.services import FeedSubscriber

from .conftest import RECORD_1, FakeConnector

FEED_URL = "ws://feed.test/api/v1/bundles/tip_stream"


def _batch(*labels: str) -> str:
    return json.dumps([{**RECORD_1, "time": label} for label in labels])


@pytest.fixture
def subscriber(service, connector) -> FeedSubscriber:
    return FeedSubscriber(service=service, connector=connector, url=FEED_URL)


async def _wait_finished(subscriber: FeedSubscriber) -> None:
    await asyncio.wait_for(asyncio.shield(subscriber.finished), timeout=1)


@pytest.mark.asyncio
async def test_start_connects_to_feed_url(subscriber, connector):
    await subscriber.start()
    try:
        assert connector.urls == [FEED_URL]
        assert subscriber.is_running
    finally:
        await subscriber.dispose()


@pytest.mark.asyncio
async def test_start_twice_is_rejected(subscriber):
    await subscriber.start()
    try:
        with pytest.raises(RuntimeError):
            await subscriber.start()
    finally:
        await subscriber.dispose()


@pytest.mark.asyncio
async def test_connect_failure_propagates(service, connection):
    connector = FakeConnector(connection, error=UpstreamConnectError("refused", url=FEED_URL))
    subscriber = FeedSubscriber(service=service, connector=connector, url=FEED_URL)
    with pytest.raises(UpstreamConnectError):
        await subscriber.start()
    with pytest.raises(RuntimeError):
        subscriber.finished


def test_handle_message_caches_only_first_record(subscriber, service):
    head = subscriber.handle_message(_batch("R0", "R1", "R2"))
    assert head.time == "R0"
    assert service.current().time == "R0"
    assert subscriber.messages_received == 1


def test_handle_message_logs_cached_record(subscriber, caplog):
    with caplog.at_level(logging.INFO, logger="tip_relay.services.feed_subscriber"):
        subscriber.handle_message(_batch("R0", "R1"))

    cached = [
        r
        for r in caplog.records
        if r.name == "tip_relay.services.feed_subscriber" and r.levelno == logging.INFO
    ]
    assert [r.getMessage() for r in cached] == ["Cached record time=R0"]


def test_handle_message_rejects_non_finite_percentile(subscriber, service):
    raw = json.dumps([{**RECORD_1, "landed_tips_95th_percentile": float("nan")}])
    with pytest.raises(FeedDecodeError):
        subscriber.handle_message(raw)
    with pytest.raises(EntryNotFoundError):
        service.current()


def test_handle_message_rejects_empty_batch(subscriber, service):
    with pytest.raises(FeedDecodeError):
        subscriber.handle_message("[]")
    with pytest.raises(EntryNotFoundError):
        service.current()


@pytest.mark.asyncio
async def test_each_message_replaces_cached_record(subscriber, service, connection):
    await subscriber.start()
    connection.queue.put_nowait(_batch("R0", "R1"))
    connection.queue.put_nowait(_batch("S0", "S1"))
    connection.queue.put_nowait(None)
    await _wait_finished(subscriber)

    assert service.current().time == "S0"
    assert subscriber.messages_received == 2
    assert subscriber.error is None
    await subscriber.dispose()


@pytest.mark.asyncio
async def test_each_message_refreshes_ttl(subscriber, service, connection, clock):
    await subscriber.start()
    connection.queue.put_nowait(_batch("R0"))
    await asyncio.sleep(0.01)
    clock.advance(200)
    connection.queue.put_nowait(_batch("S0"))
    connection.queue.put_nowait(None)
    await _wait_finished(subscriber)

    clock.advance(200)
    assert service.current().time == "S0"
    await subscriber.dispose()


@pytest.mark.asyncio
async def test_decode_failure_ends_loop(subscriber, service, connection):
    await subscriber.start()
    connection.queue.put_nowait(_batch("R0"))
    connection.queue.put_nowait("garbage")
    connection.queue.put_nowait(_batch("never"))
    await _wait_finished(subscriber)

    assert isinstance(subscriber.error, FeedDecodeError)
    assert service.current().time == "R0"
    assert not connection.queue.empty()
    await subscriber.dispose()


@pytest.mark.asyncio
async def test_read_failure_ends_loop(subscriber, connection):
    await subscriber.start()
    connection.queue.put_nowait(UpstreamReadError("connection reset"))
    await _wait_finished(subscriber)

    assert isinstance(subscriber.error, UpstreamReadError)
    assert not subscriber.is_running
    await subscriber.dispose()
    assert connection.disposed


@pytest.mark.asyncio
async def test_send_close_ends_loop_when_acknowledged(subscriber, connection):
    await subscriber.start()
    await subscriber.send_close()
    await _wait_finished(subscriber)

    assert connection.close_sent
    assert subscriber.error is None
    await subscriber.dispose()


@pytest.mark.asyncio
async def test_dispose_cancels_blocked_read(subscriber, connection):
    await subscriber.start()
    await asyncio.sleep(0)
    await subscriber.dispose()

    assert subscriber.finished.cancelled()
    assert connection.disposed
