"""
Tests for the tip relay API.
"""

import json
import logging

import pytest
from fastapi.testclient import TestClient

from tip_relay.api import create_app
from tip_relay.config import Settings
from tip_relay.entities import TipRecord
from tip_relay.handlers import build_annotations
from tip_relay.services import FeedSubscriber

from .conftest import RECORD_1


@pytest.fixture
def client(service):
    """Create a test client around a fresh, empty cache."""
    return TestClient(create_app(service))


def test_empty_cache_returns_server_error(client):
    """Querying before any record arrived yields the error body."""
    response = client.get("/")
    assert response.status_code == 500
    data = response.json()
    assert set(data) == {"error", "description"}
    assert "Could not get the cached data" in data["description"]


def test_current_record_with_annotations(client, service):
    """A published record is served with the static annotations."""
    record = TipRecord(**RECORD_1)
    service.publish(record)

    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["time"] == "T1"
    assert [
        data["landed_tips_25th_percentile"],
        data["landed_tips_50th_percentile"],
        data["landed_tips_75th_percentile"],
        data["landed_tips_95th_percentile"],
        data["landed_tips_99th_percentile"],
    ] == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert data["annotations"]["language"] == "Python"
    assert data["annotations"]["subscribed_to"].endswith("/api/v1/bundles/tip_stream")


def test_expired_record_returns_server_error(client, service, clock):
    """After the TTL the record is gone and the error body comes back."""
    record = TipRecord(**RECORD_1)
    service.publish(record)
    clock.advance(service.ttl + 1)

    response = client.get("/")
    assert response.status_code == 500
    assert set(response.json()) == {"error", "description"}


def test_corrupt_cache_returns_server_error(client, store):
    """Undecodable cached bytes are reported, not raised."""
    store.set("current", b"not a record", ttl=300)

    response = client.get("/")
    assert response.status_code == 500
    data = response.json()
    assert "Could not parse the cached data" in data["description"]
    assert data["error"]


def test_annotations_follow_settings(service):
    """Annotations are built from the configured upstream."""
    config = Settings(upstream_host="example.test", upstream_scheme="wss")
    client = TestClient(create_app(service, annotations=build_annotations(config)))
    service.publish(TipRecord(**RECORD_1))

    annotations = client.get("/").json()["annotations"]
    assert annotations["subscribed_to"] == "wss://example.test/api/v1/bundles/tip_stream"
    assert annotations["repository"] == config.annotation_repository
    assert annotations["author"] == config.annotation_author


def test_only_get_is_served(client):
    """No other request types are exposed."""
    response = client.post("/")
    assert response.status_code == 405


def test_feed_message_is_served(client, service, connector):
    """A raw upstream message flows through the subscriber to GET /."""
    subscriber = FeedSubscriber(service=service, connector=connector)
    raw = json.dumps([RECORD_1, {**RECORD_1, "time": "T2", "landed_tips_25th_percentile": 9.5}])
    subscriber.handle_message(raw)

    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["time"] == "T1"
    assert [
        data["landed_tips_25th_percentile"],
        data["landed_tips_50th_percentile"],
        data["landed_tips_75th_percentile"],
        data["landed_tips_95th_percentile"],
        data["landed_tips_99th_percentile"],
    ] == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert set(data["annotations"]) == {"repository", "author", "language", "subscribed_to"}
    assert data["annotations"]["language"] == "Python"


class _BrokenService:
    def current(self):
        raise RuntimeError("store unavailable")


def test_unexpected_error_returns_error_body_without_extra_log(caplog):
    """Unexpected errors get the error body and are left to the server to log."""
    client = TestClient(create_app(_BrokenService()), raise_server_exceptions=False)

    with caplog.at_level(logging.DEBUG, logger="tip_relay"):
        response = client.get("/")

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal server error",
        "description": "store unavailable",
    }
    assert not [r for r in caplog.records if r.name.startswith("tip_relay")]
