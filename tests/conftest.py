"""Shared fixtures for the hashtrack test suite."""
from __future__ import annotations

import json
import threading
from unittest.mock import MagicMock

import httpx
import pytest

from hashtrack.client import HashtrackClient
from hashtrack.config import Config
from hashtrack.credentials import TokenStore


ENDPOINT = "https://hashtrack.test"


def tweet_data(tweet_id="1", author="alice", text="hello #python"):
    return {
        "id": tweet_id,
        "author": author,
        "text": text,
        "publishedAt": "2024-03-01T12:00:00Z",
    }


def tweet_line(tweet_id="1", **kwargs) -> bytes:
    """One NDJSON feed record."""
    return (json.dumps(tweet_data(tweet_id, **kwargs)) + "\n").encode()


class FakeFeedStream(httpx.SyncByteStream):
    """Streaming body that records when the client releases it.

    With ``hold_open`` the stream stays connected after its chunks until
    closed, like a live feed with no new posts.
    """

    def __init__(self, chunks: list[bytes], hold_open: bool = False) -> None:
        self.chunks = chunks
        self.hold_open = hold_open
        self.closed = threading.Event()
        self.yielded = 0

    def __iter__(self):
        for chunk in self.chunks:
            if self.closed.is_set():
                return
            self.yielded += 1
            yield chunk
        if self.hold_open:
            self.closed.wait(5)

    def close(self) -> None:
        self.closed.set()


@pytest.fixture
def fake_config(tmp_path) -> Config:
    return Config(
        endpoint=ENDPOINT,
        config_path=tmp_path / "config.yaml",
        token_path=tmp_path / "token",
        timeout=5.0,
        feed_buffer=10,
        feed_reconnects=2,
        reconnect_delay=0.0,
    )


@pytest.fixture
def store(fake_config) -> TokenStore:
    return TokenStore(fake_config.token_path)


@pytest.fixture
def logged_in_store(store) -> TokenStore:
    store.save("test-token")
    return store


@pytest.fixture
def make_client(fake_config):
    """Build a HashtrackClient whose transport is ``handler``."""
    clients = []

    def _make(store: TokenStore, handler) -> HashtrackClient:
        http = httpx.Client(transport=httpx.MockTransport(handler))
        client = HashtrackClient(fake_config, store, http=http)
        clients.append(client)
        return client

    yield _make
    for c in clients:
        c.close()


@pytest.fixture
def mock_client():
    """MagicMock standing in for HashtrackClient."""
    client = MagicMock()
    client.get = MagicMock()
    client.post = MagicMock()
    client.delete = MagicMock()
    client.close = MagicMock()
    return client
