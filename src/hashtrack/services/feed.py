"""Live tweet feed.

A background thread owns the streaming connection, decodes one tweet per
NDJSON line and hands them to the caller through a bounded queue. The
caller reads at its own pace through a FeedHandle.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from collections.abc import Iterator
from types import TracebackType

import httpx

from hashtrack.client import HashtrackClient, decode
from hashtrack.exceptions import (
    ApiError,
    MalformedError,
    NetworkError,
    ServerError,
)
from hashtrack.models.tweets import Tweet

logger = logging.getLogger(__name__)

STREAM_PATH = "/tweets/stream"

# How often a blocked producer re-checks for cancellation
PUT_POLL_SECONDS = 0.1
JOIN_TIMEOUT_SECONDS = 5.0

_END = object()


def decode_record(line: str) -> Tweet:
    """Decode one NDJSON feed line.

    Raises:
        MalformedError: The line is not JSON or not a tweet.
        ServerError: The service sent an in-band error record.
    """
    try:
        data = json.loads(line)
    except ValueError as e:
        raise MalformedError(f"Feed record is not valid JSON: {e}") from e

    if isinstance(data, dict) and "error" in data:
        raise ServerError(f"Feed record reported an error: {data['error']}")
    return decode(data, Tweet)


class FeedProducer:
    """Drives the streaming connection on the producer thread.

    Reconnects after NetworkError/ServerError up to ``max_reconnects``
    times in a row; any other ApiError ends the feed immediately.
    """

    def __init__(
        self,
        client: HashtrackClient,
        filter: str,
        channel: queue.Queue,
        stop: threading.Event,
        max_reconnects: int = 3,
        reconnect_delay: float = 1.0,
    ) -> None:
        self._client = client
        self._filter = filter
        self._channel = channel
        self._stop = stop
        self._max_reconnects = max_reconnects
        self._reconnect_delay = reconnect_delay
        self._lock = threading.Lock()
        self._response: httpx.Response | None = None
        self._delivered = 0
        self.error: ApiError | None = None

    def run(self) -> None:
        """Thread entry point. Always terminates the channel unless cancelled."""
        try:
            self._run()
        except Exception as e:
            if not self._stop.is_set():
                logger.exception("Feed producer crashed")
                self.error = NetworkError(f"Feed connection lost: {e}")
        finally:
            if not self._stop.is_set():
                self._send(_END)
            logger.debug("Feed producer stopped")

    def _run(self) -> None:
        attempt = 0
        while not self._stop.is_set():
            self._delivered = 0
            try:
                self._consume()
            except (NetworkError, ServerError) as e:
                if self._stop.is_set():
                    return
                if self._delivered:
                    attempt = 0
                attempt += 1
                if attempt > self._max_reconnects:
                    self._fail(e)
                    return
                wait = self._backoff(attempt)
                logger.warning(
                    f"Feed interrupted: {e}. Reconnecting in {wait:.1f}s "
                    f"(attempt {attempt}/{self._max_reconnects})..."
                )
                if self._stop.wait(wait):
                    return
                continue
            except ApiError as e:
                self._fail(e)
                return
            # Clean end of stream
            return

    def _consume(self) -> None:
        params = {"filter": self._filter}
        with self._client.stream(STREAM_PATH, params=params) as response:
            with self._lock:
                if self._stop.is_set():
                    return
                self._response = response
            try:
                for line in response.iter_lines():
                    if self._stop.is_set():
                        return
                    if not line.strip():
                        continue
                    try:
                        tweet = decode_record(line)
                    except (MalformedError, ServerError) as e:
                        logger.warning(f"Skipping feed record: {e}")
                        continue
                    if not self._send(tweet):
                        return
                    self._delivered += 1
            finally:
                with self._lock:
                    self._response = None

    def _send(self, item: object) -> bool:
        """Block until the consumer has room; False once cancelled."""
        while not self._stop.is_set():
            try:
                self._channel.put(item, timeout=PUT_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def _fail(self, error: ApiError) -> None:
        logger.error(f"Feed terminated: {error}")
        self.error = error

    def _backoff(self, attempt: int) -> float:
        """Calculate exponential backoff delay."""
        return self._reconnect_delay * (2 ** (attempt - 1))

    def abort(self) -> None:
        """Close the live response, unblocking a pending read."""
        with self._lock:
            response = self._response
            self._response = None
        if response is not None:
            response.close()


class FeedHandle:
    """Consumer side of a live subscription.

    A lazy, non-restartable sequence of tweets: ``next()`` blocks until a
    tweet arrives and returns None once the feed has ended, then keeps
    returning None. ``error`` tells a clean end apart from a failure.
    Only the thread that created the handle may read from it.
    """

    def __init__(
        self,
        producer: FeedProducer,
        channel: queue.Queue,
        stop: threading.Event,
        thread: threading.Thread,
    ) -> None:
        self._producer = producer
        self._channel = channel
        self._stop = stop
        self._thread = thread
        self._done = False

    @property
    def error(self) -> ApiError | None:
        """The error that ended the feed, or None."""
        return self._producer.error

    @property
    def done(self) -> bool:
        return self._done

    def next(self) -> Tweet | None:
        """Return the next tweet, or None when the feed has ended."""
        if self._done:
            return None
        item = self._channel.get()
        if item is _END:
            self._done = True
            return None
        return item  # type: ignore[return-value]

    def close(self, timeout: float = JOIN_TIMEOUT_SECONDS) -> None:
        """Cancel the subscription and release the connection."""
        if self._stop.is_set():
            return
        self._stop.set()
        self._done = True
        self._producer.abort()
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning(f"Feed producer did not stop within {timeout:.1f}s")
        self._drain()

    def _drain(self) -> None:
        while True:
            try:
                self._channel.get_nowait()
            except queue.Empty:
                return

    def __iter__(self) -> Iterator[Tweet]:
        while True:
            tweet = self.next()
            if tweet is None:
                return
            yield tweet

    def __enter__(self) -> FeedHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def subscribe(
    client: HashtrackClient,
    filter: str = "",
    buffer_size: int | None = None,
    max_reconnects: int | None = None,
    reconnect_delay: float | None = None,
) -> FeedHandle:
    """Start a live feed and return immediately.

    Unset tuning arguments fall back to the client's configuration.
    """
    config = client.config
    channel: queue.Queue = queue.Queue(
        maxsize=buffer_size if buffer_size is not None else config.feed_buffer
    )
    stop = threading.Event()
    producer = FeedProducer(
        client,
        filter,
        channel,
        stop,
        max_reconnects=max_reconnects if max_reconnects is not None else config.feed_reconnects,
        reconnect_delay=reconnect_delay if reconnect_delay is not None else config.reconnect_delay,
    )
    thread = threading.Thread(target=producer.run, name="hashtrack-feed", daemon=True)
    thread.start()
    logger.debug(f"Feed subscribed (filter={filter!r})")
    return FeedHandle(producer, channel, stop, thread)
