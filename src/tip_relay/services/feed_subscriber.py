"""Feed subscriber.

Holds the one upstream connection for the life of the process and turns
every inbound message into a cache write. There is no reconnect: once the
read loop ends, the cached record is left to expire.
"""

import asyncio
import contextlib
import logging

from tip_relay.codec import decode_batch
from tip_relay.config import settings
from tip_relay.entities import TipRecord
from tip_relay.exceptions import FeedDecodeError, TipRelayError, UpstreamReadError
from tip_relay.protocols import FeedConnection, FeedConnector
from tip_relay.repositories import WebSocketFeedConnector
from tip_relay.services.tip_service import TipCacheService

logger = logging.getLogger(__name__)


class FeedSubscriber:
    """Reads the upstream tip stream into a TipCacheService.

    The read loop runs as its own asyncio task. That task is the one-shot
    termination signal: it finishes exactly once, whether the upstream closed
    or a read/decode failed, and never raises.

    Example:
        ```python
        subscriber = FeedSubscriber.create(service=service)
        await subscriber.start()          # raises UpstreamConnectError
        await subscriber.finished         # read loop ended
        await subscriber.dispose()
        ```
    """

    def __init__(
        self,
        service: TipCacheService,
        connector: FeedConnector,
        url: str | None = None,
    ) -> None:
        """Initialize the subscriber.

        Args:
            service: Where decoded records are published (required).
            connector: Opens the upstream connection (required).
            url: Upstream stream URL. Defaults to settings.feed_url.
        """
        self._service = service
        self._connector = connector
        self._url = url or settings.feed_url
        self._connection: FeedConnection | None = None
        self._task: asyncio.Task[None] | None = None
        self._error: TipRelayError | None = None
        self._messages_received = 0

    @classmethod
    def create(
        cls,
        service: TipCacheService,
        connector: FeedConnector | None = None,
        url: str | None = None,
    ) -> "FeedSubscriber":
        """Factory method to create FeedSubscriber with the aiohttp connector.

        Args:
            service: Where decoded records are published (required).
            connector: Connection factory. If None, uses WebSocketFeedConnector.
            url: Upstream stream URL. If None, uses settings.

        Returns:
            Configured FeedSubscriber
        """
        return cls(
            service=service,
            connector=connector or WebSocketFeedConnector(),
            url=url,
        )

    async def start(self) -> None:
        """Connect to the upstream and spawn the read loop.

        Raises:
            UpstreamConnectError: If the connection cannot be opened
            RuntimeError: If the subscriber was already started
        """
        if self._task is not None:
            raise RuntimeError("FeedSubscriber already started")

        logger.info("Connecting to %s", self._url)
        self._connection = await self._connector.connect(self._url)
        logger.info("Subscribed to %s", self._url)
        self._task = asyncio.create_task(self._read_loop(), name="feed-read-loop")

    def handle_message(self, raw: str | bytes) -> TipRecord:
        """Decode one upstream message and cache its first record.

        Only the first record of each batch is kept and the rest are dropped.
        Whether the first record is the newest depends on the upstream's
        ordering, which it does not document.

        Args:
            raw: The message body

        Returns:
            The record that was cached

        Raises:
            FeedDecodeError: If the message is malformed or holds no records
        """
        records = decode_batch(raw)
        logger.debug("Received: %s", records)
        if not records:
            raise FeedDecodeError("Tip stream message contained no records")

        head = records[0]
        self._service.publish(head)
        self._messages_received += 1
        logger.info("Cached record time=%s", head.time)
        return head

    async def _read_loop(self) -> None:
        assert self._connection is not None
        while True:
            try:
                raw = await self._connection.receive()
                if raw is None:
                    logger.info("Upstream closed the tip stream")
                    return
                self.handle_message(raw)
            except (UpstreamReadError, FeedDecodeError) as e:
                self._error = e
                logger.error("Feed read loop stopped: %s", e)
                return

    async def send_close(self) -> None:
        """Send the close frame on the upstream connection.

        Raises:
            ShutdownWriteError: If the frame could not be written
        """
        if self._connection is None:
            return
        await self._connection.send_close()

    def abort(self) -> None:
        """Cancel the read loop without waiting for the upstream."""
        if self._task is not None and not self._task.done():
            logger.warning("Cancelling feed read loop")
            self._task.cancel()

    async def dispose(self) -> None:
        """Stop the read loop and release the connection."""
        self.abort()
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        if self._connection is not None:
            await self._connection.dispose()
            self._connection = None

    @property
    def finished(self) -> "asyncio.Task[None]":
        """The read loop task; done once the loop has terminated."""
        if self._task is None:
            raise RuntimeError("FeedSubscriber not started")
        return self._task

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def error(self) -> TipRelayError | None:
        """The failure that ended the read loop, if any."""
        return self._error

    @property
    def messages_received(self) -> int:
        return self._messages_received
