"""aiohttp WebSocket implementation of FeedConnector/FeedConnection."""

import asyncio
import logging

import aiohttp

from tip_relay.config import settings
from tip_relay.exceptions import ShutdownWriteError, UpstreamConnectError, UpstreamReadError

logger = logging.getLogger(__name__)

_CLOSED_TYPES = (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED)


class WebSocketFeedConnection:
    """An open aiohttp WebSocket to the tip stream.

    Satisfies the FeedConnection protocol.
    """

    def __init__(
        self,
        ws: aiohttp.ClientWebSocketResponse,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Wrap an established WebSocket.

        Args:
            ws: The connected WebSocket response
            session: Session to close on dispose, when this connection owns it
        """
        self._ws = ws
        self._owned_session = session

    async def receive(self) -> str | bytes | None:
        while True:
            try:
                msg = await self._ws.receive()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise UpstreamReadError(f"WebSocket read failed: {e}") from e

            if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                return msg.data
            if msg.type in _CLOSED_TYPES:
                logger.debug("WebSocket closed code=%s", self._ws.close_code)
                return None
            if msg.type is aiohttp.WSMsgType.ERROR:
                raise UpstreamReadError(f"WebSocket read failed: {self._ws.exception()}")
            # ping/pong frames when autoping is off

    async def send_close(self) -> None:
        """Send a normal-closure frame and wait for the reply.

        aiohttp wakes a pending receive() with a CLOSING message first, so
        the read loop ends before the close frame goes out.

        Raises:
            ShutdownWriteError: If the close frame could not be written
        """
        previous = self._ws.exception()
        try:
            await self._ws.close(code=aiohttp.WSCloseCode.OK)
        except (aiohttp.ClientError, OSError) as e:
            raise ShutdownWriteError(f"Could not send close frame: {e}") from e

        # close() records a failed write in exception() instead of raising.
        # A missing close acknowledgement is a timeout, not a write failure.
        error = self._ws.exception()
        if (
            error is not None
            and error is not previous
            and isinstance(error, (aiohttp.ClientError, OSError))
            and not isinstance(error, (asyncio.TimeoutError, aiohttp.ServerTimeoutError))
        ):
            raise ShutdownWriteError(f"Could not send close frame: {error}") from error

    async def dispose(self) -> None:
        if not self._ws.closed:
            await self._ws.close()
        if self._owned_session is not None:
            await self._owned_session.close()
            self._owned_session = None

    @property
    def closed(self) -> bool:
        return self._ws.closed


class WebSocketFeedConnector:
    """Opens WebSocket connections with aiohttp.

    Satisfies the FeedConnector protocol. When no session is given, each
    connection gets its own ClientSession and closes it on dispose.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        connect_timeout: float | None = None,
        close_timeout: float | None = None,
    ) -> None:
        self._session = session
        self._connect_timeout = connect_timeout or settings.connect_timeout
        # Bounds how long close() waits for the peer's close frame
        self._ws_timeout = aiohttp.ClientWSTimeout(ws_close=close_timeout or settings.shutdown_timeout)

    async def connect(self, url: str) -> WebSocketFeedConnection:
        """Open the WebSocket handshake to url.

        Raises:
            UpstreamConnectError: If the handshake fails or times out
        """
        session = self._session or aiohttp.ClientSession()
        owned = session if self._session is None else None
        try:
            ws = await asyncio.wait_for(
                session.ws_connect(url, timeout=self._ws_timeout),
                timeout=self._connect_timeout,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            if owned is not None:
                await owned.close()
            raise UpstreamConnectError(f"Could not connect to {url}: {e!r}", url=url) from e

        logger.debug("WebSocket handshake completed url=%s", url)
        return WebSocketFeedConnection(ws, session=owned)
