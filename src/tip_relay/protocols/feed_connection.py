"""Upstream feed connection protocol.

Defines the interface the feed subscriber needs from a persistent
message stream. The default implementation is an aiohttp WebSocket client.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class FeedConnection(Protocol):
    """An open connection to the upstream tip stream."""

    async def receive(self) -> str | bytes | None:
        """Wait for the next message.

        Returns:
            The message body, or None once the upstream has closed

        Raises:
            UpstreamReadError: If the connection fails while reading
        """
        ...

    async def send_close(self) -> None:
        """Start the close handshake.

        Raises:
            ShutdownWriteError: If the close frame could not be sent
        """
        ...

    async def dispose(self) -> None:
        """Release the underlying network resources."""
        ...


@runtime_checkable
class FeedConnector(Protocol):
    """Factory that opens FeedConnection instances."""

    async def connect(self, url: str) -> FeedConnection:
        """Open a connection to the given URL.

        Raises:
            UpstreamConnectError: If the connection cannot be established
        """
        ...
