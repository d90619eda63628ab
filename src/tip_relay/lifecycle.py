"""Process lifecycle coordination.

The coordinator supervises the feed subscriber and the HTTP server and
drives shutdown. It never touches the cache.

States:
    RUNNING  -> both the read loop and the query server are serving
    DRAINING -> SIGINT arrived, or the read loop / server ended
    STOPPED  -> everything released; the process may exit
"""

import asyncio
import contextlib
import logging
import signal
from enum import Enum

import uvicorn

from tip_relay.config import settings
from tip_relay.exceptions import ShutdownWriteError
from tip_relay.services import FeedSubscriber

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    """Coordinator states, in the only order they are entered."""

    CREATED = "created"
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


class QueryServer(uvicorn.Server):
    """uvicorn server that leaves SIGINT to the RelayLifecycle."""

    def install_signal_handlers(self) -> None:
        # uvicorn < 0.29
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        # uvicorn >= 0.29
        yield


class RelayLifecycle:
    """Runs the relay until interrupted or until the feed ends.

    On SIGINT the upstream gets a close frame, then the coordinator waits
    for the read loop to end, for at most shutdown_timeout seconds in total.
    If the read loop ends by itself, shutdown starts immediately. In-flight
    HTTP requests are not drained.

    Example:
        ```python
        lifecycle = RelayLifecycle(subscriber=subscriber, server=QueryServer(config))
        exit_code = await lifecycle.run()
        ```
    """

    def __init__(
        self,
        subscriber: FeedSubscriber,
        server: uvicorn.Server | None = None,
        shutdown_timeout: float | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            subscriber: The feed subscriber to supervise (required).
            server: HTTP server to run alongside the feed. None runs the feed only.
            shutdown_timeout: Grace period for the close handshake. Defaults to settings.
        """
        self._subscriber = subscriber
        self._server = server
        self._shutdown_timeout = shutdown_timeout or settings.shutdown_timeout
        self._state = LifecycleState.CREATED
        self._interrupted = asyncio.Event()
        self._server_failed = False

    async def run(self) -> int:
        """Connect, serve, and shut down.

        Returns:
            0 after an interrupt or a clean upstream close, 1 when the feed
            failed or the server exited on its own

        Raises:
            UpstreamConnectError: If the initial connection fails
        """
        loop = asyncio.get_running_loop()
        await self._subscriber.start()

        self._state = LifecycleState.RUNNING
        self._install_signal_handler(loop)

        server_task: asyncio.Task[None] | None = None
        if self._server is not None:
            server_task = asyncio.create_task(self._server.serve(), name="query-server")
        interrupt_task = asyncio.create_task(self._interrupted.wait(), name="interrupt")

        finished = self._subscriber.finished
        waiters: set[asyncio.Future] = {finished, interrupt_task}
        if server_task is not None:
            waiters.add(server_task)

        try:
            done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
            self._state = LifecycleState.DRAINING

            if finished in done:
                logger.info("Feed read loop ended, shutting down")
            elif interrupt_task in done:
                await self._drain_upstream(loop)
            else:
                self._server_failed = True
                logger.error("Query server exited unexpectedly, shutting down")
        finally:
            interrupt_task.cancel()
            self._remove_signal_handler(loop)
            await self._stop_server(server_task)
            await self._subscriber.dispose()
            self._state = LifecycleState.STOPPED
            logger.info("Stopped")

        return 1 if self._subscriber.error is not None or self._server_failed else 0

    def interrupt(self) -> None:
        """Request a graceful shutdown, as SIGINT does."""
        if not self._interrupted.is_set():
            logger.info("interrupt")
            self._interrupted.set()

    async def _drain_upstream(self, loop: asyncio.AbstractEventLoop) -> None:
        deadline = loop.time() + self._shutdown_timeout
        finished = self._subscriber.finished

        try:
            await asyncio.wait_for(self._subscriber.send_close(), timeout=self._shutdown_timeout)
        except ShutdownWriteError as e:
            logger.error("write close: %s", e)
            return
        except asyncio.TimeoutError:
            logger.warning("Close handshake not acknowledged within %.1fs", self._shutdown_timeout)

        remaining = deadline - loop.time()
        if remaining > 0 and not finished.done():
            await asyncio.wait({finished}, timeout=remaining)
        if not finished.done():
            logger.warning("Feed read loop still running after %.1fs", self._shutdown_timeout)

    async def _stop_server(self, server_task: "asyncio.Task[None] | None") -> None:
        if server_task is None or self._server is None:
            return
        self._server.should_exit = True
        self._server.force_exit = True
        with contextlib.suppress(asyncio.CancelledError):
            await server_task

    def _install_signal_handler(self, loop: asyncio.AbstractEventLoop) -> None:
        try:
            loop.add_signal_handler(signal.SIGINT, self.interrupt)
        except (NotImplementedError, RuntimeError):
            # add_signal_handler is unavailable on Windows and off the main thread
            logger.debug("SIGINT handler not installed")

    def _remove_signal_handler(self, loop: asyncio.AbstractEventLoop) -> None:
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.remove_signal_handler(signal.SIGINT)

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def interrupted(self) -> bool:
        return self._interrupted.is_set()
