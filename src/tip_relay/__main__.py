"""Command-line entry point: ``python -m tip_relay`` or ``tip-relay``."""

import argparse
import asyncio
import dataclasses
import logging
import sys

import uvicorn

from tip_relay.api import create_app
from tip_relay.config import Settings, settings
from tip_relay.exceptions import UpstreamConnectError
from tip_relay.handlers import build_annotations
from tip_relay.lifecycle import QueryServer, RelayLifecycle
from tip_relay.logging_config import configure_logging
from tip_relay.repositories import MemoryCacheStore, WebSocketFeedConnector
from tip_relay.services import FeedSubscriber, TipCacheService

logger = logging.getLogger("tip_relay")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tip-relay",
        description="Relay the latest landed-tip percentiles over HTTP",
    )
    parser.add_argument("--addr", default=settings.upstream_host, help="upstream tip stream host")
    parser.add_argument("--port", type=int, default=settings.api_port, help="HTTP listen port")
    parser.add_argument("--log-level", default=settings.log_level, help="log level name")
    return parser.parse_args(argv)


async def serve(config: Settings) -> int:
    """Wire the store, service, subscriber and HTTP server, then run them.

    Returns:
        Process exit code
    """
    store = MemoryCacheStore.create(gc_interval=config.cache_gc_interval)
    store.start()
    try:
        tip_service = TipCacheService.create(store=store, ttl=config.cache_ttl, key=config.cache_key)
        subscriber = FeedSubscriber.create(
            service=tip_service,
            connector=WebSocketFeedConnector(
                connect_timeout=config.connect_timeout,
                close_timeout=config.shutdown_timeout,
            ),
            url=config.feed_url,
        )
        app = create_app(tip_service, annotations=build_annotations(config))
        server = QueryServer(
            uvicorn.Config(
                app,
                host=config.api_host,
                port=config.api_port,
                log_config=None,
            )
        )
        lifecycle = RelayLifecycle(
            subscriber=subscriber,
            server=server,
            shutdown_timeout=config.shutdown_timeout,
        )
        return await lifecycle.run()
    finally:
        store.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = dataclasses.replace(
        settings,
        upstream_host=args.addr,
        api_port=args.port,
        log_level=args.log_level,
    )
    configure_logging(config.log_level)

    try:
        return asyncio.run(serve(config))
    except UpstreamConnectError as e:
        logger.critical("dial: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
