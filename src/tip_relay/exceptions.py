"""Exception hierarchy for tip-relay."""


class TipRelayError(Exception):
    """Base exception for all tip-relay errors."""


class UpstreamConnectError(TipRelayError):
    """Could not open the upstream WebSocket connection."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class UpstreamReadError(TipRelayError):
    """Reading the next message from the upstream connection failed."""


class FeedDecodeError(TipRelayError):
    """An upstream message is not a non-empty JSON array of tip records."""


class ShutdownWriteError(TipRelayError):
    """Sending the close frame to the upstream connection failed."""


class CacheMissError(TipRelayError):
    """The cached tip record is unavailable.

    Query callers treat this as an expected condition and answer with a
    server-error body instead of data.
    """

    description = "The cached data is unavailable."


class EntryNotFoundError(CacheMissError):
    """No live entry for the key: never set, deleted, or expired."""

    description = (
        "Could not get the cached data. Probably the program did not have enough time "
        "to write the data to the cache."
    )


class CorruptEntryError(CacheMissError):
    """The cached bytes could not be decoded into a tip record."""

    description = (
        "Could not parse the cached data. Probably the program did not have enough time "
        "to write the data to the cache."
    )
