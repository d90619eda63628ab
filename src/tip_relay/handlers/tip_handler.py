"""HTTP handler for the current tip record.

Cache misses are not handled here: CacheMissError propagates to the
exception handlers registered in tip_relay.api.errors.
"""

from dataclasses import asdict

from tip_relay.config import Settings, settings
from tip_relay.dto import Annotations, TipResponse
from tip_relay.services import TipCacheService


def build_annotations(config: Settings = settings) -> Annotations:
    """Build the static annotation block from settings."""
    return Annotations(
        repository=config.annotation_repository,
        author=config.annotation_author,
        language=config.annotation_language,
        subscribed_to=config.feed_url,
    )


class TipHandler:
    """Serves the cached tip record with its annotations.

    Example:
        ```python
        handler = TipHandler(tip_service=service, annotations=build_annotations())

        @app.get("/", response_model=TipResponse)
        async def current_tip():
            return await handler.get_current()
        ```
    """

    def __init__(self, tip_service: TipCacheService, annotations: Annotations) -> None:
        """Initialize the tip handler.

        Args:
            tip_service: The service holding the current record (required).
            annotations: Static metadata attached to every response.
        """
        self._tips = tip_service
        self._annotations = annotations

    async def get_current(self) -> TipResponse:
        """Handle GET / requests.

        Returns:
            TipResponse with the current record and annotations

        Raises:
            EntryNotFoundError: If the cache holds no live record
            CorruptEntryError: If the cached record cannot be decoded
        """
        record = self._tips.current()
        return TipResponse(**asdict(record), annotations=self._annotations)

    @property
    def annotations(self) -> Annotations:
        return self._annotations
