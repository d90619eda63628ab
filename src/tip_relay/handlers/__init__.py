"""Handler layer for HTTP endpoints.

Handlers depend on services (business logic), not directly on the store.

Architecture:
    Handler -> Service -> Store
    (HTTP)  -> (Business) -> (Data Access)
"""

from .tip_handler import TipHandler, build_annotations

__all__ = [
    "TipHandler",
    "build_annotations",
]
