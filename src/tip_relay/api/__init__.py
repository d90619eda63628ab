"""HTTP API for tip-relay."""

from .app import create_app

__all__ = ["create_app"]
