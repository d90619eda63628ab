"""Dependency injection for the FastAPI app.

Service instances live in app.state; dependency functions read them back
from request.app.state, so no module-level mutable state is needed.
"""

from typing import Annotated

from fastapi import Depends, Request

from tip_relay.handlers import TipHandler


def get_handler(request: Request) -> TipHandler:
    """Dependency injection for TipHandler from app.state.

    Raises:
        RuntimeError: If the handler is not initialized
    """
    handler = getattr(request.app.state, "tip_handler", None)
    if handler is None:
        raise RuntimeError("TipHandler not initialized. Check create_app().")
    return handler


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[TipHandler, Depends(get_handler)]