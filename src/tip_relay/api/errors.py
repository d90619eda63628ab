"""Centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tip_relay.dto import ErrorResponse
from tip_relay.exceptions import CacheMissError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the FastAPI app."""

    @app.exception_handler(CacheMissError)
    async def handle_cache_miss(_request: Request, exc: CacheMissError):
        logger.warning("get: %s", exc)
        body = ErrorResponse(error=str(exc), description=exc.description)
        return JSONResponse(body.model_dump(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    # Starlette re-raises after this response is sent, so the server logs the traceback
    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        body = ErrorResponse(error="Internal server error", description=str(exc))
        return JSONResponse(body.model_dump(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
