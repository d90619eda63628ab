import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tip_relay.api.dependencies import HandlerDep
from tip_relay.api.errors import register_error_handlers
from tip_relay.dto import Annotations, ErrorResponse, TipResponse
from tip_relay.handlers import TipHandler, build_annotations
from tip_relay.services import TipCacheService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/",
    response_model=TipResponse,
    responses={500: {"model": ErrorResponse, "description": "Cache empty or unreadable"}},
)
async def current_tip(handler: HandlerDep) -> TipResponse:
    """Return the most recent landed-tip percentiles with annotations."""
    return await handler.get_current()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    logger.info("Query server started, serving %s", app.state.tip_handler.annotations.subscribed_to)
    yield
    logger.info("Query server stopped")


def create_app(
    tip_service: TipCacheService,
    annotations: Annotations | None = None,
) -> FastAPI:
    """Build the FastAPI app around an existing TipCacheService.

    The service (and the store behind it) is created by the caller and
    shared with the feed subscriber; the app only reads from it.

    Args:
        tip_service: Service holding the current record (required).
        annotations: Static metadata block. Defaults to build_annotations().

    Returns:
        The configured FastAPI application
    """
    app = FastAPI(
        title="Tip Relay API",
        description="Latest landed-tip percentiles relayed from the upstream tip stream",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.state.tip_handler = TipHandler(
        tip_service=tip_service,
        annotations=annotations or build_annotations(),
    )

    register_error_handlers(app)
    app.include_router(router)
    return app
