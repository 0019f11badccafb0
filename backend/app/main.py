"""FastAPI application entrypoint and router wiring for the backend."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import APIRouter, FastAPI

from app.api.agents import router as agents_router
from app.core.config import settings
from app.core.error_handling import install_error_handling
from app.core.logging import configure_logging, get_logger
from app.core.version import APP_NAME, APP_VERSION
from app.db.session import init_db

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Initialize application resources before serving requests."""
    logger.info(
        "app.lifecycle.starting environment=%s db_auto_migrate=%s",
        settings.environment,
        settings.db_auto_migrate,
    )
    await init_db()
    logger.info("app.lifecycle.started")
    try:
        yield
    finally:
        logger.info("app.lifecycle.stopped")


app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

install_error_handling(app)


@app.get("/health")
def health() -> dict[str, bool]:
    """Lightweight liveness probe endpoint."""
    return {"ok": True}


api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(agents_router)
app.include_router(api_v1)

logger.debug("app.routes.registered count=%s", len(app.routes))
