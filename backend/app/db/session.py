"""Async engine, session factory and schema bootstrap."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import anyio
from alembic import command
from alembic.config import Config
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app import models  # noqa: F401
from app.core.config import settings
from app.core.logging import get_logger

BACKEND_ROOT = Path(__file__).resolve().parents[2]
MIGRATIONS_DIR = BACKEND_ROOT / "migrations" / "versions"

_POSTGRES_SCHEMES = frozenset({"postgres", "postgresql"})

logger = get_logger(__name__)


def normalize_database_url(database_url: str) -> str:
    """Pin plain Postgres URLs to the psycopg 3 driver; leave others untouched."""
    if "://" not in database_url:
        return database_url
    scheme, rest = database_url.split("://", 1)
    if scheme in _POSTGRES_SCHEMES:
        return f"postgresql+psycopg://{rest}"
    return database_url


def create_engine_for(database_url: str) -> AsyncEngine:
    url = normalize_database_url(database_url)
    options: dict[str, Any] = {}
    if not url.startswith("sqlite"):
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


async_engine: AsyncEngine = create_engine_for(settings.database_url)
# Cleanup commits after every delete and keeps using the rows it scanned.
async_session_maker = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def _alembic_config() -> Config:
    alembic_cfg = Config(str(BACKEND_ROOT / "alembic.ini"))
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


def run_migrations() -> None:
    logger.info("db.migrations.start")
    command.upgrade(_alembic_config(), "head")
    logger.info("db.migrations.complete")


async def init_db() -> None:
    """Bring the schema up to date: Alembic when enabled, otherwise ``create_all``."""
    if settings.db_auto_migrate:
        if any(MIGRATIONS_DIR.glob("*.py")):
            await anyio.to_thread.run_sync(run_migrations)
            return
        logger.warning("db.migrations.missing falling back to create_all")

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("db.schema.created tables=%s", len(SQLModel.metadata.tables))


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session
