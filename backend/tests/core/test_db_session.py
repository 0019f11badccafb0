# ruff: noqa: INP001, S101
from __future__ import annotations

import pytest

from app.db.session import create_engine_for, normalize_database_url


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("postgresql://u:p@db:5432/app", "postgresql+psycopg://u:p@db:5432/app"),
        ("postgres://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
        ("postgresql+psycopg://u@db/app", "postgresql+psycopg://u@db/app"),
        ("sqlite+aiosqlite://", "sqlite+aiosqlite://"),
        ("not a url", "not a url"),
    ],
)
def test_normalize_database_url(url: str, expected: str) -> None:
    assert normalize_database_url(url) == expected


@pytest.mark.asyncio
async def test_create_engine_for_sqlite_url() -> None:
    engine = create_engine_for("sqlite+aiosqlite://")

    assert engine.url.drivername == "sqlite+aiosqlite"
    await engine.dispose()
