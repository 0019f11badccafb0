from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy import delete as sql_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, col
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.logging import get_logger

ModelT = TypeVar("ModelT", bound=SQLModel)

logger = get_logger(__name__)


@asynccontextmanager
async def rollback_on_error(session: AsyncSession) -> AsyncIterator[None]:
    """Roll the session back when a statement fails, then re-raise.

    Postgres aborts the whole transaction on any error; without the rollback
    every later statement on this session fails as well.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.warning("db.session.rollback error_type=%s", type(exc).__name__)
        await session.rollback()
        raise


def _key_criteria(model: type[ModelT], key: dict[str, Any]) -> list[Any]:
    return [col(getattr(model, name)) == value for name, value in key.items()]


async def get_by_key(session: AsyncSession, model: type[ModelT], **key: Any) -> ModelT | None:
    identity: Any = next(iter(key.values())) if len(key) == 1 else key
    async with rollback_on_error(session):
        return await session.get(model, identity)


async def delete_where(
    session: AsyncSession,
    model: type[ModelT],
    *criteria: Any,
    commit: bool = True,
) -> None:
    """Issue ``DELETE ... WHERE criteria``; matching zero rows is not an error."""
    async with rollback_on_error(session):
        # SQLModel types exec() for SELECT only; DML goes through the same call at runtime.
        await session.exec(sql_delete(model).where(*criteria))  # type: ignore[call-overload]
        if commit:
            await session.commit()


async def delete_by_key(
    session: AsyncSession,
    model: type[ModelT],
    *,
    commit: bool = True,
    **key: Any,
) -> None:
    if not key:
        raise ValueError(f"{model.__name__} delete requires a primary key.")
    await delete_where(session, model, *_key_criteria(model, key), commit=commit)
