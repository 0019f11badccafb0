"""Key/index-oriented store interface used by cleanup workflows.

Cleanup code only needs a narrow slice of persistence: fetch by key, delete by
key (absent rows are fine), and lazily iterate index matches. `DocumentStore`
describes that slice; `SQLDocumentStore` implements it on an `AsyncSession`
and commits each delete on its own so partial progress survives a later failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from app.db import crud
from app.db.scan import DEFAULT_PAGE_SIZE, scan_index
from app.models.base import QueryModel

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlmodel.ext.asyncio.session import AsyncSession

ModelT = TypeVar("ModelT", bound=QueryModel)


class DocumentStore(Protocol):
    """Persistence operations required by the agent cleanup workflow."""

    async def get(self, model: type[ModelT], **key: Any) -> ModelT | None: ...

    async def delete(self, record: QueryModel) -> None: ...

    async def delete_if_exists(self, model: type[ModelT], **key: Any) -> None: ...

    def query(
        self,
        model: type[ModelT],
        *criteria: Any,
        cursor: str = "id",
    ) -> AsyncIterator[ModelT]: ...


class SQLDocumentStore:
    """`DocumentStore` backed by SQLModel tables."""

    def __init__(self, session: AsyncSession, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._session = session
        self._page_size = page_size

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def get(self, model: type[ModelT], **key: Any) -> ModelT | None:
        return await crud.get_by_key(self._session, model, **key)

    async def delete(self, record: QueryModel) -> None:
        await crud.delete_by_key(self._session, type(record), **record.primary_key())

    async def delete_if_exists(self, model: type[ModelT], **key: Any) -> None:
        missing = set(model.primary_key_names()) - set(key)
        if missing:
            raise ValueError(f"{model.__name__} key is missing {sorted(missing)}")
        await crud.delete_by_key(self._session, model, **key)

    def query(
        self,
        model: type[ModelT],
        *criteria: Any,
        cursor: str = "id",
    ) -> AsyncIterator[ModelT]:
        return scan_index(
            self._session,
            model,
            *criteria,
            cursor=cursor,
            page_size=self._page_size,
        )
