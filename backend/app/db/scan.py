"""Lazy, paginated scans over indexed columns.

Rows are fetched in pages ordered by a unique cursor column and each page
resumes strictly after the last cursor value seen (keyset pagination). Callers
may delete yielded rows while iterating without later pages shifting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from sqlmodel import SQLModel, col

from app.db.crud import rollback_on_error
from app.db.queryset import qs

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlmodel.ext.asyncio.session import AsyncSession

ModelT = TypeVar("ModelT", bound=SQLModel)

DEFAULT_PAGE_SIZE = 100


async def scan_index(
    session: AsyncSession,
    model: type[ModelT],
    *criteria: Any,
    cursor: str = "id",
    page_size: int = DEFAULT_PAGE_SIZE,
) -> AsyncIterator[ModelT]:
    """Yield every ``model`` row matching ``criteria``, one page at a time.

    ``cursor`` names a column that is unique within the matched rows. Each call
    starts a fresh scan from the first page. Yielded rows are detached from the
    session, so a rollback after a failed statement elsewhere cannot expire them.
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")
    cursor_column = col(getattr(model, cursor))
    base = qs(model).filter(*criteria).order_by(cursor_column).limit(page_size)
    last_seen: Any = None
    while True:
        page_query = base if last_seen is None else base.filter(cursor_column > last_seen)
        async with rollback_on_error(session):
            page = await page_query.all(session)
        for row in page:
            session.expunge(row)
        if page:
            last_seen = getattr(page[-1], cursor)
        for row in page:
            yield row
        if len(page) < page_size:
            return
