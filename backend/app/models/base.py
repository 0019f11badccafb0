"""Shared SQLModel base for tables addressed by primary key."""

from __future__ import annotations

from typing import Any

from sqlalchemy import DateTime
from sqlmodel import SQLModel

# Every timestamp column stores an aware UTC value.
TIMESTAMPTZ = DateTime(timezone=True)


class QueryModel(SQLModel):
    @classmethod
    def primary_key_names(cls) -> tuple[str, ...]:
        table = cls.__table__  # type: ignore[attr-defined]
        return tuple(column.key for column in table.primary_key.columns)

    def primary_key(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.primary_key_names()}

    def describe_key(self) -> str:
        """Human-readable key used in log lines, e.g. ``ws-1/agent-1``."""
        return "/".join(str(value) for value in self.primary_key().values())
