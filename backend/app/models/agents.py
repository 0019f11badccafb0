"""Agent model: the unit of deletion for agent cleanup."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import TIMESTAMPTZ, QueryModel

RESERVED_AGENT_IDS = ("_workspace", "workspace")


class Agent(QueryModel, table=True):
    """Configured automation unit owned by a workspace."""

    __tablename__ = "agents"  # pyright: ignore[reportAssignmentType]

    workspace_id: str = Field(primary_key=True)
    id: str = Field(primary_key=True)
    name: str
    system_prompt: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
