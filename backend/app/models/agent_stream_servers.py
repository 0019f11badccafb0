from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import TIMESTAMPTZ, QueryModel


class AgentStreamServer(QueryModel, table=True):
    """Streaming endpoint configuration; at most one row per agent."""

    __tablename__ = "agent_stream_servers"  # pyright: ignore[reportAssignmentType]

    workspace_id: str = Field(primary_key=True)
    agent_id: str = Field(primary_key=True)
    secret: str
    allowed_origins: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
