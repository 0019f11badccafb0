from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, Text
from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import TIMESTAMPTZ, QueryModel


class AgentSchedule(QueryModel, table=True):
    """Recurring prompt executed against an agent on a cron expression."""

    __tablename__ = "agent_schedules"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: str
    agent_id: str = Field(index=True)
    name: str
    cron_expression: str
    prompt: str = Field(sa_column=Column(Text, nullable=False))
    enabled: bool = Field(default=True)
    next_run_at: datetime | None = Field(default=None, sa_type=TIMESTAMPTZ)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
