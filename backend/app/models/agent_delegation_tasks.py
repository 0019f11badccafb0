from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import TIMESTAMPTZ, QueryModel


class AgentDelegationTask(QueryModel, table=True):
    """Async task an agent delegated to another agent."""

    __tablename__ = "agent_delegation_tasks"  # pyright: ignore[reportAssignmentType]
    __table_args__ = (
        Index("ix_agent_delegation_tasks_workspace_agent", "workspace_id", "agent_id"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: str
    agent_id: str
    target_agent_id: str
    status: str = Field(default="pending")
    payload: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
