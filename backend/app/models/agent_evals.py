from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Text
from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import TIMESTAMPTZ, QueryModel


class AgentEvalJudge(QueryModel, table=True):
    """LLM judge configuration used to score an agent's conversations."""

    __tablename__ = "agent_eval_judges"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: str
    agent_id: str = Field(index=True)
    name: str
    model_name: str
    eval_prompt: str = Field(sa_column=Column(Text, nullable=False))
    enabled: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)


class AgentEvalResult(QueryModel, table=True):
    """Score produced by a judge for one conversation."""

    __tablename__ = "agent_eval_results"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: str
    agent_id: str = Field(index=True)
    judge_id: UUID
    conversation_id: UUID
    scores: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    summary: str | None = Field(default=None, sa_column=Column(Text))
    evaluated_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
