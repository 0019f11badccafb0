from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import TIMESTAMPTZ, QueryModel


class BotPlatform(StrEnum):
    DISCORD = "discord"
    SLACK = "slack"


class BotIntegration(QueryModel, table=True):
    """Third-party chat platform bot routed to an agent.

    ``config`` is platform specific; see ``app.schemas.bot_integrations``.
    """

    __tablename__ = "bot_integrations"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: str
    agent_id: str = Field(index=True)
    platform: str
    name: str
    status: str = Field(default="active")
    config: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
