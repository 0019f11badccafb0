from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import TIMESTAMPTZ, QueryModel


class AgentConversation(QueryModel, table=True):
    """Conversation history for one agent.

    ``messages`` has no fixed shape; message parts may embed object-store keys
    under ``conversation-files/{workspace_id}/``. Large histories are offloaded
    to the object store, in which case ``messages`` is empty and
    ``messages_blob_key`` points at the JSON document.
    """

    __tablename__ = "agent_conversations"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: str
    agent_id: str = Field(index=True)
    conversation_type: str = Field(default="test")
    messages: Any = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    messages_blob_key: str | None = Field(default=None)
    started_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
    last_message_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
