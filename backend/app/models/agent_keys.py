from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field

from app.core.time import utcnow
from app.models.base import TIMESTAMPTZ, QueryModel


class AgentKey(QueryModel, table=True):
    """Credential used by external callers to invoke an agent."""

    __tablename__ = "agent_keys"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: str
    # Indexed by agent only; workspace scoping is applied by callers.
    agent_id: str = Field(index=True)
    name: str | None = Field(default=None)
    key_hash: str
    provider: str = Field(default="api")
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMPTZ)
