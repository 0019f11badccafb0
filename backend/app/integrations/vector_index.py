"""Per-agent vector databases stored as LanceDB tables in the object store."""

from __future__ import annotations

from app.core.logging import get_logger
from app.integrations.object_store import ObjectStore

logger = get_logger(__name__)

TEMPORAL_GRAINS = ("daily", "weekly", "monthly", "quarterly", "yearly")


def agent_index_prefix(agent_id: str, grain: str) -> str:
    return f"vectordb/{agent_id}/{grain}/"


class VectorIndexStore:
    def __init__(self, object_store: ObjectStore) -> None:
        self._object_store = object_store

    async def remove_agent_index(self, agent_id: str) -> None:
        """Remove the memory index of every temporal grain for one agent."""
        removed = 0
        for grain in TEMPORAL_GRAINS:
            removed += await self._object_store.delete_prefix(agent_index_prefix(agent_id, grain))
        logger.info("vector_index.removed agent_id=%s objects=%s", agent_id, removed)
