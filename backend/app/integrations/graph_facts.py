from __future__ import annotations

from app.core.logging import get_logger
from app.integrations.object_store import ObjectStore

logger = get_logger(__name__)


def agent_facts_key(workspace_id: str, agent_id: str) -> str:
    return f"graphs/{workspace_id}/{agent_id}/facts.parquet"


class GraphFactStore:
    """Knowledge-graph facts, one parquet file per workspace/agent pair."""

    def __init__(self, object_store: ObjectStore) -> None:
        self._object_store = object_store

    async def remove_agent_facts(self, workspace_id: str, agent_id: str) -> None:
        key = agent_facts_key(workspace_id, agent_id)
        await self._object_store.delete_object(key)
        logger.info("graph_facts.removed workspace_id=%s agent_id=%s", workspace_id, agent_id)
