"""External systems touched while removing an agent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from app.integrations.discord_commands import DiscordCommandRegistrar
from app.integrations.graph_facts import GraphFactStore
from app.integrations.object_store import ObjectStore
from app.integrations.vector_index import VectorIndexStore


class BlobStore(Protocol):
    async def delete_object(self, key: str) -> None: ...

    async def get_object_body(self, key: str) -> bytes: ...


class CommandRegistrar(Protocol):
    async def deregister_command(
        self,
        application_id: str,
        command_id: str,
        bot_token: str,
    ) -> None: ...


class VectorIndex(Protocol):
    async def remove_agent_index(self, agent_id: str) -> None: ...


class GraphFacts(Protocol):
    async def remove_agent_facts(self, workspace_id: str, agent_id: str) -> None: ...


@dataclass(frozen=True)
class CleanupCollaborators:
    blob_store: BlobStore
    command_registrar: CommandRegistrar
    vector_index: VectorIndex
    graph_facts: GraphFacts

    @classmethod
    def from_settings(cls) -> CleanupCollaborators:
        """Production wiring: one S3 client shared by blobs, vectors and graph facts."""
        object_store = ObjectStore()
        return cls(
            blob_store=object_store,
            command_registrar=DiscordCommandRegistrar(),
            vector_index=VectorIndexStore(object_store),
            graph_facts=GraphFactStore(object_store),
        )
