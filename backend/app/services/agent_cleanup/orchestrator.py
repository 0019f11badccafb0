"""Agent decommissioning: remove everything an agent owns, then the agent.

Dependent resources live in separate tables and external systems, so there is
no transaction spanning them. Each resource category runs as its own phase; a
failing phase is recorded in the returned `CleanupReport` and the remaining
phases still run. The agent row is deleted last, after every phase has been
attempted, which leaves "agent still present, some dependents gone" as the only
intermediate state. Re-running the whole operation is the recovery path, so
every delete treats an absent row or object as already deleted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlmodel import col

from app.core.logging import TRACE_LEVEL, get_logger
from app.models.agent_conversations import AgentConversation
from app.models.agent_delegation_tasks import AgentDelegationTask
from app.models.agent_evals import AgentEvalJudge, AgentEvalResult
from app.models.agent_keys import AgentKey
from app.models.agent_schedules import AgentSchedule
from app.models.agent_stream_servers import AgentStreamServer
from app.models.agents import Agent
from app.models.bot_integrations import BotIntegration, BotPlatform
from app.schemas.bot_integrations import parse_discord_config
from app.services.agent_cleanup.collaborators import CleanupCollaborators
from app.services.agent_cleanup.errors import AgentRecordDeleteError
from app.services.agent_cleanup.file_refs import extract_conversation_file_keys
from app.services.agent_cleanup.phases import CleanupPhaseRunner
from app.services.agent_cleanup.report import CleanupReport, DependentEntityCategory

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

    from app.db.document_store import DocumentStore
    from app.models.base import QueryModel


@dataclass(frozen=True)
class AgentIdentity:
    workspace_id: str
    agent_id: str


class WorkspaceFilter(Enum):
    # Index keyed by agent only; rows from other workspaces are skipped per record.
    CLIENT = "client"
    # Workspace equality is part of the query (filter expression or composite index).
    QUERY = "query"


@dataclass(frozen=True)
class IndexedCategory:
    category: DependentEntityCategory
    model: type[QueryModel]
    workspace_filter: WorkspaceFilter


AGENT_KEYS = IndexedCategory(
    DependentEntityCategory.AGENT_KEYS, AgentKey, WorkspaceFilter.CLIENT
)
AGENT_SCHEDULES = IndexedCategory(
    DependentEntityCategory.AGENT_SCHEDULES, AgentSchedule, WorkspaceFilter.CLIENT
)
AGENT_CONVERSATIONS = IndexedCategory(
    DependentEntityCategory.AGENT_CONVERSATIONS, AgentConversation, WorkspaceFilter.QUERY
)
AGENT_EVAL_JUDGES = IndexedCategory(
    DependentEntityCategory.AGENT_EVAL_JUDGES, AgentEvalJudge, WorkspaceFilter.CLIENT
)
AGENT_EVAL_RESULTS = IndexedCategory(
    DependentEntityCategory.AGENT_EVAL_RESULTS, AgentEvalResult, WorkspaceFilter.CLIENT
)
AGENT_DELEGATION_TASKS = IndexedCategory(
    DependentEntityCategory.AGENT_DELEGATION_TASKS, AgentDelegationTask, WorkspaceFilter.QUERY
)
BOT_INTEGRATIONS = IndexedCategory(
    DependentEntityCategory.BOT_INTEGRATIONS, BotIntegration, WorkspaceFilter.CLIENT
)


class AgentResourceCleanupService:
    """Sequences cleanup phases for one agent and deletes the agent record last."""

    def __init__(
        self,
        store: DocumentStore,
        collaborators: CleanupCollaborators,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._collaborators = collaborators
        self._logger = logger or get_logger(__name__)

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _phases(
        self,
        identity: AgentIdentity,
        runner: CleanupPhaseRunner,
    ) -> list[tuple[DependentEntityCategory, Callable[[], Awaitable[None]]]]:
        def indexed(
            indexed_category: IndexedCategory,
            before_delete: Callable[[Any], Awaitable[None]] | None = None,
        ) -> tuple[DependentEntityCategory, Callable[[], Awaitable[None]]]:
            async def action() -> None:
                await self._delete_indexed(identity, indexed_category, before_delete)

            return indexed_category.category, action

        async def conversation_blobs(record: AgentConversation) -> None:
            await self._delete_conversation_blobs(identity, record, runner)

        async def discord_command(record: BotIntegration) -> None:
            await self._deregister_bot_command(record, runner)

        async def stream_server() -> None:
            await self._store.delete_if_exists(
                AgentStreamServer,
                workspace_id=identity.workspace_id,
                agent_id=identity.agent_id,
            )

        async def graph_facts() -> None:
            await self._collaborators.graph_facts.remove_agent_facts(
                identity.workspace_id,
                identity.agent_id,
            )

        async def vector_databases() -> None:
            await self._collaborators.vector_index.remove_agent_index(identity.agent_id)

        return [
            indexed(AGENT_KEYS),
            indexed(AGENT_SCHEDULES),
            indexed(AGENT_CONVERSATIONS, conversation_blobs),
            indexed(AGENT_EVAL_JUDGES),
            indexed(AGENT_EVAL_RESULTS),
            (DependentEntityCategory.AGENT_STREAM_SERVERS, stream_server),
            indexed(AGENT_DELEGATION_TASKS),
            indexed(BOT_INTEGRATIONS, discord_command),
            (DependentEntityCategory.GRAPH_FACTS, graph_facts),
            (DependentEntityCategory.VECTOR_DATABASES, vector_databases),
        ]

    async def _delete_indexed(
        self,
        identity: AgentIdentity,
        indexed_category: IndexedCategory,
        before_delete: Callable[[Any], Awaitable[None]] | None,
    ) -> None:
        model: Any = indexed_category.model
        criteria = [col(model.agent_id) == identity.agent_id]
        if indexed_category.workspace_filter is WorkspaceFilter.QUERY:
            criteria.append(col(model.workspace_id) == identity.workspace_id)
        deleted = 0
        async for record in self._store.query(model, *criteria):
            if (
                indexed_category.workspace_filter is WorkspaceFilter.CLIENT
                and record.workspace_id != identity.workspace_id
            ):
                continue
            if before_delete is not None:
                await before_delete(record)
            await self._store.delete(record)
            deleted += 1
        self.logger.log(
            TRACE_LEVEL,
            "agent.cleanup.phase_done label=%s deleted=%s",
            indexed_category.category,
            deleted,
        )

    async def _conversation_messages(
        self,
        record: AgentConversation,
        runner: CleanupPhaseRunner,
    ) -> Any:
        if not record.messages_blob_key:
            return record.messages
        try:
            body = await self._collaborators.blob_store.get_object_body(record.messages_blob_key)
            parsed = json.loads(body.decode("utf-8"))
        except Exception as exc:  # noqa: BLE001
            runner.warn(DependentEntityCategory.AGENT_CONVERSATIONS, record.messages_blob_key, exc)
            return record.messages
        return parsed if isinstance(parsed, list) else []

    async def _delete_conversation_blobs(
        self,
        identity: AgentIdentity,
        record: AgentConversation,
        runner: CleanupPhaseRunner,
    ) -> None:
        messages = await self._conversation_messages(record, runner)
        keys = sorted(extract_conversation_file_keys(messages, identity.workspace_id))
        if record.messages_blob_key:
            keys.append(record.messages_blob_key)
        for key in keys:
            try:
                await self._collaborators.blob_store.delete_object(key)
            except Exception as exc:  # noqa: BLE001
                runner.warn(DependentEntityCategory.AGENT_CONVERSATIONS, key, exc)

    async def _deregister_bot_command(
        self,
        record: BotIntegration,
        runner: CleanupPhaseRunner,
    ) -> None:
        if record.platform != BotPlatform.DISCORD:
            return
        config = parse_discord_config(record.config)
        if config is None:
            self.logger.warning(
                "agent.cleanup.discord_config_invalid integration=%s",
                record.describe_key(),
            )
            return
        if config.registered_command is None:
            return
        command = config.registered_command
        try:
            await self._collaborators.command_registrar.deregister_command(
                config.application_id or "",
                command.command_id,
                config.bot_token or "",
            )
        except Exception as exc:  # noqa: BLE001
            runner.warn(
                DependentEntityCategory.BOT_INTEGRATIONS,
                f"discord-command:{command.command_id}",
                exc,
            )

    async def remove_agent_resources(self, *, workspace_id: str, agent_id: str) -> CleanupReport:
        """Delete every dependent resource of the agent, then the agent record.

        Phase failures are collected in the report and never raised. Only a
        failure to delete the agent record raises (`AgentRecordDeleteError`).
        """
        identity = AgentIdentity(workspace_id=workspace_id, agent_id=agent_id)
        runner = CleanupPhaseRunner(logger=self.logger)
        self.logger.log(
            TRACE_LEVEL,
            "agent.cleanup.start workspace_id=%s agent_id=%s",
            workspace_id,
            agent_id,
        )
        for label, action in self._phases(identity, runner):
            await runner.run(label, action)

        try:
            await self._store.delete_if_exists(Agent, workspace_id=workspace_id, id=agent_id)
        except Exception as exc:
            raise AgentRecordDeleteError(workspace_id, agent_id, exc) from exc

        report = runner.report
        self.logger.info(
            "agent.cleanup.complete workspace_id=%s agent_id=%s cleanup_errors=%s warnings=%s",
            workspace_id,
            agent_id,
            len(report.cleanup_errors),
            len(report.warnings),
        )
        return report


async def remove_agent_resources(
    store: DocumentStore,
    *,
    workspace_id: str,
    agent_id: str,
    collaborators: CleanupCollaborators | None = None,
) -> CleanupReport:
    service = AgentResourceCleanupService(
        store,
        collaborators or CleanupCollaborators.from_settings(),
    )
    return await service.remove_agent_resources(workspace_id=workspace_id, agent_id=agent_id)
