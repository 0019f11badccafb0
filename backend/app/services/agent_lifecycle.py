"""Agent deletion workflows.

API routes and agent tools should remain thin wrappers over these helpers; the
resource-by-resource cleanup itself lives in `app.services.agent_cleanup`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlmodel import col

from app.core.logging import get_logger
from app.models.agents import RESERVED_AGENT_IDS, Agent
from app.services.agent_cleanup import (
    AgentResourceCleanupService,
    CleanupCollaborators,
    CleanupPhaseRunner,
    CleanupReport,
)

if TYPE_CHECKING:
    from app.db.document_store import DocumentStore

logger = get_logger(__name__)


async def delete_workspace_agent(
    store: DocumentStore,
    *,
    workspace_id: str,
    agent_id: str,
    collaborators: CleanupCollaborators | None = None,
) -> CleanupReport:
    """Delete one agent and everything it owns.

    Returns the cleanup report; a non-empty ``cleanup_errors`` list means the
    agent is gone but some dependents may remain and a re-run is advisable.
    """
    if agent_id in RESERVED_AGENT_IDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete the workspace agent.",
        )
    agent = await store.get(Agent, workspace_id=workspace_id, id=agent_id)
    if agent is None:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Agent not found")

    service = AgentResourceCleanupService(
        store,
        collaborators or CleanupCollaborators.from_settings(),
    )
    report = await service.remove_agent_resources(workspace_id=workspace_id, agent_id=agent_id)
    if report.cleanup_errors:
        logger.warning(
            "agent.delete.partial workspace_id=%s agent_id=%s failed_phases=%s",
            workspace_id,
            agent_id,
            ",".join(report.failed_labels),
        )
    logger.info(
        "agent.delete.success workspace_id=%s agent_id=%s cleanup_errors=%s",
        workspace_id,
        agent_id,
        len(report.cleanup_errors),
    )
    return report


async def remove_workspace_agents(
    store: DocumentStore,
    *,
    workspace_id: str,
    collaborators: CleanupCollaborators | None = None,
) -> CleanupReport:
    """Remove every agent of a workspace, merging the per-agent reports.

    Used while tearing down a workspace. A failure that stops the agent scan
    itself is reported under the ``agents`` label.
    """
    service = AgentResourceCleanupService(
        store,
        collaborators or CleanupCollaborators.from_settings(),
    )
    report = CleanupReport()
    runner = CleanupPhaseRunner(report, logger=logger)

    async def remove_agents() -> None:
        async for agent in store.query(Agent, col(Agent.workspace_id) == workspace_id):
            agent_report = await service.remove_agent_resources(
                workspace_id=workspace_id,
                agent_id=agent.id,
            )
            report.extend(agent_report)

    await runner.run("agents", remove_agents)
    logger.info(
        "workspace.agents.removed workspace_id=%s cleanup_errors=%s",
        workspace_id,
        len(report.cleanup_errors),
    )
    return report
