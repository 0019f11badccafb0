"""Errors raised by the agent cleanup workflow."""

from __future__ import annotations


class AgentCleanupError(RuntimeError):
    """Base class for cleanup failures that escape the orchestrator."""


class AgentRecordDeleteError(AgentCleanupError):
    """The agent record itself could not be deleted; the agent still exists."""

    def __init__(self, workspace_id: str, agent_id: str, cause: Exception) -> None:
        super().__init__(f"Failed to delete agent {workspace_id}/{agent_id}: {cause}")
        self.workspace_id = workspace_id
        self.agent_id = agent_id
        self.cause = cause
