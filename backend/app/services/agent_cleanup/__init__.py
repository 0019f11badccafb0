"""Agent decommissioning: dependent-resource cleanup with per-phase error reporting."""

from app.services.agent_cleanup.collaborators import CleanupCollaborators
from app.services.agent_cleanup.errors import AgentCleanupError, AgentRecordDeleteError
from app.services.agent_cleanup.file_refs import extract_conversation_file_keys
from app.services.agent_cleanup.orchestrator import (
    AgentResourceCleanupService,
    remove_agent_resources,
)
from app.services.agent_cleanup.phases import CleanupPhaseRunner
from app.services.agent_cleanup.report import (
    CleanupError,
    CleanupReport,
    CleanupWarning,
    DependentEntityCategory,
)

__all__ = [
    "AgentCleanupError",
    "AgentRecordDeleteError",
    "AgentResourceCleanupService",
    "CleanupCollaborators",
    "CleanupError",
    "CleanupPhaseRunner",
    "CleanupReport",
    "CleanupWarning",
    "DependentEntityCategory",
    "extract_conversation_file_keys",
    "remove_agent_resources",
]
