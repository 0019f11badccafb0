"""Result types produced by an agent cleanup run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class DependentEntityCategory(StrEnum):
    """Resource classes owned by an agent, in the order they are removed."""

    AGENT_KEYS = "agent-keys"
    AGENT_SCHEDULES = "agent-schedules"
    AGENT_CONVERSATIONS = "agent-conversations"
    AGENT_EVAL_JUDGES = "agent-eval-judges"
    AGENT_EVAL_RESULTS = "agent-eval-results"
    AGENT_STREAM_SERVERS = "agent-stream-servers"
    AGENT_DELEGATION_TASKS = "agent-delegation-tasks"
    BOT_INTEGRATIONS = "bot-integrations"
    GRAPH_FACTS = "graph-facts"
    VECTOR_DATABASES = "vector-databases"


@dataclass(frozen=True)
class CleanupError:
    """A cleanup phase that raised; the phase's remaining records were skipped."""

    label: str
    error: Exception


@dataclass(frozen=True)
class CleanupWarning:
    """A best-effort side effect (blob delete, remote deregistration) that failed."""

    label: str
    target: str
    error: Exception


@dataclass
class CleanupReport:
    cleanup_errors: list[CleanupError] = field(default_factory=list)
    warnings: list[CleanupWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.cleanup_errors

    @property
    def errors(self) -> list[Exception]:
        return [entry.error for entry in self.cleanup_errors]

    @property
    def failed_labels(self) -> list[str]:
        return [entry.label for entry in self.cleanup_errors]

    def extend(self, other: CleanupReport) -> None:
        self.cleanup_errors.extend(other.cleanup_errors)
        self.warnings.extend(other.warnings)
