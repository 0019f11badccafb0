from __future__ import annotations

from typing import TYPE_CHECKING

from app.core.logging import get_logger
from app.services.agent_cleanup.report import CleanupError, CleanupReport, CleanupWarning

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable


class CleanupPhaseRunner:
    """Runs named cleanup phases, turning failures into report entries.

    ``run`` never raises for an ``Exception`` raised by the phase; cancellation
    still propagates. ``warn`` records side-effect failures that must not count
    as phase failures.
    """

    def __init__(
        self,
        report: CleanupReport | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.report = report if report is not None else CleanupReport()
        self.logger = logger or get_logger(__name__)

    async def run(self, label: str, action: Callable[[], Awaitable[None]]) -> None:
        try:
            await action()
        except Exception as exc:  # noqa: BLE001
            self.logger.warning(
                "agent.cleanup.phase_failed label=%s error_type=%s error=%s",
                label,
                type(exc).__name__,
                exc,
            )
            self.report.cleanup_errors.append(CleanupError(label=label, error=exc))

    def warn(self, label: str, target: str, exc: Exception) -> None:
        self.logger.warning(
            "agent.cleanup.side_effect_failed label=%s target=%s error=%s",
            label,
            target,
            exc,
        )
        self.report.warnings.append(CleanupWarning(label=label, target=target, error=exc))
