from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp for ``timestamptz`` columns."""
    return datetime.now(UTC)
