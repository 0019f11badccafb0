"""Workspace agent endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.db.document_store import SQLDocumentStore
from app.db.session import get_session
from app.services.agent_cleanup import CleanupCollaborators
from app.services.agent_lifecycle import delete_workspace_agent

router = APIRouter(prefix="/workspaces/{workspace_id}/agents", tags=["agents"])


def get_cleanup_collaborators() -> CleanupCollaborators:
    return CleanupCollaborators.from_settings()


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_agent(
    workspace_id: str,
    agent_id: str,
    session: AsyncSession = Depends(get_session),
    collaborators: CleanupCollaborators = Depends(get_cleanup_collaborators),
) -> Response:
    """Delete an agent and all resources it owns.

    Responds 204 even when some dependent resources could not be removed; those
    are logged with the failing phase labels. 410 when the agent does not exist.
    """
    store = SQLDocumentStore(session, page_size=settings.cleanup_scan_page_size)
    await delete_workspace_agent(
        store,
        workspace_id=workspace_id,
        agent_id=agent_id,
        collaborators=collaborators,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
