# ruff: noqa: INP001, S101
"""SQLDocumentStore against a real (in-memory SQLite) database."""

from __future__ import annotations

import os
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.db.document_store import SQLDocumentStore
from app.models.agent_conversations import AgentConversation
from app.models.agent_delegation_tasks import AgentDelegationTask
from app.models.agent_keys import AgentKey
from app.models.agent_schedules import AgentSchedule
from app.models.agent_stream_servers import AgentStreamServer
from app.models.agents import Agent
from app.services.agent_cleanup import (
    CleanupCollaborators,
    DependentEntityCategory,
    remove_agent_resources,
)


@pytest_asyncio.fixture
async def session() -> Any:
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    async with AsyncSession(engine, expire_on_commit=False) as db:
        yield db
    await engine.dispose()


async def _add(session: AsyncSession, *rows: Any) -> None:
    session.add_all(rows)
    await session.commit()


@pytest.mark.asyncio
async def test_query_survives_deleting_rows_mid_scan(session: AsyncSession) -> None:
    await _add(
        session,
        *[AgentKey(workspace_id="ws1", agent_id="a1", key_hash=f"h{i}") for i in range(7)],
        AgentKey(workspace_id="ws1", agent_id="a2", key_hash="other"),
    )
    store = SQLDocumentStore(session, page_size=2)

    visited = 0
    async for record in store.query(AgentKey, col(AgentKey.agent_id) == "a1"):
        await store.delete(record)
        visited += 1

    remaining = list(await session.exec(select(AgentKey)))
    assert visited == 7
    assert [row.key_hash for row in remaining] == ["other"]


@pytest.mark.asyncio
async def test_get_and_delete_if_exists_use_composite_keys(session: AsyncSession) -> None:
    await _add(
        session,
        Agent(workspace_id="ws1", id="a1", name="One"),
        AgentStreamServer(workspace_id="ws1", agent_id="a1", secret="s"),
    )
    store = SQLDocumentStore(session)

    agent = await store.get(Agent, workspace_id="ws1", id="a1")
    assert agent is not None and agent.name == "One"
    assert await store.get(Agent, workspace_id="ws2", id="a1") is None

    await store.delete_if_exists(AgentStreamServer, workspace_id="ws1", agent_id="a1")
    await store.delete_if_exists(AgentStreamServer, workspace_id="ws1", agent_id="a1")

    assert list(await session.exec(select(AgentStreamServer))) == []


@pytest.mark.asyncio
async def test_delete_if_exists_requires_full_primary_key(session: AsyncSession) -> None:
    store = SQLDocumentStore(session)

    with pytest.raises(ValueError, match="workspace_id"):
        await store.delete_if_exists(AgentStreamServer, agent_id="a1")


class _Noop:
    async def delete_object(self, key: str) -> None:
        return None

    async def get_object_body(self, key: str) -> bytes:
        return b"[]"

    async def deregister_command(self, application_id: str, command_id: str, bot_token: str) -> None:
        return None

    async def remove_agent_index(self, agent_id: str) -> None:
        return None

    async def remove_agent_facts(self, workspace_id: str, agent_id: str) -> None:
        return None


def _noop_collaborators() -> CleanupCollaborators:
    noop = _Noop()
    return CleanupCollaborators(
        blob_store=noop,
        command_registrar=noop,
        vector_index=noop,
        graph_facts=noop,
    )


@pytest.mark.asyncio
async def test_full_cleanup_against_database(session: AsyncSession) -> None:
    await _add(
        session,
        Agent(workspace_id="ws1", id="a1", name="One"),
        Agent(workspace_id="ws2", id="a1", name="Same id, other workspace"),
        AgentKey(workspace_id="ws1", agent_id="a1", key_hash="k1"),
        AgentKey(workspace_id="ws2", agent_id="a1", key_hash="k2"),
        AgentConversation(workspace_id="ws1", agent_id="a1", messages=[{"text": "hi"}]),
        AgentConversation(workspace_id="ws2", agent_id="a1", messages=[]),
    )

    report = await remove_agent_resources(
        SQLDocumentStore(session, page_size=1),
        workspace_id="ws1",
        agent_id="a1",
        collaborators=_noop_collaborators(),
    )

    assert report.ok
    agents = list(await session.exec(select(Agent)))
    keys = list(await session.exec(select(AgentKey)))
    conversations = list(await session.exec(select(AgentConversation)))
    assert [agent.workspace_id for agent in agents] == ["ws2"]
    assert [key.workspace_id for key in keys] == ["ws2"]
    assert [conversation.workspace_id for conversation in conversations] == ["ws2"]


async def _assert_broken_phase_is_isolated(session: AsyncSession) -> None:
    await _add(
        session,
        Agent(workspace_id="ws1", id="a1", name="One"),
        AgentKey(workspace_id="ws1", agent_id="a1", key_hash="k1"),
        AgentConversation(workspace_id="ws1", agent_id="a1", messages=[]),
        AgentDelegationTask(workspace_id="ws1", agent_id="a1", target_agent_id="a2"),
    )
    connection = await session.connection()
    await connection.execute(text(f"DROP TABLE {AgentSchedule.__tablename__}"))
    await session.commit()

    report = await remove_agent_resources(
        SQLDocumentStore(session, page_size=1),
        workspace_id="ws1",
        agent_id="a1",
        collaborators=_noop_collaborators(),
    )

    assert report.failed_labels == [DependentEntityCategory.AGENT_SCHEDULES]
    assert list(await session.exec(select(Agent))) == []
    assert list(await session.exec(select(AgentKey))) == []
    assert list(await session.exec(select(AgentConversation))) == []
    assert list(await session.exec(select(AgentDelegationTask))) == []


@pytest.mark.asyncio
async def test_broken_phase_rolls_back_and_later_phases_still_run(
    session: AsyncSession,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    rollbacks: list[bool] = []
    original_rollback = session.rollback

    async def _counting_rollback() -> None:
        rollbacks.append(True)
        await original_rollback()

    monkeypatch.setattr(session, "rollback", _counting_rollback)

    await _assert_broken_phase_is_isolated(session)

    assert rollbacks == [True]


@pytest.mark.asyncio
async def test_broken_phase_is_isolated_on_postgres() -> None:
    # Postgres refuses every statement after an error until the transaction is rolled back.
    url = os.environ.get("TEST_POSTGRES_URL")
    if not url:
        pytest.skip("TEST_POSTGRES_URL is not set")
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    try:
        async with AsyncSession(engine, expire_on_commit=False) as db:
            await _assert_broken_phase_is_isolated(db)
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
        await engine.dispose()


def test_timestamps_are_timezone_aware() -> None:
    agent = Agent(workspace_id="ws1", id="a1", name="One")

    assert agent.created_at.tzinfo is not None
    assert Agent.__table__.c.created_at.type.timezone is True  # type: ignore[attr-defined]
