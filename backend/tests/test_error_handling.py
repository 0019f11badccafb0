# ruff: noqa: INP001, S101
from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from app.core.error_handling import REQUEST_ID_HEADER, RequestIdMiddleware, install_error_handling
from app.services.agent_cleanup import AgentRecordDeleteError


def _app() -> FastAPI:
    app = FastAPI()
    install_error_handling(app)

    @app.get("/gone")
    def gone() -> None:
        raise HTTPException(status_code=410, detail="Agent not found")

    @app.get("/record-delete")
    def record_delete() -> None:
        raise AgentRecordDeleteError("ws1", "a1", ConnectionError("db down"))

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("unexpected")

    @app.get("/items/{item_id}")
    def item(item_id: int) -> dict[str, int]:
        return {"item_id": item_id}

    return app


def test_http_exception_body_carries_request_id() -> None:
    client = TestClient(_app())

    response = client.get("/gone", headers={REQUEST_ID_HEADER: "req-123"})

    assert response.status_code == 410
    assert response.json() == {"detail": "Agent not found", "request_id": "req-123"}
    assert response.headers[REQUEST_ID_HEADER] == "req-123"


def test_agent_record_delete_error_maps_to_500_without_leaking_cause() -> None:
    client = TestClient(_app())

    response = client.get("/record-delete")

    assert response.status_code == 500
    body = response.json()
    assert body["detail"] == "Agent deletion failed."
    assert "db down" not in response.text
    assert body["request_id"] == response.headers[REQUEST_ID_HEADER]


def test_unhandled_exception_maps_to_generic_500() -> None:
    client = TestClient(_app(), raise_server_exceptions=False)

    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error."


def test_validation_error_is_422_with_error_list() -> None:
    client = TestClient(_app())

    response = client.get("/items/not-a-number")

    assert response.status_code == 422
    assert isinstance(response.json()["detail"], list)


@pytest.mark.asyncio
async def test_request_id_middleware_passes_through_non_http_scope() -> None:
    seen: list[dict[str, Any]] = []

    async def app(scope, receive, send):  # type: ignore[no-untyped-def]
        seen.append(scope)

    scope: dict[str, Any] = {"type": "lifespan"}
    await RequestIdMiddleware(app)(scope, lambda: None, lambda message: None)  # type: ignore[arg-type]

    assert seen == [{"type": "lifespan"}]


@pytest.mark.asyncio
async def test_request_id_middleware_replaces_blank_header_and_keeps_existing_one() -> None:
    header_key = REQUEST_ID_HEADER.lower().encode("latin-1")
    captured: list[str] = []
    sent: list[list[tuple[bytes, bytes]]] = []

    async def app(scope, receive, send):  # type: ignore[no-untyped-def]
        captured.append(scope["state"]["request_id"])
        await send({"type": "http.response.start", "status": 204, "headers": []})
        await send(
            {"type": "http.response.start", "status": 204, "headers": [(header_key, b"already")]}
        )

    async def send(message):  # type: ignore[no-untyped-def]
        sent.append(list(message["headers"]))

    scope = {"type": "http", "headers": [(header_key, b"   ")]}
    await RequestIdMiddleware(app)(scope, lambda: None, send)  # type: ignore[arg-type]

    assert len(captured[0]) == 32
    assert sent[0] == [(header_key, captured[0].encode("latin-1"))]
    assert sent[1] == [(header_key, b"already")]
