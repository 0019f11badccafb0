"""Request-id propagation and JSON error responses for the API process."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger
from app.services.agent_cleanup.errors import AgentRecordDeleteError

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-Id"
logger = get_logger(__name__)


class RequestIdMiddleware:
    """Attach a request id to each HTTP request and echo it on the response."""

    def __init__(self, app: ASGIApp, *, header_name: str = REQUEST_ID_HEADER) -> None:
        self._app = app
        self._header_name = header_name
        self._header_key = header_name.lower().encode("latin-1")

    def _incoming_request_id(self, scope: Scope) -> str | None:
        for key, value in scope.get("headers") or []:
            if key.lower() == self._header_key:
                candidate = value.decode("latin-1").strip()
                return candidate or None
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        request_id = self._incoming_request_id(scope) or uuid4().hex
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers") or [])
                if not any(key.lower() == self._header_key for key, _ in headers):
                    headers.append((self._header_key, request_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        await self._app(scope, receive, send_with_request_id)


def _request_id(request: Request) -> str | None:
    value = getattr(request.state, "request_id", None)
    return value if isinstance(value, str) else None


def _error_response(request: Request, status_code: int, detail: Any) -> JSONResponse:
    body: dict[str, Any] = {"detail": detail}
    request_id = _request_id(request)
    if request_id:
        body["request_id"] = request_id
    headers = {REQUEST_ID_HEADER: request_id} if request_id else None
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def _http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    http_exc = cast("StarletteHTTPException", exc)
    return _error_response(request, http_exc.status_code, http_exc.detail)


async def _validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast("RequestValidationError", exc)
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_CONTENT,
        validation_exc.errors(),
    )


async def _agent_record_delete_handler(request: Request, exc: Exception) -> JSONResponse:
    delete_exc = cast("AgentRecordDeleteError", exc)
    logger.error(
        "agent.delete.failed workspace_id=%s agent_id=%s request_id=%s error=%s",
        delete_exc.workspace_id,
        delete_exc.agent_id,
        _request_id(request),
        delete_exc,
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Agent deletion failed.",
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "app.request.unhandled_error path=%s request_id=%s",
        request.url.path,
        _request_id(request),
        exc_info=exc,
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error.",
    )


def install_error_handling(app: FastAPI) -> None:
    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(AgentRecordDeleteError, _agent_record_delete_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
