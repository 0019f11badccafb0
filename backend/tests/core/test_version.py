# ruff: noqa: INP001, S101
from __future__ import annotations

from fastapi.testclient import TestClient

from app.core.version import APP_NAME, APP_VERSION
from app.main import app


def test_openapi_document_advertises_app_name_and_version() -> None:
    info = TestClient(app).get("/openapi.json").json()["info"]

    assert info == {"title": APP_NAME, "version": APP_VERSION}


def test_version_is_major_minor_patch() -> None:
    major, minor, patch = APP_VERSION.split(".")

    assert all(part.isdigit() for part in (major, minor, patch))
