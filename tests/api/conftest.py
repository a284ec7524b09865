"""
tests/api/conftest.py

Shared fixtures for API route tests.

The `client` fixture:
  - Builds a fresh app via create_app() and patches the Postgres
    startup/shutdown calls so no running database is required.
  - Overrides get_user_provider with the in-memory provider from
    tests/conftest.py (alice: s1/k1, root: s1/admin-key).
  - Adds a few routes that fail on purpose so the ErrorResponder can be
    exercised end to end.
  - Keeps TestClient's default raise_server_exceptions=True, so any error
    escaping the app fails the test.
"""
from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from apiguard.api.routes import get_user_provider
from apiguard.errors import HttpError
from apiguard.main import create_app
from tests.conftest import InMemoryUserProvider

VALID_SECRET = "s1"
VALID_API_KEY = "k1"
ADMIN_API_KEY = "admin-key"


def _add_failing_routes(app: FastAPI) -> None:
    @app.get("/fail/runtime")
    async def fail_runtime() -> dict:
        raise RuntimeError("something broke")

    @app.get("/fail/http-aware")
    async def fail_http_aware() -> dict:
        raise HttpError("Listing not found.", status_code=404, headers={"X-Foo": "bar"})

    @app.get("/fail/starlette")
    async def fail_starlette() -> dict:
        raise StarletteHTTPException(status_code=404, detail="Nope.", headers={"X-Foo": "bar"})

    @app.get("/fail/validation")
    async def fail_validation(count: int) -> dict:
        return {"count": count}


@pytest.fixture()
def app(user_provider: InMemoryUserProvider) -> FastAPI:
    app = create_app()
    _add_failing_routes(app)
    app.dependency_overrides[get_user_provider] = lambda: user_provider
    return app


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    """Return a TestClient with the database lifecycle patched out."""
    with (
        patch("apiguard.main.init_postgres"),
        patch("apiguard.main.close_postgres"),
    ):
        with TestClient(app) as c:
            yield c

    app.dependency_overrides.clear()
