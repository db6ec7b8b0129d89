"""
Pytest configuration and fixtures for thinkcyber-admin tests.

The content backend is replaced by ``FakeBackend``, an in-memory store
exposed through ``httpx.MockTransport``. It records every request so tests
can assert on outbound bodies, or on the absence of any outbound call.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Callable
from itertools import count
from typing import Any, Union

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from thinkcyber_admin.api.deps import get_backend_client
from thinkcyber_admin.api.main import app
from thinkcyber_admin.config.settings import Settings
from thinkcyber_admin.services.backend_client import BackendClient

BACKEND_URL = "http://backend.test/api"
BACKEND_PREFIX = "/api/"

Handler = Callable[[httpx.Request], httpx.Response]
Canned = Union[Handler, tuple[int, Any]]


class FakeBackend:
    """
    In-memory stand-in for the content backend.

    Canned replies registered with ``reply`` win; anything else falls
    through to a generic CRUD store keyed by resource name.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Canned] = {}
        self.store: dict[str, dict[str, dict[str, Any]]] = {}
        self._ids = count(1)

    # -- test helpers ---------------------------------------------------------

    def reply(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        """Register a canned JSON reply for ``method path``."""
        self.routes[(method.upper(), path)] = (status, body)

    def on(self, method: str, path: str, handler: Handler) -> None:
        """Register a handler that builds the response (or raises)."""
        self.routes[(method.upper(), path)] = handler

    def seed(self, resource: str, *records: dict[str, Any]) -> None:
        """Put backend (snake_case) records into the store."""
        bucket = self.store.setdefault(resource, {})
        for record in records:
            bucket[str(record["id"])] = dict(record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)

    def paths(self) -> list[str]:
        return [self._relative(r) for r in self.requests]

    # -- transport ------------------------------------------------------------

    @staticmethod
    def _relative(request: httpx.Request) -> str:
        path = request.url.path
        if path.startswith(BACKEND_PREFIX):
            path = path[len(BACKEND_PREFIX):]
        return path

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = self._relative(request)

        canned = self.routes.get((request.method, path))
        if canned is not None:
            if callable(canned):
                return canned(request)
            status, body = canned
            return httpx.Response(status, json=body)

        return self._crud(request, path)

    def _crud(self, request: httpx.Request, path: str) -> httpx.Response:
        parts = path.split("/")
        resource = parts[0]
        bucket = self.store.setdefault(resource, {})

        if len(parts) == 1:
            if request.method == "GET":
                return httpx.Response(
                    200, json={"success": True, "data": list(bucket.values())}
                )
            if request.method == "POST":
                record = {"id": next(self._ids), **json.loads(request.content)}
                bucket[str(record["id"])] = record
                return httpx.Response(201, json={"success": True, "data": record})

        if len(parts) == 2:
            record_id = parts[1]
            record = bucket.get(record_id)
            if record is None:
                return httpx.Response(
                    404, json={"success": False, "error": "Record not found"}
                )
            if request.method == "GET":
                return httpx.Response(200, json={"success": True, "data": record})
            if request.method == "PUT":
                record.update(json.loads(request.content))
                return httpx.Response(200, json={"success": True, "data": record})
            if request.method == "DELETE":
                del bucket[record_id]
                return httpx.Response(200, json={"success": True, "data": record})

        return httpx.Response(404, json={"success": False, "error": "Route not found"})


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Fresh in-memory backend per test."""
    return FakeBackend()


@pytest.fixture
def backend_client(fake_backend: FakeBackend) -> BackendClient:
    """Forwarder wired to the fake backend."""
    return BackendClient(
        BACKEND_URL,
        token="test-token",
        transport=httpx.MockTransport(fake_backend.handler),
    )


@pytest.fixture
async def api_client(backend_client: BackendClient) -> AsyncGenerator[AsyncClient, None]:
    """ASGI client for the gateway with the forwarder dependency overridden."""
    app.dependency_overrides[get_backend_client] = lambda: backend_client
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def gateway_settings() -> Settings:
    """Settings pointing at the fake backend."""
    return Settings(api_base_url=f"{BACKEND_URL}/", api_token="env-token")
