"""
Tests for the backend forwarder.

Every outcome (2xx, non-2xx, non-JSON, transport error, timeout) must come
back as a ForwardResult; nothing is raised to the caller.
"""

from __future__ import annotations

import json

import httpx
import pytest

from thinkcyber_admin import __version__
from thinkcyber_admin.services.backend_client import BackendClient, clean_params


def _client(handler, **kwargs) -> BackendClient:
    return BackendClient(
        "http://backend.test/api/",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestCleanParams:
    def test_drops_unset_values(self) -> None:
        assert clean_params({"a": None, "b": "", "c": 0, "d": False}) == {
            "c": "0",
            "d": "false",
        }

    def test_serializes_booleans(self) -> None:
        assert clean_params({"fetchAll": True}) == {"fetchAll": "true"}

    def test_empty(self) -> None:
        assert clean_params(None) == {}


class TestBuildUrl:
    def test_joins_without_double_slash(self) -> None:
        client = BackendClient("http://backend.test/api/")

        assert client.build_url("/categories") == "http://backend.test/api/categories"

    def test_appends_query(self) -> None:
        client = BackendClient("http://backend.test/api")

        url = client.build_url(
            "subcategories/search", {"q": "net sec", "page": 1, "status": None}
        )

        assert url == "http://backend.test/api/subcategories/search?q=net+sec&page=1"


class TestHeaders:
    async def test_json_request_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True, "data": []})

        await _client(handler, token="abc").post("categories", json={"name": "Cats"})

        request = seen[0]
        assert request.headers["Authorization"] == "Bearer abc"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"] == f"thinkcyber-admin/{__version__}"
        assert json.loads(request.content) == {"name": "Cats"}

    async def test_no_token_no_authorization(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        await _client(handler).get("categories")

        assert "Authorization" not in seen[0].headers

    async def test_multipart_upload(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"success": True, "data": {"id": 1}})

        result = await _client(handler).upload(
            "topics/1/modules/2/videos/upload",
            files={"video": ("intro.mp4", b"\x00\x01", "video/mp4")},
            data={"title": "Intro"},
        )

        assert result.success is True
        content_type = seen[0].headers["Content-Type"]
        assert content_type.startswith("multipart/form-data; boundary=")
        assert b'name="video"; filename="intro.mp4"' in seen[0].content
        assert b"Intro" in seen[0].content


class TestInterpret:
    async def test_success_unwraps_data_and_passthrough(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "data": [{"id": 1}],
                    "meta": {"total": 1},
                    "stats": {"total": 1},
                    "categories": [{"id": 5}],
                    "message": "ok",
                },
            )

        result = await _client(handler).get("subcategories")

        assert result.success is True
        assert result.data == [{"id": 1}]
        assert result.meta == {"total": 1}
        assert result.stats == {"total": 1}
        assert result.categories == [{"id": 5}]
        assert result.message == "ok"
        assert result.error is None

    async def test_bare_list_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"id": 1}])

        result = await _client(handler).get("categories")

        assert result.data == [{"id": 1}]

    async def test_empty_success_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(204)

        result = await _client(handler).delete("categories/1")

        assert result.success is True
        assert result.data is None

    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            ({"error": "Category not found", "message": "ignored"}, "Category not found"),
            ({"message": "Category already exists"}, "Category already exists"),
            ({}, "HTTP Error: 409"),
        ],
    )
    async def test_error_message_precedence(self, body: dict, expected: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(409, json=body)

        result = await _client(handler).post("categories", json={})

        assert result.success is False
        assert result.error == expected

    async def test_non_json_error_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad gateway</html>")

        result = await _client(handler).get("categories")

        assert result.success is False
        assert result.error == "HTTP Error: 502"

    async def test_non_json_success_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="OK")

        result = await _client(handler).get("categories")

        assert result.success is False
        assert result.error == "Invalid JSON response from backend"


class TestTransportFailures:
    async def test_timeout_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = await _client(handler, timeout=10.0).get("categories")

        assert result.success is False
        assert result.error == "Request timed out after 10s"

    async def test_upload_uses_upload_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.WriteTimeout("timed out", request=request)

        result = await _client(handler, upload_timeout=300.0).upload(
            "topics/1/modules/1/videos/upload", files={"video": ("a.mp4", b"x")}
        )

        assert result.error == "Request timed out after 300s"

    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        result = await _client(handler).get("categories")

        assert result.success is False
        assert result.error == "Connection refused"
