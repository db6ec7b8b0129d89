"""Tests for the FastAPI application wiring and request logging middleware."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient

from thinkcyber_admin.api.main import _get_client_ip, _is_sensitive_path, app


class TestRoutes:
    def test_all_routers_mounted_under_api(self) -> None:
        paths = {route.path for route in app.routes}

        for expected in (
            "/api/health",
            "/api/categories",
            "/api/subcategories/active",
            "/api/subcategories/{subcategory_id}",
            "/api/topics/{topic_id}/modules/{module_id}/videos/upload",
            "/api/terms/latest",
            "/api/terms/{document_id}/publish",
            "/api/privacy/{document_id}",
            "/api/homepage/faqs/{faq_id}",
            "/api/homepage/{language}",
        ):
            assert expected in paths

    def test_static_routes_precede_parameterized(self) -> None:
        paths = [route.path for route in app.routes]

        assert paths.index("/api/subcategories/count") < paths.index(
            "/api/subcategories/{subcategory_id}"
        )
        assert paths.index("/api/terms/latest") < paths.index("/api/terms/{document_id}")
        assert paths.index("/api/homepage/content") < paths.index(
            "/api/homepage/{language}"
        )


class TestHelpers:
    def test_sensitive_paths(self) -> None:
        assert _is_sensitive_path("/api/topics/1/modules/2/videos/upload")
        assert not _is_sensitive_path("/api/token/refresh")
        assert not _is_sensitive_path("/api/auth/login")
        assert not _is_sensitive_path("/api/categories")

    def test_client_ip_from_forwarded_header(self) -> None:
        request = MagicMock()
        request.headers = {"x-forwarded-for": "203.0.113.9, 10.0.0.1"}

        assert _get_client_ip(request) == "203.0.113.9"

    def test_client_ip_unknown(self) -> None:
        request = MagicMock()
        request.headers = {}
        request.client = None

        assert _get_client_ip(request) == "unknown"


class TestRequestLogging:
    async def test_success_logged_at_info(
        self, api_client: AsyncClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="thinkcyber_admin.api.main"):
            await api_client.get("/api/health")

        records = [r for r in caplog.records if r.name == "thinkcyber_admin.api.main"]
        assert records[0].getMessage().startswith("Request: GET /api/health from")
        assert records[-1].levelno == logging.INFO
        assert "Response: GET /api/health - 200" in records[-1].getMessage()

    async def test_client_error_logged_at_warning(
        self, api_client: AsyncClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="thinkcyber_admin.api.main"):
            await api_client.get("/api/categories/abc")

        records = [r for r in caplog.records if r.name == "thinkcyber_admin.api.main"]
        assert records[-1].levelno == logging.WARNING

    async def test_upload_path_not_logged(
        self, api_client: AsyncClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="thinkcyber_admin.api.main"):
            await api_client.post("/api/topics/5/modules/2/videos/upload")

        messages = [
            r.getMessage() for r in caplog.records if r.name == "thinkcyber_admin.api.main"
        ]
        assert all("[sensitive endpoint]" in m for m in messages)
        assert not any("/videos/upload" in m for m in messages)
