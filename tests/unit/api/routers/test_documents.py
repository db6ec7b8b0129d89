"""
Tests for the terms and privacy policy endpoints.

Both resources are built by the same router factory, so the shared
behaviour is parametrized over them.
"""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from tests.factories.payloads import BackendDocumentFactory, DocumentPayloadFactory
from thinkcyber_admin.api.routers import documents

# CRITICAL: This line ensures async tests work with coverage
pytestmark = pytest.mark.asyncio

RESOURCES = pytest.mark.parametrize(
    ("endpoint", "label"),
    [("terms", "Terms and conditions"), ("privacy", "Privacy policy")],
)


class TestDocumentCrud:
    @RESOURCES
    async def test_create_applies_defaults(
        self, api_client: AsyncClient, fake_backend, endpoint: str, label: str
    ) -> None:
        payload = DocumentPayloadFactory()
        del payload["status"]
        payload["language"] = "EN"

        response = await api_client.post(f"/api/{endpoint}", json=payload)

        # status is required by the validator
        assert response.status_code == 400
        assert fake_backend.requests == []

        payload["status"] = "Draft"
        response = await api_client.post(f"/api/{endpoint}", json=payload)

        assert response.status_code == 201
        assert response.json()["message"] == f"{label} created successfully"
        sent = fake_backend.last_json()
        assert sent["language"] == "en"
        assert sent["effective_date"] is None

    @RESOURCES
    async def test_list_stats(
        self, api_client: AsyncClient, fake_backend, endpoint: str, label: str
    ) -> None:
        fake_backend.seed(
            endpoint,
            BackendDocumentFactory(id=1, version="1.0", status="Published"),
            BackendDocumentFactory(id=2, version="2.0", language="fr"),
        )

        body = (await api_client.get(f"/api/{endpoint}")).json()

        assert body["stats"] == {
            "total": 2,
            "draft": 1,
            "published": 1,
            "archived": 0,
            "languages": 2,
            "latestVersion": "2.0",
        }
        assert body["data"][0]["createdBy"] == "admin"

    @RESOURCES
    async def test_get_update_delete(
        self, api_client: AsyncClient, fake_backend, endpoint: str, label: str
    ) -> None:
        fake_backend.seed(endpoint, BackendDocumentFactory(id=3))

        got = await api_client.get(f"/api/{endpoint}/3")
        updated = await api_client.put(
            f"/api/{endpoint}/3", json=DocumentPayloadFactory(version="1.1")
        )
        deleted = await api_client.delete(f"/api/{endpoint}/3")

        assert got.json()["message"] == f"{label} retrieved successfully"
        assert updated.json()["data"]["version"] == "1.1"
        assert deleted.json()["message"] == f"{label} deleted successfully"


class TestDocumentValidation:
    async def test_terms_version_without_decimal(
        self, api_client: AsyncClient, fake_backend
    ) -> None:
        response = await api_client.put(
            "/api/terms/3", json=DocumentPayloadFactory(version="1")
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Version must be in format X.Y (e.g., 1.0, 2.1)"
        assert fake_backend.requests == []

    async def test_privacy_title_message(self, api_client: AsyncClient, fake_backend) -> None:
        response = await api_client.post(
            "/api/privacy", json=DocumentPayloadFactory(title="Priv")
        )

        assert response.json()["error"] == (
            "Privacy policy title must be at least 5 characters long"
        )

    async def test_invalid_ids(self, api_client: AsyncClient, fake_backend) -> None:
        terms = await api_client.get("/api/terms/abc")
        privacy = await api_client.delete("/api/privacy/abc")

        assert terms.json()["error"] == "Invalid terms and conditions ID"
        assert privacy.json()["error"] == "Invalid privacy policy ID"


class TestPublish:
    async def test_publish_defaults_effective_date(
        self, api_client: AsyncClient, fake_backend, monkeypatch
    ) -> None:
        monkeypatch.setattr(documents, "today_iso", lambda: "2024-05-01")
        fake_backend.reply(
            "POST",
            "terms/3/publish",
            200,
            {"success": True, "data": BackendDocumentFactory(id=3, status="Published")},
        )

        response = await api_client.post("/api/terms/3/publish")

        assert response.status_code == 200
        assert response.json()["message"] == "Terms and conditions published successfully"
        assert response.json()["data"]["status"] == "Published"
        assert fake_backend.last_json() == {"effective_date": "2024-05-01"}

    async def test_publish_with_effective_date(
        self, api_client: AsyncClient, fake_backend
    ) -> None:
        fake_backend.reply("POST", "privacy/4/publish", 200, {"success": True})

        response = await api_client.post(
            "/api/privacy/4/publish", json={"effectiveDate": "2025-01-01"}
        )

        assert response.json()["data"] is None
        assert fake_backend.last_json() == {"effective_date": "2025-01-01"}

    async def test_publish_missing(self, api_client: AsyncClient, fake_backend) -> None:
        fake_backend.reply(
            "POST", "privacy/4/publish", 404, {"error": "Privacy policy not found"}
        )

        response = await api_client.post("/api/privacy/4/publish")

        assert response.status_code == 404


class TestLatestTerms:
    async def test_latest_lowercases_language(
        self, api_client: AsyncClient, fake_backend
    ) -> None:
        fake_backend.reply(
            "GET",
            "terms/latest",
            200,
            {"success": True, "data": BackendDocumentFactory(language="fr")},
        )

        response = await api_client.get("/api/terms/latest", params={"language": "FR"})

        assert response.status_code == 200
        assert response.json()["message"] == (
            "Latest terms and conditions retrieved for language: fr"
        )
        assert fake_backend.last.url.params["language"] == "fr"

    async def test_latest_not_found(self, api_client: AsyncClient, fake_backend) -> None:
        fake_backend.reply(
            "GET", "terms/latest", 404, {"error": "No published terms not found"}
        )

        response = await api_client.get("/api/terms/latest")

        assert response.status_code == 404
        assert fake_backend.last.url.params["language"] == "en"
