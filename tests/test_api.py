"""Tests for the HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from notion_cloner import __version__
from notion_cloner.api.dependencies import get_client_factory
from notion_cloner.api.main import app
from notion_cloner.errors import UnauthorizedError

from tests.fakes import PARENT_PAGE, SOURCE_DB

ENV_KEYS = [
    "NOTION_TOKEN",
    "SOURCE_DATABASE_ID",
    "PARENT_PAGE_ID",
    "NEW_DATABASE_NAME",
    "CLONER_ENV",
    "CLONER_ROW_BATCH_SIZE",
    "CLONER_EDGE_BATCH_SIZE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def api(fake_client):
    app.dependency_overrides[get_client_factory] = lambda: (lambda settings: fake_client)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_healthy_when_configured(self, api, monkeypatch):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")
        monkeypatch.setenv("SOURCE_DATABASE_ID", SOURCE_DB)
        monkeypatch.setenv("PARENT_PAGE_ID", PARENT_PAGE)

        response = api.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["hasToken"] is True
        assert body["version"] == __version__

    def test_unhealthy_when_token_missing(self, api):
        response = api.get("/api/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["hasToken"] is False

    def test_rejects_non_get_methods(self, api):
        response = api.post("/api/health")

        assert response.status_code == 405
        assert response.json()["error"] == "Method not allowed"


class TestDuplicate:
    def test_rejects_get_requests(self, api):
        response = api.get("/api/duplicate")

        assert response.status_code == 405
        assert response.json()["error"] == "Method not allowed"

    def test_handles_cors_preflight(self, api):
        response = api.options(
            "/api/duplicate",
            headers={"Origin": "https://example.com", "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_validates_missing_input(self, api, monkeypatch):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")

        response = api.post("/api/duplicate", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "Bad request"
        assert "sourceDatabaseId" in response.json()["details"]

    def test_validates_id_format(self, api, monkeypatch):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")

        response = api.post("/api/duplicate", json={
            "sourceDatabaseId": "invalid-id",
            "parentPageId": "also-invalid",
        })

        assert response.status_code == 400
        assert "valid Notion" in response.json()["details"]

    def test_missing_token(self, api):
        response = api.post("/api/duplicate", json={
            "sourceDatabaseId": "12345678901234567890123456789012",
            "parentPageId": "12345678901234567890123456789012",
        })

        assert response.status_code == 500
        assert response.json() == {
            "error": "Server configuration error",
            "details": "NOTION_TOKEN environment variable is not set",
        }

    def test_clones_database(self, api, monkeypatch, fake_client, source_database):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")

        response = api.post("/api/duplicate", json={
            "sourceDatabaseId": SOURCE_DB,
            "parentPageId": PARENT_PAGE,
            "newName": "Copy",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["copiedRowCount"] == 3
        assert body["failedRowCount"] == 0
        assert body["message"] == 'Database "Copy" successfully cloned!'
        assert body["newDatabaseId"] in fake_client.databases

    def test_falls_back_to_configured_ids(self, api, monkeypatch, fake_client, source_database):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")
        monkeypatch.setenv("SOURCE_DATABASE_ID", SOURCE_DB)
        monkeypatch.setenv("PARENT_PAGE_ID", PARENT_PAGE)
        monkeypatch.setenv("NEW_DATABASE_NAME", "Nightly copy")

        response = api.post("/api/duplicate")

        assert response.status_code == 200
        assert response.json()["message"] == 'Database "Nightly copy" successfully cloned!'

    def test_source_not_found(self, api, monkeypatch):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")

        response = api.post("/api/duplicate", json={"sourceDatabaseId": SOURCE_DB, "parentPageId": PARENT_PAGE})

        assert response.status_code == 404
        assert "details" not in response.json()

    def test_unauthorized_with_details_in_development(self, api, monkeypatch, fake_client):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")
        monkeypatch.setenv("CLONER_ENV", "development")

        def reject(database_id):
            raise UnauthorizedError("Unauthorized", "API token is invalid.")

        fake_client.retrieve_database = reject

        response = api.post("/api/duplicate", json={"sourceDatabaseId": SOURCE_DB, "parentPageId": PARENT_PAGE})

        assert response.status_code == 401
        assert response.json()["details"] == "API token is invalid."

    def test_wrongly_typed_field_is_a_bad_request(self, api, monkeypatch):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")

        response = api.post("/api/duplicate", json={"sourceDatabaseId": 123, "parentPageId": PARENT_PAGE})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Bad request"
        assert "sourceDatabaseId" in body["details"]

    def test_non_boolean_restore_hierarchy_is_a_bad_request(self, api, monkeypatch):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")

        response = api.post("/api/duplicate", json={
            "sourceDatabaseId": SOURCE_DB,
            "parentPageId": PARENT_PAGE,
            "restoreHierarchy": {"deep": True},
        })

        assert response.status_code == 400
        assert "restoreHierarchy" in response.json()["details"]

    def test_body_that_is_not_json_is_a_bad_request(self, api, monkeypatch):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")

        response = api.post(
            "/api/duplicate",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Bad request"

    @pytest.mark.parametrize("key", ["CLONER_ROW_BATCH_SIZE", "CLONER_EDGE_BATCH_SIZE"])
    def test_non_positive_batch_size_is_a_configuration_error(self, api, monkeypatch, key):
        monkeypatch.setenv("NOTION_TOKEN", "test-token")
        monkeypatch.setenv(key, "0")

        response = api.post("/api/duplicate", json={"sourceDatabaseId": SOURCE_DB, "parentPageId": PARENT_PAGE})

        assert response.status_code == 500
        assert response.json()["error"] == "Server configuration error"
        assert key in response.json()["details"]
