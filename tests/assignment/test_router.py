"""Tests for the App Store VPP HTTP endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.vpp.api.exceptions import ServerError, ValidationError
from src.vpp.assignment.api.dependencies import (
    get_query_cache,
    get_vpp_repository,
    verify_api_key,
)
from src.vpp.assignment.api.router import router


@pytest.fixture
def client(repository, cache):
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_vpp_repository] = lambda: repository
    app.dependency_overrides[get_query_cache] = lambda: cache
    app.dependency_overrides[verify_api_key] = lambda: True
    return TestClient(app)


class TestViewEndpoint:

    def test_list(self, client):
        response = client.get("/api/app-store-vpp/view", params={"team_id": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "list"
        assert [a["name"] for a in data["apps"]] == ["Slack", "Zoom"]
        assert data["submit_disabled"] is True

    def test_not_configured(self, client, repository, not_configured_error):
        repository.status_error = not_configured_error

        data = client.get("/api/app-store-vpp/view", params={"team_id": 5}).json()

        assert data["state"] == "enable_vpp"
        assert data["link_url"] == "/settings/integrations/vpp"

    def test_empty(self, client):
        data = client.get("/api/app-store-vpp/view", params={"team_id": 7}).json()

        assert data["state"] == "empty"
        assert data["apps"] == []

    def test_team_id_required(self, client):
        assert client.get("/api/app-store-vpp/view").status_code == 422


class TestAssignEndpoint:

    def test_success(self, client, repository):
        response = client.post(
            "/api/app-store-vpp/assign",
            json={"team_id": 5, "app_store_id": "546505307"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "success"
        assert data["app_name"] == "Zoom"
        assert data["redirect_url"] == "/software/titles?team_id=5&available_for_install=true"
        assert data["notifications"] == [{
            "level": "success",
            "message": "Zoom successfully added. Go to Host details page to install software.",
        }]
        assert data["exited"] is True
        assert repository.added == [(5, "546505307")]

    def test_duplicate(self, client, repository):
        repository.add_error = ValidationError(
            "Bad request", status_code=409, reason="License already assigned to team"
        )

        data = client.post(
            "/api/app-store-vpp/assign",
            json={"team_id": 5, "app_store_id": "546505307"},
        ).json()

        assert data["outcome"] == "duplicate_assignment"
        assert data["notifications"][0]["message"] == "License already assigned to team"
        assert data["redirect_url"] is None

    def test_generic_failure(self, client, repository):
        repository.add_error = ServerError("internal error")

        data = client.post(
            "/api/app-store-vpp/assign",
            json={"team_id": 5, "app_store_id": "546505307"},
        ).json()

        assert data["outcome"] == "generic_failure"
        assert data["notifications"][0]["message"] == "Couldn't add software. Please try again."

    def test_unknown_app(self, client, repository):
        response = client.post(
            "/api/app-store-vpp/assign",
            json={"team_id": 5, "app_store_id": "0"},
        )

        assert response.status_code == 422
        assert repository.added == []

    def test_vpp_not_configured(self, client, repository, not_configured_error):
        repository.status_error = not_configured_error

        response = client.post(
            "/api/app-store-vpp/assign",
            json={"team_id": 5, "app_store_id": "546505307"},
        )

        assert response.status_code == 409
        assert repository.added == []

    def test_invalid_body(self, client):
        response = client.post("/api/app-store-vpp/assign", json={"team_id": 5, "app_store_id": ""})
        assert response.status_code == 422


class TestAuth:

    def test_missing_api_key(self, repository, cache, monkeypatch):
        monkeypatch.setenv("API_KEY", "secret")
        monkeypatch.delenv("DISABLE_AUTH", raising=False)
        app = FastAPI()
        app.include_router(router)
        app.dependency_overrides[get_vpp_repository] = lambda: repository
        app.dependency_overrides[get_query_cache] = lambda: cache
        client = TestClient(app)

        assert client.get("/api/app-store-vpp/view", params={"team_id": 5}).status_code == 401
        ok = client.get(
            "/api/app-store-vpp/view",
            params={"team_id": 5},
            headers={"X-API-Key": "secret"},
        )
        assert ok.status_code == 200

    def test_health_is_public(self, client):
        data = client.get("/api/app-store-vpp/health").json()
        assert data["status"] in ("healthy", "degraded")
