"""Integration tests for optional bearer authorization on /img routes."""

import pytest
from fastapi.testclient import TestClient

from fileserve.infrastructure.api.dependencies import get_app_settings
from fileserve.infrastructure.auth import jwt_service


@pytest.fixture
def enable_auth(app, settings):
    def _enable(**overrides):
        secured = settings.model_copy(update={"auth_enabled": True, **overrides})
        app.dependency_overrides[get_app_settings] = lambda: secured
        return secured

    return _enable


def auth_header(subject: str, groups: list[str] | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {jwt_service.create_access_token(subject, groups)}"}


def test_open_by_default(client: TestClient):
    assert client.get("/img/notes.txt").status_code == 200


def test_missing_token(client: TestClient, enable_auth):
    enable_auth()

    response = client.get("/img/notes.txt")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_token(client: TestClient, enable_auth):
    enable_auth()

    response = client.get("/img/notes.txt", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401


def test_valid_token(client: TestClient, enable_auth):
    enable_auth()

    response = client.get("/img/notes.txt", headers=auth_header("alice"))

    assert response.status_code == 200


def test_batch_requires_token(client: TestClient, enable_auth):
    enable_auth()

    response = client.post("/img/batch/base64", json={"filePaths": ["notes.txt"]})

    assert response.status_code == 401


def test_anonymous_allowed(client: TestClient, enable_auth):
    enable_auth(auth_allow_anonymous=True)

    assert client.get("/img/notes.txt").status_code == 200


def test_user_not_allowed(client: TestClient, enable_auth):
    enable_auth(allowed_users=["alice"])

    response = client.get("/img/notes.txt", headers=auth_header("mallory"))

    assert response.status_code == 403


def test_group_allowed(client: TestClient, enable_auth):
    enable_auth(allowed_groups=["Viewers"])

    response = client.get("/img/notes.txt", headers=auth_header("bob", ["viewers"]))

    assert response.status_code == 200


def test_health_is_not_gated(client: TestClient, enable_auth):
    enable_auth()

    assert client.get("/health").status_code == 200
