"""Fixtures for HTTP integration tests."""

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fileserve.core.config import Settings
from fileserve.infrastructure.api.app import create_app
from fileserve.infrastructure.api.dependencies import get_app_settings


@pytest.fixture
def app(settings: Settings, monkeypatch: pytest.MonkeyPatch) -> FastAPI:
    """Application wired to the test storage root.

    The environment is patched too, since lifespan and middleware read the
    global settings rather than the dependency.
    """
    monkeypatch.setenv("FILESERVE_ROOT_PATH", settings.root_path)
    application = create_app()
    application.dependency_overrides[get_app_settings] = lambda: settings
    return application


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
