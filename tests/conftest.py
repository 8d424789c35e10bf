"""
pytest configuration
Provides an app wired to an in-memory mongomock collection and mocked
outbound clients (image host, SerpAPI).
"""

import os
from unittest.mock import AsyncMock, Mock

import mongomock
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from profilehub.core.config import get_settings  # noqa: E402
from profilehub.db.mongodb import get_profiles_collection  # noqa: E402
from profilehub.main import app  # noqa: E402
from profilehub.services.image_host import get_image_uploader  # noqa: E402
from profilehub.services.opportunity_service import get_search_client  # noqa: E402


UPLOADED_IMAGE_URL = "https://res.cloudinary.com/demo/image/upload/v1/avatar.png"


@pytest.fixture
def collection():
    """Fresh profiles collection per test."""
    return mongomock.MongoClient().db.profiles


@pytest.fixture
def uploader():
    """Image host mock; upload() resolves to a fixed URL."""
    mock = Mock()
    mock.upload = AsyncMock(return_value=UPLOADED_IMAGE_URL)
    return mock


@pytest.fixture
def search_client():
    """SerpAPI client mock; tests set search.return_value / side_effect."""
    mock = Mock()
    mock.search = AsyncMock(return_value={})
    return mock


@pytest.fixture
def client(collection, uploader, search_client):
    get_settings.cache_clear()
    app.dependency_overrides[get_profiles_collection] = lambda: collection
    app.dependency_overrides[get_image_uploader] = lambda: uploader
    app.dependency_overrides[get_search_client] = lambda: search_client
    # Not used as a context manager: startup index creation needs a real server
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a profile through the API and return (profile, token)."""
    def _register(name="ada", password="s3cret", **fields):
        form = {"name": name, "password": password, **fields}
        response = client.post("/api/profiles/add", data=form)
        assert response.status_code == 200, response.text
        body = response.json()
        return body["profile"], body["token"]
    return _register


@pytest.fixture
def auth_header():
    def _auth_header(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}
    return _auth_header
