"""
Test configuration and fixtures for the short-link bot.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient

from golinks_app.config import settings
from golinks_app.dependencies import get_allowed_domains, get_store
from tests.fakes import ACCESS_KEY, DOMAIN, RecordingKVStore, RecordingNotifier


@pytest.fixture(scope="function")
def store():
    """
    Fresh in-memory store for each test.
    This ensures tests are isolated and don't affect each other.
    """
    return RecordingKVStore()


@pytest.fixture(scope="function")
def notifier():
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(store, monkeypatch):
    """
    Create an admin API test client with the store dependency overridden.
    """
    from main import app

    monkeypatch.setattr(settings, "access_key", ACCESS_KEY)

    # Override the store and domain dependencies
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_allowed_domains] = lambda: (DOMAIN,)

    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {ACCESS_KEY}"}
