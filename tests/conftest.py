import pytest
from fastapi.testclient import TestClient

from cardbox.core.config import get_settings
from cardbox.main import create_app
from cardbox.services.collection import FlashcardCollection


@pytest.fixture
def settings_env(tmp_path, monkeypatch):
    """
    Isolated STORAGE_PATH and a fresh settings cache for each test.
    """
    storage = tmp_path / "storage"
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("APP_NAME", "Cardbox API (tests)")
    monkeypatch.setenv("STORAGE_PATH", str(storage))
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost")
    monkeypatch.setenv("API_KEY", "change_me")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    get_settings.cache_clear()
    yield storage
    get_settings.cache_clear()


@pytest.fixture
def test_client(settings_env):
    app = create_app()
    with TestClient(app) as client:
        yield client


@pytest.fixture
def collection():
    return FlashcardCollection()


@pytest.fixture
def geo_collection(collection):
    """Three cards, two of them tagged."""
    collection.add("Capital of France?", "Paris")
    collection.add("Capital of Italy?", "Rome")
    collection.add("2+2?", "B", options=["3", "4", "5"])
    collection.tag(1, "geo")
    collection.tag(2, "geo")
    collection.tag(3, "math")
    return collection
