import pytest

from anime_episodes.config import get_settings


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Fresh settings with a test API key for every test."""
    monkeypatch.setenv("CRYSOLINE_API_KEY", "test-key")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
