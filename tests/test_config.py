import pytest
from pydantic import ValidationError

from phraseapp_client.config import ClientSettings, get_settings
from phraseapp_client.constants import DEFAULT_BASE_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env files."""
    monkeypatch.chdir(tmp_path)
    for name in ("ACCESS_TOKEN", "BASE_URL", "MAX_RETRIES", "MAX_PAGES"):
        monkeypatch.delenv(f"PHRASEAPP_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = ClientSettings()

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.access_token is None
    assert settings.max_retries == 3
    assert settings.respect_retry_after is True
    assert settings.rewrite_next_path is False
    assert settings.max_pages is None


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("PHRASEAPP_ACCESS_TOKEN", "env-token")
    monkeypatch.setenv("PHRASEAPP_MAX_RETRIES", "5")
    monkeypatch.setenv("PHRASEAPP_MAX_PAGES", "10")

    settings = ClientSettings()

    assert settings.access_token == "env-token"
    assert settings.max_retries == 5
    assert settings.max_pages == 10


def test_env_file(tmp_path):
    (tmp_path / ".env").write_text("PHRASEAPP_BASE_URL=https://eu.example.com/v2\n")

    assert ClientSettings().base_url == "https://eu.example.com/v2"


@pytest.mark.parametrize(
    "field, value", [("max_retries", -1), ("max_pages", 0), ("backoff_factor", -0.5)]
)
def test_validation(field, value):
    with pytest.raises(ValidationError):
        ClientSettings(**{field: value})


def test_get_settings_is_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("PHRASEAPP_MAX_RETRIES", "9")

    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().max_retries == 9
