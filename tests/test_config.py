"""
Settings tests - environment driven defaults.
"""

import pytest

from requestify import ClientSettings, HttpClient, NotRegisteredError, json_step
from requestify.constants import DEFAULT_CACHE_LIFETIME_MS


def test_defaults(monkeypatch):
    for name in (
        "REQUESTIFY_BASE_URL",
        "REQUESTIFY_TIMEOUT",
        "REQUESTIFY_ENV",
        "REQUESTIFY_CACHE",
        "REQUESTIFY_CACHE_LIFETIME_MS",
        "REQUESTIFY_LOG_TIMING",
        "REQUESTIFY_TRUST_ENV",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = ClientSettings.from_env()

    assert settings.base_url == ""
    assert settings.timeout == 30.0
    assert settings.strict_steps is True
    assert settings.trust_env is False
    assert settings.log_timing is True
    cache = settings.cache_config()
    assert cache.enabled is False
    assert cache.lifetime == DEFAULT_CACHE_LIFETIME_MS == 300_000


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REQUESTIFY_BASE_URL", "https://env.test")
    monkeypatch.setenv("REQUESTIFY_TIMEOUT", "5")
    monkeypatch.setenv("REQUESTIFY_ENV", "production")
    monkeypatch.setenv("REQUESTIFY_CACHE", "1")
    monkeypatch.setenv("REQUESTIFY_CACHE_LIFETIME_MS", "1000")
    monkeypatch.setenv("REQUESTIFY_LOG_TIMING", "0")

    settings = ClientSettings.from_env()

    assert settings.base_url == "https://env.test"
    assert settings.timeout == 5.0
    assert settings.strict_steps is False
    assert settings.cache_config().enabled is True
    assert settings.cache_config().lifetime == 1000
    assert settings.log_timing is False


def test_client_picks_up_environment(monkeypatch):
    monkeypatch.setenv("REQUESTIFY_BASE_URL", "https://env.test")
    monkeypatch.setenv("REQUESTIFY_ENV", "production")

    api = HttpClient(steps=[json_step()])

    assert api.base_url == "https://env.test"
    # production: removing an unknown step is a no-op
    api.remove_step("absent")
    assert api.list_steps() == [{"name": "json"}]


def test_explicit_strict_wins_over_settings():
    api = HttpClient(settings=ClientSettings(strict_steps=False), strict=True)
    with pytest.raises(NotRegisteredError):
        api.remove_step("absent")
